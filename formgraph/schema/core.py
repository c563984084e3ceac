"""
FORMGRAPH - Core Schema
Enums et modèles décrivant les types d'entités et leurs associations
"""

from enum import Enum

from pydantic import BaseModel, Field, model_validator


# =============================================================================
# ENUMS
# =============================================================================


class AssociationKind(str, Enum):
    TO_ONE = "to_one"
    TO_MANY = "to_many"
    BELONGS_TO = "belongs_to"


# =============================================================================
# DESCRIPTORS
# =============================================================================


class AssociationDescriptor(BaseModel):
    """Reflection metadata for one association slot"""

    name: str = Field(..., min_length=1)
    kind: AssociationKind
    target: str = Field(..., min_length=1, description="CamelCase model name")


class ModelSchema(BaseModel):
    """
    Statically declared schema of an entity type.
    An empty `attributes` set accepts any scalar key.
    """

    name: str = Field(..., min_length=1)
    attributes: set[str] = Field(default_factory=set)
    associations: dict[str, AssociationDescriptor] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_association_keys(self) -> "ModelSchema":
        for key, descriptor in self.associations.items():
            if key != descriptor.name:
                raise ValueError(
                    f"Association key '{key}' does not match descriptor name "
                    f"'{descriptor.name}' on {self.name}"
                )
        return self

    def association(self, name: str) -> AssociationDescriptor | None:
        return self.associations.get(name)

    def accepts_attribute(self, key: str) -> bool:
        return not self.attributes or key in self.attributes

    @classmethod
    def declare(
        cls,
        name: str,
        attributes: list[str] | None = None,
        **associations: tuple[AssociationKind, str],
    ) -> "ModelSchema":
        """
        Shorthand constructor:
            ModelSchema.declare("Order", ["total"], items=(AssociationKind.TO_MANY, "LineItem"))
        """
        return cls(
            name=name,
            attributes=set(attributes or []),
            associations={
                assoc_name: AssociationDescriptor(
                    name=assoc_name, kind=kind, target=target
                )
                for assoc_name, (kind, target) in associations.items()
            },
        )
