"""
FORMGRAPH - Model Adapter Contract
Everything the populator needs to know about persistence and reflection
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from formgraph.schema import AssociationDescriptor, AssociationKind


class ModelAdapter(ABC):
    """
    Bridge between the populator and an object-relational layer.

    Implementations resolve model types, reflect associations, look records
    up by id, build transient children and merge scalar attributes. They
    never decide *which* of those to do; the populator does.
    """

    # =========================================================================
    # MODELS
    # =========================================================================

    @abstractmethod
    def resolve_model(self, accessor: str) -> Any:
        """Model type for "line_item" or "LineItem", UnknownModelError otherwise"""

    @abstractmethod
    def model_of(self, record: Any) -> Any:
        """Model type of a record"""

    @abstractmethod
    def model_name(self, model: Any) -> str:
        """CamelCase name of a model type"""

    @abstractmethod
    def reflect_association(
        self, model: Any, name: str
    ) -> AssociationDescriptor | None:
        """Descriptor of the association `name`, None when it does not exist"""

    # =========================================================================
    # RECORDS
    # =========================================================================

    @abstractmethod
    def find(self, model: Any, record_id: Any) -> Any:
        """Persisted record by id, RecordNotFoundError otherwise"""

    @abstractmethod
    def new_record(self, model: Any) -> Any:
        """Transient record of the given model"""

    @abstractmethod
    def is_new_record(self, record: Any) -> bool:
        """True until the record has been persisted"""

    @abstractmethod
    def assign_attributes(self, record: Any, attrs: dict[str, Any]) -> Any:
        """
        Merge scalar values into the record.
        Keys absent from `attrs` keep their current value; the identity
        column is never overwritten.
        """

    # =========================================================================
    # ASSOCIATIONS
    # =========================================================================

    @abstractmethod
    def build_associated(self, parent: Any, name: str, kind: AssociationKind) -> Any:
        """
        New transient child for `parent.name`.
        to-many: appended to the collection. to-one: left unattached.
        """

    @abstractmethod
    def find_in_collection(self, parent: Any, name: str, record_id: Any) -> Any:
        """Existing member of `parent.name` by id, RecordNotFoundError otherwise"""

    @abstractmethod
    def read_association(self, parent: Any, name: str) -> Any:
        """Current value of the to-one slot `parent.name` (may be None)"""

    @abstractmethod
    def attach(self, parent: Any, name: str, kind: AssociationKind, child: Any) -> None:
        """Set the to-one slot, or append to the collection if not yet a member"""

    # =========================================================================
    # PERSISTENCE (service layer only)
    # =========================================================================

    @abstractmethod
    def save(self, record: Any) -> None:
        """Schedule a record (and its new associations) for persistence"""

    def commit(self) -> None:
        """Flush scheduled work. No-op for adapters that save eagerly."""
