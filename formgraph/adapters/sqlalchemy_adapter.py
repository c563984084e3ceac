"""
FORMGRAPH - SQLAlchemy Adapter
ModelAdapter over a SQLAlchemy 2.x declarative registry and Session
"""

from __future__ import annotations

import logging
from typing import Any

import inflection
from sqlalchemy import create_engine
from sqlalchemy.inspection import inspect
from sqlalchemy.orm import RelationshipDirection, RelationshipProperty, Session, sessionmaker

from formgraph.config import Settings, get_settings
from formgraph.errors import (
    RecordNotFoundError,
    UnknownAssociationError,
    UnknownAttributeError,
    UnknownModelError,
)
from formgraph.schema import AssociationDescriptor, AssociationKind

from .base import ModelAdapter

logger = logging.getLogger(__name__)


def create_session_factory(settings: Settings | None = None) -> sessionmaker:
    """Engine + sessionmaker built from FORMGRAPH_DATABASE_URL"""
    settings = settings or get_settings()
    engine = create_engine(settings.database_url, echo=settings.database_echo)
    return sessionmaker(bind=engine)


class SQLAlchemyAdapter(ModelAdapter):
    """
    Reflection comes from the mapper of each class:
    - MANYTOONE relationships are belongs-to
    - list relationships (uselist) are to-many
    - scalar ONETOMANY relationships (uselist=False) are to-one
    """

    def __init__(self, session: Session, base: Any):
        self.session = session
        self.base = base

    # =========================================================================
    # MODELS
    # =========================================================================

    def _models_by_name(self) -> dict[str, type]:
        return {mapper.class_.__name__: mapper.class_ for mapper in self.base.registry.mappers}

    def resolve_model(self, accessor: str) -> type:
        model = self._models_by_name().get(inflection.camelize(accessor))
        if model is None:
            raise UnknownModelError(accessor)
        return model

    def model_of(self, record: Any) -> type:
        return type(record)

    def model_name(self, model: type) -> str:
        return model.__name__

    def _relationship(self, model: type, name: str) -> RelationshipProperty | None:
        return inspect(model).relationships.get(name)

    def reflect_association(self, model: type, name: str) -> AssociationDescriptor | None:
        relationship = self._relationship(model, name)
        if relationship is None:
            return None

        if relationship.direction is RelationshipDirection.MANYTOONE:
            kind = AssociationKind.BELONGS_TO
        elif relationship.uselist:
            kind = AssociationKind.TO_MANY
        else:
            kind = AssociationKind.TO_ONE

        return AssociationDescriptor(
            name=name, kind=kind, target=relationship.mapper.class_.__name__
        )

    # =========================================================================
    # RECORDS
    # =========================================================================

    def _primary_key_names(self, model: type) -> set[str]:
        mapper = inspect(model)
        return {mapper.get_property_by_column(column).key for column in mapper.primary_key}

    def _coerce_identity(self, model: type, record_id: Any) -> Any:
        """Form ids arrive as strings; convert to the primary key's python type"""
        column = inspect(model).primary_key[0]
        try:
            python_type = column.type.python_type
        except NotImplementedError:
            return record_id
        if isinstance(record_id, python_type):
            return record_id
        try:
            return python_type(record_id)
        except (TypeError, ValueError):
            raise RecordNotFoundError(model.__name__, record_id) from None

    def find(self, model: type, record_id: Any) -> Any:
        record = self.session.get(model, self._coerce_identity(model, record_id))
        if record is None:
            raise RecordNotFoundError(model.__name__, record_id)
        return record

    def new_record(self, model: type) -> Any:
        return model()

    def is_new_record(self, record: Any) -> bool:
        return not inspect(record).has_identity

    def assign_attributes(self, record: Any, attrs: dict[str, Any]) -> Any:
        model = type(record)
        columns = {attr.key for attr in inspect(model).column_attrs}
        primary_keys = self._primary_key_names(model)
        for key, value in attrs.items():
            if key in primary_keys:
                continue
            if key not in columns:
                raise UnknownAttributeError(model.__name__, key)
            setattr(record, key, value)
        return record

    # =========================================================================
    # ASSOCIATIONS
    # =========================================================================

    def build_associated(self, parent: Any, name: str, kind: AssociationKind) -> Any:
        relationship = self._relationship(type(parent), name)
        if relationship is None:
            raise UnknownAssociationError(type(parent).__name__, name)
        child = relationship.mapper.class_()
        if kind is AssociationKind.TO_MANY:
            getattr(parent, name).append(child)
        return child

    def find_in_collection(self, parent: Any, name: str, record_id: Any) -> Any:
        relationship = self._relationship(type(parent), name)
        target = relationship.mapper.class_
        wanted = self._coerce_identity(target, record_id)
        for member in getattr(parent, name):
            identity = inspect(member).identity
            if identity is not None and identity[0] == wanted:
                return member
        raise RecordNotFoundError(target.__name__, record_id, association=name)

    def read_association(self, parent: Any, name: str) -> Any:
        return getattr(parent, name)

    def attach(self, parent: Any, name: str, kind: AssociationKind, child: Any) -> None:
        if kind is AssociationKind.TO_MANY:
            collection = getattr(parent, name)
            if not any(member is child for member in collection):
                collection.append(child)
        else:
            setattr(parent, name, child)

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def save(self, record: Any) -> None:
        self.session.add(record)

    def commit(self) -> None:
        self.session.commit()
