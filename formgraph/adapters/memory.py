"""
FORMGRAPH - In-Memory Adapter
Reference ORM over plain Python objects, driven by declared ModelSchemas
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

import inflection

from formgraph.errors import (
    RecordNotFoundError,
    UnknownAssociationError,
    UnknownAttributeError,
    UnknownModelError,
)
from formgraph.schema import AssociationDescriptor, AssociationKind, ModelSchema

from .base import ModelAdapter

logger = logging.getLogger(__name__)


# =============================================================================
# RECORDS
# =============================================================================


class MemoryRecord:
    """An entity: identity, scalar attributes and association slots"""

    def __init__(self, schema: ModelSchema, id: Any = None, **attributes: Any):
        self.schema = schema
        self.id = id
        self.attributes: dict[str, Any] = dict(attributes)
        self._slots: dict[str, Any] = {}

    def __getitem__(self, key: str) -> Any:
        return self.attributes[key]

    def association(self, name: str) -> Any:
        """Collection (list) for to-many, record or None for to-one"""
        descriptor = self._descriptor(name)
        if descriptor.kind is AssociationKind.TO_MANY:
            return self._slots.setdefault(name, [])
        return self._slots.get(name)

    def set_association(self, name: str, value: Any) -> None:
        descriptor = self._descriptor(name)
        if descriptor.kind is AssociationKind.TO_MANY:
            self._slots[name] = list(value)
        else:
            self._slots[name] = value

    def associated_records(self) -> Iterable[MemoryRecord]:
        for value in self._slots.values():
            if isinstance(value, list):
                yield from value
            elif value is not None:
                yield value

    def _descriptor(self, name: str) -> AssociationDescriptor:
        descriptor = self.schema.association(name)
        if descriptor is None:
            raise UnknownAssociationError(self.schema.name, name)
        return descriptor

    def __repr__(self) -> str:
        return f"<{self.schema.name} id={self.id!r} {self.attributes!r}>"


# =============================================================================
# STORE
# =============================================================================


@dataclass
class MemoryStore:
    """Persisted records by model name and id"""

    _records: dict[str, dict[str, MemoryRecord]] = field(default_factory=dict)
    _sequences: dict[str, Iterator[int]] = field(default_factory=dict)

    def add(self, record: MemoryRecord) -> MemoryRecord:
        model = record.schema.name
        if record.id is None:
            sequence = self._sequences.setdefault(model, itertools.count(1))
            record.id = next(sequence)
            while str(record.id) in self._records.get(model, {}):
                record.id = next(sequence)
        self._records.setdefault(model, {})[str(record.id)] = record
        return record

    def get(self, model: str, record_id: Any) -> MemoryRecord | None:
        return self._records.get(model, {}).get(str(record_id))

    def all(self, model: str) -> list[MemoryRecord]:
        return list(self._records.get(model, {}).values())

    def __contains__(self, record: MemoryRecord) -> bool:
        if record.id is None:
            return False
        return self.get(record.schema.name, record.id) is record


# =============================================================================
# ADAPTER
# =============================================================================


class InMemoryAdapter(ModelAdapter):
    """ModelAdapter over MemoryRecords"""

    def __init__(
        self,
        schemas: Iterable[ModelSchema],
        store: MemoryStore | None = None,
        id_key: str = "id",
    ):
        self.schemas: dict[str, ModelSchema] = {s.name: s for s in schemas}
        self.store = store if store is not None else MemoryStore()
        self.id_key = id_key

    # =========================================================================
    # MODELS
    # =========================================================================

    def resolve_model(self, accessor: str) -> ModelSchema:
        schema = self.schemas.get(inflection.camelize(accessor))
        if schema is None:
            raise UnknownModelError(accessor)
        return schema

    def model_of(self, record: MemoryRecord) -> ModelSchema:
        return record.schema

    def model_name(self, model: ModelSchema) -> str:
        return model.name

    def reflect_association(
        self, model: ModelSchema, name: str
    ) -> AssociationDescriptor | None:
        return model.association(name)

    # =========================================================================
    # RECORDS
    # =========================================================================

    def find(self, model: ModelSchema, record_id: Any) -> MemoryRecord:
        record = self.store.get(model.name, record_id)
        if record is None:
            raise RecordNotFoundError(model.name, record_id)
        return record

    def new_record(self, model: ModelSchema) -> MemoryRecord:
        return MemoryRecord(model)

    def is_new_record(self, record: MemoryRecord) -> bool:
        return record not in self.store

    def assign_attributes(
        self, record: MemoryRecord, attrs: dict[str, Any]
    ) -> MemoryRecord:
        schema = record.schema
        values = {}
        for key, value in attrs.items():
            if key == self.id_key:
                continue
            if key in schema.associations or not schema.accepts_attribute(key):
                raise UnknownAttributeError(schema.name, key)
            values[key] = value
        record.attributes = {**record.attributes, **values}
        return record

    # =========================================================================
    # ASSOCIATIONS
    # =========================================================================

    def build_associated(
        self, parent: MemoryRecord, name: str, kind: AssociationKind
    ) -> MemoryRecord:
        descriptor = parent._descriptor(name)
        child = MemoryRecord(self.resolve_model(descriptor.target))
        if kind is AssociationKind.TO_MANY:
            parent.association(name).append(child)
        return child

    def find_in_collection(
        self, parent: MemoryRecord, name: str, record_id: Any
    ) -> MemoryRecord:
        for member in parent.association(name):
            if member.id is not None and str(member.id) == str(record_id):
                return member
        target = parent._descriptor(name).target
        raise RecordNotFoundError(target, record_id, association=name)

    def read_association(self, parent: MemoryRecord, name: str) -> MemoryRecord | None:
        return parent.association(name)

    def attach(
        self,
        parent: MemoryRecord,
        name: str,
        kind: AssociationKind,
        child: MemoryRecord,
    ) -> None:
        if kind is AssociationKind.TO_MANY:
            collection = parent.association(name)
            if not any(member is child for member in collection):
                collection.append(child)
        else:
            parent.set_association(name, child)

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def save(self, record: MemoryRecord) -> None:
        """Persist the record and cascade to associated records not yet saved"""
        pending = [record]
        seen: set[int] = set()
        while pending:
            current = pending.pop()
            if id(current) in seen:
                continue
            seen.add(id(current))
            if self.is_new_record(current):
                self.store.add(current)
                logger.debug(f"[MEMORY] Saved {current!r}")
            pending.extend(
                child
                for child in current.associated_records()
                if self.is_new_record(child)
            )
