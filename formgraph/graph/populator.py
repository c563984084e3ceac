"""
FORMGRAPH - Graph Populator
Binds a nested form submission onto a root record and its associations

Walk (depth-first, single pass):
1. Root: found by id when the top level carries one, built otherwise
2. Each level: scalars merged onto the record, then every
   `<name>_attributes` entry dispatched on its association kind
3. Children: found through the parent when they carry an id (and listed in
   `records_to_save`), built through the parent otherwise

Nothing is persisted here. The caller saves the root (which cascades to the
newly built children) and every record in `records_to_save`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from formgraph.adapters.base import ModelAdapter
from formgraph.config import Settings, get_settings
from formgraph.errors import (
    ParameterShapeError,
    RecordNotFoundError,
    UnknownAssociationError,
    UnsupportedAssociationError,
)
from formgraph.schema import (
    AssociationDescriptor,
    AssociationKind,
    CollectionParam,
    NodeParam,
    parse_params,
)
from formgraph.utils.naming import association_name_in

from .registry import SaveList

logger = logging.getLogger(__name__)


@dataclass
class PopulateResult:
    """Root record plus the existing records the caller must save"""

    root: Any
    records_to_save: list[Any] = field(default_factory=list)


# =============================================================================
# GRAPH POPULATOR
# =============================================================================


class GraphPopulator:
    """
    One instance per submission: `records_to_save` accumulates across the
    walk and is never reset.
    """

    def __init__(
        self,
        model_accessor: str,
        adapter: ModelAdapter,
        settings: Settings | None = None,
    ):
        self.model_accessor = model_accessor
        self.adapter = adapter
        self.settings = settings or get_settings()
        self.records_to_save = SaveList()

    @property
    def suffix(self) -> str:
        return self.settings.attributes_suffix

    @property
    def id_key(self) -> str:
        return self.settings.id_key

    def populate(self, params: Mapping[str, Any] | NodeParam) -> Any:
        """Main entry point - returns the populated root record"""
        node = parse_params(params, self.suffix)
        record = self._find_or_create_root(node)
        return self._populate(record, node)

    # =========================================================================
    # HOOKS (override in subclasses)
    # =========================================================================

    def populate_individual_record(self, record: Any, attrs: dict[str, Any]) -> Any:
        """Map this level's scalar parameters onto the record"""
        return self.adapter.assign_attributes(record, attrs)

    def find_associated_record(
        self,
        parent: Any,
        descriptor: AssociationDescriptor,
        record_id: Any,
        node: NodeParam,
    ) -> Any:
        """
        Look up an existing child given its parent and its own parameters.

        to-many: member of the parent's collection with that id.
        to-one: the parent's current value; the submitted id is not used,
        the slot is trusted to already hold the right record.
        """
        if descriptor.kind is AssociationKind.TO_MANY:
            return self.adapter.find_in_collection(parent, descriptor.name, record_id)

        record = self.adapter.read_association(parent, descriptor.name)
        if record is None:
            raise RecordNotFoundError(
                descriptor.target, record_id, association=descriptor.name
            )
        return record

    # =========================================================================
    # WALK
    # =========================================================================

    def _find_or_create_root(self, node: NodeParam) -> Any:
        model = self.adapter.resolve_model(self.model_accessor)
        record_id = node.identity(self.id_key)
        if record_id is not None:
            logger.debug(
                f"[POPULATE] Loading {self.adapter.model_name(model)} id={record_id!r}"
            )
            return self.adapter.find(model, record_id)
        logger.debug(f"[POPULATE] Building new {self.adapter.model_name(model)}")
        return self.adapter.new_record(model)

    def _populate(self, record: Any, node: NodeParam) -> Any:
        self.populate_individual_record(record, node.scalars())

        model = self.adapter.model_of(record)
        model_name = self.adapter.model_name(model)

        for key, value in node.associations():
            name = association_name_in(key, self.suffix)
            if name is None:
                raise ParameterShapeError(
                    f"Nested parameters under '{key}' must use the "
                    f"'{self.suffix}' suffix",
                    model=model_name,
                    key=key,
                )

            descriptor = self.adapter.reflect_association(model, name)
            if descriptor is None:
                raise UnknownAssociationError(model_name, name)

            kind = descriptor.kind
            logger.debug(f"[ASSOC] {model_name}.{name} ({getattr(kind, 'value', kind)})")

            if kind is AssociationKind.TO_MANY:
                self._populate_to_many(record, descriptor, self._records_in(value, model_name, key))
            elif kind is AssociationKind.TO_ONE:
                if not isinstance(value, NodeParam):
                    raise ParameterShapeError(
                        f"'{key}' is a to-one association and takes a single record",
                        model=model_name,
                        key=key,
                    )
                self._populate_to_one(record, descriptor, value)
            elif kind is AssociationKind.BELONGS_TO:
                raise UnsupportedAssociationError(model_name, name)
            else:
                raise UnknownAssociationError(model_name, name, kind)

        return record

    def _populate_to_many(
        self, parent: Any, descriptor: AssociationDescriptor, records: list[NodeParam]
    ) -> None:
        # Order of `records` is not meaningful
        for node in records:
            child = self._find_or_build_associated(parent, descriptor, node)
            if self.adapter.is_new_record(child):
                self.adapter.attach(parent, descriptor.name, descriptor.kind, child)
            self._populate(child, node)

    def _populate_to_one(
        self, parent: Any, descriptor: AssociationDescriptor, node: NodeParam
    ) -> None:
        child = self._find_or_build_associated(parent, descriptor, node)
        if self.adapter.is_new_record(child):
            self.adapter.attach(parent, descriptor.name, descriptor.kind, child)
        self._populate(child, node)

    def _find_or_build_associated(
        self, parent: Any, descriptor: AssociationDescriptor, node: NodeParam
    ) -> Any:
        record_id = node.identity(self.id_key)
        if record_id is not None:
            record = self.find_associated_record(parent, descriptor, record_id, node)
            self.records_to_save.append(record)
            logger.debug(
                f"[ASSOC] Existing {descriptor.target} for {descriptor.name} "
                f"(id={record_id!r})"
            )
            return record

        logger.debug(f"[ASSOC] Building new {descriptor.target} for {descriptor.name}")
        return self.adapter.build_associated(parent, descriptor.name, descriptor.kind)

    def _records_in(
        self, value: NodeParam | CollectionParam, model_name: str, key: str
    ) -> list[NodeParam]:
        """Records of a to-many value; an empty mapping is an empty collection"""
        if isinstance(value, CollectionParam):
            return list(value.records)
        if not len(value):
            return []
        raise ParameterShapeError(
            f"'{key}' is a to-many association and takes a collection of records",
            model=model_name,
            key=key,
        )


# =============================================================================
# ENTRY POINT
# =============================================================================


def populate(
    model_accessor: str,
    params: Mapping[str, Any] | NodeParam,
    adapter: ModelAdapter,
    settings: Settings | None = None,
) -> PopulateResult:
    """Populate with a fresh GraphPopulator and return root + records to save"""
    populator = GraphPopulator(model_accessor, adapter, settings)
    root = populator.populate(params)
    return PopulateResult(root=root, records_to_save=populator.records_to_save.to_list())
