"""
FORMGRAPH - Parameter Tree
Typed view of a nested form submission

A submission decodes into three node shapes:
- ScalarParam: a leaf value (or a list of leaf values, e.g. multi-select)
- NodeParam: one record's fields, possibly carrying nested associations
- CollectionParam: the records of a to-many association

Collections arrive as mappings keyed by positional strings ("0", "1", ...)
or as lists, and their order carries no meaning. "new_<n>" keys count as
positional too; any other key makes the mapping a single record.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from formgraph.errors import ParameterShapeError
from formgraph.utils.naming import association_name_in

SCALAR_TYPES = (str, int, float, bool, type(None))

# "0", "12", "new_1" (client-side placeholder for a record built in the browser)
_COLLECTION_KEY = re.compile(r"^(new_)?\d+$")


# =============================================================================
# NODE TYPES
# =============================================================================


@dataclass(frozen=True)
class ScalarParam:
    value: Any


@dataclass(frozen=True)
class CollectionParam:
    records: list[NodeParam] = field(default_factory=list)

    def __iter__(self) -> Iterator[NodeParam]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class NodeParam:
    entries: dict[str, Param] = field(default_factory=dict)

    def __contains__(self, key: str) -> bool:
        return key in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, key: str) -> Param:
        return self.entries[key]

    def scalars(self) -> dict[str, Any]:
        """Fields applied to the record at this nesting level"""
        return {
            key: param.value
            for key, param in self.entries.items()
            if isinstance(param, ScalarParam)
        }

    def associations(self) -> list[tuple[str, NodeParam | CollectionParam]]:
        """Nested entries, consumed only by association resolution"""
        return [
            (key, param)
            for key, param in self.entries.items()
            if not isinstance(param, ScalarParam)
        ]

    def identity(self, id_key: str = "id") -> Any:
        """The record id carried at this level, None when absent or blank"""
        param = self.entries.get(id_key)
        if not isinstance(param, ScalarParam):
            return None
        value = param.value
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return value


Param = Union[ScalarParam, NodeParam, CollectionParam]


# =============================================================================
# PARSING
# =============================================================================


def parse_params(raw: Mapping[str, Any], suffix: str = "_attributes") -> NodeParam:
    """
    Convert a decoded form submission into a NodeParam tree.

    Raises:
        ParameterShapeError: nested value under a key without the association
        suffix, or a malformed collection
    """
    if isinstance(raw, NodeParam):
        return raw
    if not isinstance(raw, Mapping):
        raise ParameterShapeError(
            f"Expected a mapping of parameters, got {type(raw).__name__}"
        )

    entries: dict[str, Param] = {}
    for key, value in raw.items():
        key = str(key)
        entries[key] = _parse_value(key, value, suffix)
    return NodeParam(entries)


def _parse_value(key: str, value: Any, suffix: str) -> Param:
    if _is_scalar(value):
        return ScalarParam(value)

    if isinstance(value, list) and all(_is_scalar(item) for item in value):
        return ScalarParam(list(value))

    if association_name_in(key, suffix) is None:
        raise ParameterShapeError(
            f"Nested parameters under '{key}' must use the '{suffix}' suffix",
            key=key,
        )

    if isinstance(value, list):
        return _parse_collection(key, value, suffix)

    if isinstance(value, Mapping):
        if _is_keyed_collection(value):
            return _parse_collection(key, list(value.values()), suffix)
        return parse_params(value, suffix)

    raise ParameterShapeError(
        f"Unsupported value of type {type(value).__name__} under '{key}'", key=key
    )


def _parse_collection(key: str, items: list[Any], suffix: str) -> CollectionParam:
    records = []
    for item in items:
        if not isinstance(item, Mapping):
            raise ParameterShapeError(
                f"Collection '{key}' must contain only records, "
                f"got {type(item).__name__}",
                key=key,
            )
        records.append(parse_params(item, suffix))
    return CollectionParam(records)


def _is_scalar(value: Any) -> bool:
    return isinstance(value, SCALAR_TYPES)


def _is_keyed_collection(value: Mapping) -> bool:
    """
    {"0": {...}, "1": {...}} or {"new_1": {...}} style mapping: every key is
    a record index and every value is a record.
    """
    if not value:
        return False
    return all(
        isinstance(v, Mapping) and _COLLECTION_KEY.match(str(k)) is not None
        for k, v in value.items()
    )
