"""
FORMGRAPH - Records To Save
Existing records reached through an id lookup during a populate walk
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any


@dataclass
class SaveList:
    """
    Ordered, identity-deduplicated list of existing records.

    Attaching an already persisted record does not mark it dirty in every
    ORM, so the caller saves each of these explicitly.
    """

    _records: list[Any] = field(default_factory=list)
    _ids: set[int] = field(default_factory=set)

    def append(self, record: Any) -> None:
        if id(record) in self._ids:
            return
        self._ids.add(id(record))
        self._records.append(record)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record: Any) -> bool:
        return id(record) in self._ids

    def to_list(self) -> list[Any]:
        return self._records.copy()
