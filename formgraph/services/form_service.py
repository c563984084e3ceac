"""
FORMGRAPH - Form Service
Populate + persist: the caller side of the populator
"""

import logging
import time
from collections.abc import Mapping
from typing import Any

from formgraph.adapters.base import ModelAdapter
from formgraph.config import Settings, get_settings
from formgraph.graph import PopulateResult, populate

logger = logging.getLogger(__name__)


class FormService:
    """Binds submissions for one adapter; a new populator per submission"""

    def __init__(self, adapter: ModelAdapter, settings: Settings | None = None):
        self.adapter = adapter
        self.settings = settings or get_settings()

    def build(self, model_accessor: str, params: Mapping[str, Any]) -> PopulateResult:
        """Populate without persisting anything"""
        return populate(model_accessor, params, self.adapter, self.settings)

    def submit(self, model_accessor: str, params: Mapping[str, Any]) -> PopulateResult:
        """
        Populate, then save the root (cascading to newly built children) and
        every existing record reached by id, then commit.
        Errors propagate; already-mutated records are not rolled back here.
        """
        start = time.perf_counter()
        result = self.build(model_accessor, params)

        self.adapter.save(result.root)
        for record in result.records_to_save:
            self.adapter.save(record)
        self.adapter.commit()

        elapsed = (time.perf_counter() - start) * 1000
        logger.info(
            f"[FORM] Saved {model_accessor} with "
            f"{len(result.records_to_save)} existing associated record(s) "
            f"in {elapsed:.0f}ms"
        )
        return result
