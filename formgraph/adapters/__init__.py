"""
FORMGRAPH - Adapters Module
Ponts vers les couches de persistance

Architecture:
- base.py: Contrat ModelAdapter
- memory.py: ORM en mémoire (schémas déclarés)
- sqlalchemy_adapter.py: Registry déclaratif SQLAlchemy + Session
"""

from formgraph.adapters.base import ModelAdapter
from formgraph.adapters.memory import (
    InMemoryAdapter,
    MemoryRecord,
    MemoryStore,
)
from formgraph.adapters.sqlalchemy_adapter import (
    SQLAlchemyAdapter,
    create_session_factory,
)

__all__ = [
    # Contract
    "ModelAdapter",
    # In-memory
    "InMemoryAdapter",
    "MemoryRecord",
    "MemoryStore",
    # SQLAlchemy
    "SQLAlchemyAdapter",
    "create_session_factory",
]
