"""
FORMGRAPH - Nested form parameters to ORM object graphs
"""

from formgraph.adapters import (
    InMemoryAdapter,
    MemoryRecord,
    MemoryStore,
    ModelAdapter,
    SQLAlchemyAdapter,
)
from formgraph.config import Settings, get_settings
from formgraph.errors import (
    FormgraphError,
    ParameterShapeError,
    RecordNotFoundError,
    UnknownAssociationError,
    UnknownAttributeError,
    UnknownModelError,
    UnsupportedAssociationError,
)
from formgraph.graph import GraphPopulator, PopulateResult, populate
from formgraph.schema import AssociationDescriptor, AssociationKind, ModelSchema
from formgraph.services import FormService

__version__ = "2.0.0"

__all__ = [
    # Entry points
    "GraphPopulator",
    "PopulateResult",
    "populate",
    "FormService",
    # Adapters
    "ModelAdapter",
    "InMemoryAdapter",
    "MemoryRecord",
    "MemoryStore",
    "SQLAlchemyAdapter",
    # Schema
    "AssociationDescriptor",
    "AssociationKind",
    "ModelSchema",
    # Config
    "Settings",
    "get_settings",
    # Errors
    "FormgraphError",
    "ParameterShapeError",
    "RecordNotFoundError",
    "UnknownAssociationError",
    "UnknownAttributeError",
    "UnknownModelError",
    "UnsupportedAssociationError",
]
