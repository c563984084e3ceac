"""
FORMGRAPH - Schema Package
Central exports for model descriptors and the parameter tree
"""

# =============================================================================
# CORE - Association kinds, descriptors, model schemas
# =============================================================================
from .core import (
    AssociationDescriptor,
    AssociationKind,
    ModelSchema,
)

# =============================================================================
# PARAMS - Typed form submission tree
# =============================================================================
from .params import (
    CollectionParam,
    NodeParam,
    Param,
    ScalarParam,
    parse_params,
)

__all__ = [
    # Core
    "AssociationDescriptor",
    "AssociationKind",
    "ModelSchema",
    # Params
    "CollectionParam",
    "NodeParam",
    "Param",
    "ScalarParam",
    "parse_params",
]
