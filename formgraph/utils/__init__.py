"""
FORMGRAPH - Utilities Package
"""

from .naming import association_name_in

__all__ = [
    "association_name_in",
]
