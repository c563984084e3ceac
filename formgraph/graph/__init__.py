"""
FORMGRAPH - Graph Module
Population du graphe d'objets depuis les paramètres de formulaire

Architecture:
- populator.py: GraphPopulator (parcours en profondeur)
- registry.py: SaveList (enregistrements existants à sauvegarder)
"""

from formgraph.graph.populator import (
    GraphPopulator,
    PopulateResult,
    populate,
)
from formgraph.graph.registry import SaveList

__all__ = [
    # Populator
    "GraphPopulator",
    "PopulateResult",
    "populate",
    # Registry
    "SaveList",
]
