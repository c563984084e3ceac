"""
FORMGRAPH - Services Module
Logique applicative autour du populator
"""

from formgraph.services.form_service import FormService

__all__ = [
    "FormService",
]
