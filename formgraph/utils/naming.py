"""
FORMGRAPH - Naming helpers
Lecture des clés de formulaire portant un suffixe d'association
"""


def association_name_in(key: str, suffix: str = "_attributes") -> str | None:
    """
    Extrait le nom d'association d'une clé de formulaire.
    "items_attributes" → "items", "name" → None
    """
    if len(key) > len(suffix) and key.endswith(suffix):
        return key[: -len(suffix)]
    return None
