"""
FORMGRAPH - Errors
Error taxonomy raised while binding form parameters onto a model graph
"""

from __future__ import annotations

from typing import Any


# =============================================================================
# BASE
# =============================================================================


class FormgraphError(Exception):
    """Base exception for all populator errors"""

    def __init__(
        self,
        message: str,
        model: str | None = None,
        key: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.model = model
        self.key = key

    def __str__(self) -> str:
        return self.message


# =============================================================================
# LOOKUP ERRORS
# =============================================================================


class UnknownModelError(FormgraphError, LookupError):
    """The model accessor does not name a known model"""

    def __init__(self, accessor: str):
        super().__init__(f"Unknown model: '{accessor}'", model=accessor)
        self.accessor = accessor


class RecordNotFoundError(FormgraphError, LookupError):
    """An id lookup did not return a record"""

    def __init__(
        self, model: str, record_id: Any, association: str | None = None
    ):
        if association:
            message = (
                f"Couldn't find {model} with id={record_id!r} "
                f"in association '{association}'"
            )
        else:
            message = f"Couldn't find {model} with id={record_id!r}"
        super().__init__(message, model=model, key=association)
        self.record_id = record_id
        self.association = association


# =============================================================================
# ASSOCIATION ERRORS
# =============================================================================


class UnsupportedAssociationError(FormgraphError, NotImplementedError):
    """belongs-to associations cannot be populated from nested attributes"""

    def __init__(self, model: str, association: str):
        super().__init__(
            f"Nested attributes for belongs-to association "
            f"'{model}.{association}' are not implemented",
            model=model,
            key=association,
        )
        self.association = association


class UnknownAssociationError(FormgraphError, RuntimeError):
    """Reflection returned nothing usable for an association key"""

    def __init__(self, model: str, association: str, kind: Any = None):
        if kind is None:
            message = f"{model} has no association named '{association}'"
        else:
            message = (
                f"Unrecognized association kind {kind!r} "
                f"for '{model}.{association}'"
            )
        super().__init__(message, model=model, key=association)
        self.association = association
        self.kind = kind


# =============================================================================
# PARAMETER ERRORS
# =============================================================================


class ParameterShapeError(FormgraphError, ValueError):
    """A parameter value has a shape its key or association cannot accept"""


class UnknownAttributeError(FormgraphError, AttributeError):
    """A scalar key does not match any attribute of the model"""

    def __init__(self, model: str, key: str):
        super().__init__(f"unknown attribute '{key}' for {model}", model=model, key=key)
