"""
Error taxonomy shared by every catalog store and the sync layer.
"""

from __future__ import annotations

from typing import Optional


class CatalogError(Exception):
    """Base class for catalog failures."""


class StoreError(CatalogError):
    """
    A store operation failed.

    `operation` names the adapter call that was attempted (e.g.
    "create_project") and `cause` holds the underlying exception or a short
    description of what went wrong.
    """

    def __init__(self, operation: str, cause: Optional[object] = None):
        self.operation = operation
        self.cause = cause
        message = f"{operation} failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class TransportError(StoreError):
    """The backend or the network between us and it failed."""


class NotFoundError(StoreError):
    """The targeted record does not exist in the store."""

    def __init__(self, operation: str, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(operation, f"{entity} {entity_id!r} not found")


class ValidationError(CatalogError):
    """Caller input is missing a required field or holds an invalid value."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")
