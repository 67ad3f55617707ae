"""
Domain error kinds shared by repository, services and routes.

Only two kinds reach callers: NOT_FOUND and INTERNAL. The executor raises the
store-level StoreError / NoRowsError, and those are classified once, at the
repository boundary, by `classify_store_error`.
"""
from __future__ import annotations

NOT_FOUND = "not_found"
INTERNAL = "internal"


class StoreError(Exception):
    """Any failure reported by the database executor."""


class NoRowsError(StoreError):
    """query_row found nothing."""


class InventoryError(Exception):
    kind: str = INTERNAL

    def with_context(self, context: str) -> "InventoryError":
        """Same kind, message prefixed with the failing operation."""
        return type(self)(f"{context}: {self}")


class InventoryNotFound(InventoryError):
    kind = NOT_FOUND

    def __init__(self, message: str = "inventory not found"):
        super().__init__(message)


class InternalError(InventoryError):
    kind = INTERNAL

    def __init__(self, message: str = "internal server error"):
        super().__init__(message)


def classify_store_error(err: Exception, context: str, allow_not_found: bool = False) -> InventoryError:
    if allow_not_found and isinstance(err, NoRowsError):
        return InventoryNotFound()
    return InternalError(f"internal server error, {context}: {err}")
