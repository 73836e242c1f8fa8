"""Domain-level exceptions.

All ledger failures are expressed as subclasses of DomainException so the
CLI and HTTP layers can catch them uniformly.  Every class carries a stable
``code`` that the HTTP layer maps to a status and returns to the caller.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""

    code: str = "DOMAIN_ERROR"


class ValidationError(DomainException):
    """A business rule or invariant was violated by the caller's input."""

    code = "VALIDATION"


class InvalidQuantityError(ValidationError):
    """A movement quantity was zero, negative or not an integer."""

    code = "INVALID_QUANTITY"


class UserRequiredError(ValidationError):
    """A transaction request did not name the acting user."""

    code = "USER_REQUIRED"

    def __init__(self) -> None:
        super().__init__("A user reference is required to record a transaction")


class DuplicateSkuError(ValidationError):
    code = "DUPLICATE_SKU"

    def __init__(self, sku: str) -> None:
        self.sku = sku
        super().__init__(f"An item with SKU '{sku}' already exists")


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    code = "NOT_FOUND"


class InsufficientStockError(DomainException):
    """Applying the movement would drive an item's quantity below zero."""

    code = "INSUFFICIENT_STOCK"

    def __init__(self, item_id: str, item_name: str, requested: int, available: int) -> None:
        self.item_id = item_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for {item_name} "
            f"(need {requested}, have {available})"
        )


class ConflictError(DomainException):
    """Concurrent writers kept winning the compare-and-swap on an item."""

    code = "CONFLICT"


class InUseError(DomainException):
    """An entity cannot be removed while other records reference it."""

    code = "IN_USE"


class StorageError(DomainException):
    """The backing store failed; nothing from the operation was applied."""

    code = "INTERNAL"
