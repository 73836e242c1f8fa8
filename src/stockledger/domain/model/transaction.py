"""Transaction — an immutable record of one stock movement.

A Transaction is written exactly once, by the ledger engine, and never
changes afterwards.  ``total_price`` is captured at creation time and is
not recomputed when the item's price later changes (price snapshot).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from stockledger.domain.exceptions import InvalidQuantityError, ValidationError
from stockledger.domain.model.value_objects import Money, Quantity


class TransactionType(Enum):
    STOCK_IN = "stock_in"
    STOCK_OUT = "stock_out"
    PURCHASE = "purchase"
    SALE = "sale"
    ADJUSTMENT = "adjustment"
    RETURN = "return"

    @property
    def direction(self) -> int:
        """+1 for increasing types, -1 for decreasing, 0 when signed by the caller."""
        return _DIRECTIONS[self]

    @property
    def is_outbound(self) -> bool:
        return self in (TransactionType.SALE, TransactionType.STOCK_OUT)

    @classmethod
    def parse(cls, raw: str) -> TransactionType:
        """Resolve a type name, accepting the short ``in`` / ``out`` aliases."""
        key = (raw or "").strip().lower().replace("-", "_")
        key = _ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            allowed = ", ".join(t.value for t in cls)
            raise ValidationError(
                f"Unknown transaction type '{raw}' (expected one of: {allowed})"
            ) from None


_DIRECTIONS = {
    TransactionType.STOCK_IN: 1,
    TransactionType.PURCHASE: 1,
    TransactionType.RETURN: 1,
    TransactionType.STOCK_OUT: -1,
    TransactionType.SALE: -1,
    TransactionType.ADJUSTMENT: 0,
}

_ALIASES = {"in": "stock_in", "out": "stock_out"}


@dataclass(frozen=True)
class TransactionRequest:
    """A caller's request to move stock for one item.

    Increasing and decreasing types carry a positive ``quantity``.
    Adjustments carry a signed, non-zero ``delta`` instead so the direction
    is always explicit.
    """

    transaction_type: TransactionType
    item_id: str
    unit_price: Money
    user_id: str | None
    quantity: int | None = None
    delta: int | None = None
    supplier_id: str | None = None
    reference_number: str | None = None
    notes: str | None = None

    def signed_change(self) -> int:
        """The signed quantity change this request asks for."""
        if self.transaction_type is TransactionType.ADJUSTMENT:
            if self.quantity is not None:
                raise ValidationError(
                    "Adjustments take a signed delta, not a quantity"
                )
            if isinstance(self.delta, bool) or not isinstance(self.delta, int):
                raise InvalidQuantityError("Adjustments require an integer delta")
            if self.delta == 0:
                raise InvalidQuantityError("Adjustment delta cannot be zero")
            return self.delta

        if self.delta is not None:
            raise ValidationError(
                f"Only adjustments take a delta; {self.transaction_type.value} "
                f"takes a positive quantity"
            )
        return self.transaction_type.direction * Quantity(self.quantity).value  # type: ignore[arg-type]


@dataclass(frozen=True)
class Transaction:
    """Append-only stock movement.

    ``id`` and ``created_at`` are ``None`` until the transaction log
    stamps them on append.
    """

    id: str | None
    transaction_type: TransactionType
    item_id: str
    quantity: Quantity
    quantity_change: int
    quantity_before: int
    quantity_after: int
    unit_price: Money
    total_price: Money
    user_id: str
    supplier_id: str | None = None
    reference_number: str | None = None
    notes: str | None = None
    created_at: datetime | None = None

    @staticmethod
    def record(request: TransactionRequest, quantity_before: int, change: int) -> Transaction:
        """Build the record for a validated request against a known quantity."""
        quantity = Quantity(abs(change))
        return Transaction(
            id=None,
            transaction_type=request.transaction_type,
            item_id=request.item_id,
            quantity=quantity,
            quantity_change=change,
            quantity_before=quantity_before,
            quantity_after=quantity_before + change,
            unit_price=request.unit_price,
            total_price=request.unit_price * quantity.value,
            user_id=request.user_id or "",
            supplier_id=request.supplier_id or None,
            reference_number=request.reference_number or None,
            notes=request.notes or None,
        )

    def stamped(self, transaction_id: str, created_at: datetime) -> Transaction:
        if self.id is not None:
            raise ValidationError(f"Transaction {self.id} has already been recorded")
        return replace(self, id=transaction_id, created_at=created_at)
