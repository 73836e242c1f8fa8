"""Item aggregate — a stocked product and its on-hand quantity.

The quantity is owned by the ledger: it only ever changes through
``LedgerEngine.apply``.  Every other attribute is edited through
``Item.apply_changes``, which refuses to touch the quantity.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

from stockledger.domain.exceptions import InsufficientStockError, ValidationError
from stockledger.domain.model.value_objects import Money

# Attributes a caller may edit directly.  Quantity, id and version are absent
# on purpose: the ledger owns the first, the store owns the other two.
DETAIL_FIELDS = frozenset(
    {
        "name",
        "sku",
        "description",
        "unit_price",
        "cost_price",
        "reorder_level",
        "reorder_quantity",
        "category_id",
        "supplier_id",
        "location",
    }
)


def normalize_sku(sku: str) -> str:
    return sku.strip().upper()


@dataclass
class Item:
    """Aggregate root for a stocked product.

    Invariants:
    - ``quantity`` is never negative
    - ``sku`` is non-empty (uniqueness is enforced by the store)
    - ``reorder_level`` and ``reorder_quantity`` are never negative

    Use ``Item.create()`` for new items.  The ``__init__`` is kept simple so
    the repository can reconstitute persisted items without re-validating.
    """

    id: str | None
    name: str
    sku: str
    quantity: int = 0
    unit_price: Money = field(default_factory=Money.zero)
    cost_price: Money = field(default_factory=Money.zero)
    reorder_level: int = 0
    reorder_quantity: int = 0
    category_id: str | None = None
    supplier_id: str | None = None
    location: str | None = None
    description: str | None = None
    version: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime | None = None

    # --- Factory (used for NEW items only) ------------------------------------

    @staticmethod
    def create(
        name: str,
        sku: str,
        unit_price: Money,
        cost_price: Money,
        reorder_level: int = 0,
        reorder_quantity: int = 0,
        category_id: str | None = None,
        supplier_id: str | None = None,
        location: str | None = None,
        description: str | None = None,
    ) -> Item:
        """Create a new item at zero quantity, enforcing all invariants.

        Opening stock is recorded afterwards as a ledger transaction.
        """
        item = Item(
            id=None,
            name=(name or "").strip(),
            sku=normalize_sku(sku or ""),
            unit_price=unit_price,
            cost_price=cost_price,
            reorder_level=reorder_level,
            reorder_quantity=reorder_quantity,
            category_id=category_id or None,
            supplier_id=supplier_id or None,
            location=location or None,
            description=description or None,
        )
        item._validate()
        return item

    # --- Edits ----------------------------------------------------------------

    def apply_changes(self, changes: dict[str, Any], now: datetime) -> Item:
        """Return a copy of this item with the given detail fields replaced.

        Raises ValidationError for unknown fields and for any attempt to
        write the quantity directly.
        """
        if "quantity" in changes:
            raise ValidationError(
                "Quantity cannot be edited directly; record a transaction instead"
            )
        unknown = set(changes) - DETAIL_FIELDS
        if unknown:
            raise ValidationError(f"Unknown item field(s): {', '.join(sorted(unknown))}")

        values = dict(changes)
        if "name" in values:
            values["name"] = (values["name"] or "").strip()
        if "sku" in values:
            values["sku"] = normalize_sku(values["sku"] or "")
        for key in ("category_id", "supplier_id", "location", "description"):
            if key in values:
                values[key] = values[key] or None

        updated = replace(self, updated_at=now, **values)
        updated._validate()
        return updated

    # --- Ledger helpers -------------------------------------------------------

    def quantity_after(self, change: int) -> int:
        """Quantity that results from applying a signed change.

        Raises InsufficientStockError if the result would be negative.
        """
        new_quantity = self.quantity + change
        if new_quantity < 0:
            raise InsufficientStockError(
                item_id=self.id or "",
                item_name=self.name,
                requested=-change,
                available=self.quantity,
            )
        return new_quantity

    # --- Computed properties --------------------------------------------------

    @property
    def is_below_reorder_level(self) -> bool:
        return self.quantity < self.reorder_level

    @property
    def stock_value(self) -> Money:
        return self.unit_price * self.quantity

    # --- Internal helpers -----------------------------------------------------

    def _validate(self) -> None:
        if not self.name:
            raise ValidationError("Item name is required")
        if not self.sku:
            raise ValidationError("Item SKU is required")
        for label, value in (
            ("Reorder level", self.reorder_level),
            ("Reorder quantity", self.reorder_quantity),
        ):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError(f"{label} must be an integer")
            if value < 0:
                raise ValidationError(f"{label} cannot be negative")
        for label, value in (("Unit price", self.unit_price), ("Cost price", self.cost_price)):
            if not isinstance(value, Money):
                raise ValidationError(f"{label} must be a Money value")
