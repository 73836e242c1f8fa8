"""Application service: Add Item use case.

New items start at zero.  An opening quantity is booked as a
``stock_in`` movement in the same write that creates the item, so the
ledger stays the only writer of quantities.
"""

from __future__ import annotations

from stockledger.application.dto import ItemDTO
from stockledger.domain.exceptions import InvalidQuantityError
from stockledger.domain.model.item import Item
from stockledger.domain.model.value_objects import Money
from stockledger.domain.service.ledger_engine import LedgerEngine, require_user


class AddItemHandler:

    def __init__(self, engine: LedgerEngine) -> None:
        self._engine = engine

    def handle(
        self,
        name: str,
        sku: str,
        unit_price: str,
        cost_price: str = "0",
        reorder_level: int = 0,
        reorder_quantity: int = 0,
        category_id: str | None = None,
        supplier_id: str | None = None,
        location: str | None = None,
        description: str | None = None,
        opening_quantity: int = 0,
        user_id: str | None = None,
    ) -> ItemDTO:
        """Add a new item, optionally booking its opening stock."""
        if isinstance(opening_quantity, bool) or not isinstance(opening_quantity, int):
            raise InvalidQuantityError("Opening quantity must be an integer")
        if opening_quantity < 0:
            raise InvalidQuantityError("Opening quantity cannot be negative")
        if opening_quantity > 0:
            require_user(user_id)

        item = Item.create(
            name=name,
            sku=sku,
            unit_price=Money.of(unit_price),
            cost_price=Money.of(cost_price),
            reorder_level=reorder_level,
            reorder_quantity=reorder_quantity,
            category_id=category_id,
            supplier_id=supplier_id,
            location=location,
            description=description,
        )
        item, _ = self._engine.open_item(item, opening_quantity, user_id)
        return ItemDTO.from_domain(item)
