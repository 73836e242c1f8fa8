"""Application service: Update Item use case.

Edits descriptive and pricing fields.  Quantity is not editable here;
use a transaction or a stock count instead.
"""

from __future__ import annotations

from typing import Any

from stockledger.application.dto import ItemDTO
from stockledger.domain.exceptions import EntityNotFoundError, ValidationError
from stockledger.domain.model.value_objects import Money
from stockledger.domain.repository.item_repository import ItemRepository

_MONEY_FIELDS = ("unit_price", "cost_price")


class UpdateItemHandler:

    def __init__(self, item_repo: ItemRepository) -> None:
        self._item_repo = item_repo

    def handle(self, item_id: str, changes: dict[str, Any]) -> ItemDTO:
        """Apply the given field changes to an item.

        This does NOT affect existing transactions; they captured their
        unit and total price when they were recorded.
        """
        if not changes:
            raise ValidationError("No changes given")
        if self._item_repo.get_by_id(item_id) is None:
            raise EntityNotFoundError(f"Item with ID '{item_id}' not found")

        values = dict(changes)
        for key in _MONEY_FIELDS:
            if key in values:
                values[key] = Money.of(values[key])

        item = self._item_repo.update_details(item_id, values)
        return ItemDTO.from_domain(item)
