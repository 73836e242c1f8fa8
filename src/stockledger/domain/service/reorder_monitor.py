"""Domain service: Reorder Monitor.

A read-only projection over the item store.  It keeps no state of its
own; every call looks at the current quantities.
"""

from __future__ import annotations

from dataclasses import dataclass

from stockledger.domain.model.item import Item
from stockledger.domain.repository.item_repository import ItemRepository


@dataclass(frozen=True)
class ReorderAlert:
    item: Item

    @property
    def shortfall(self) -> int:
        return self.item.reorder_level - self.item.quantity


class ReorderMonitor:

    def __init__(self, item_repo: ItemRepository) -> None:
        self._item_repo = item_repo

    def list_below_reorder_level(self) -> list[ReorderAlert]:
        """Items whose quantity is strictly below their reorder level,
        lowest quantity first."""
        low = [item for item in self._item_repo.list_all() if item.is_below_reorder_level]
        low.sort(key=lambda item: (item.quantity, item.name.lower()))
        return [ReorderAlert(item=item) for item in low]
