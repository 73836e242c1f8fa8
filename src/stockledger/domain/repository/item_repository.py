"""Abstract repository for the Item aggregate.

Defined in the domain layer so the domain never depends on
infrastructure.  Concrete implementations live in the infrastructure
layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from stockledger.domain.model.item import Item


class ItemRepository(ABC):

    @abstractmethod
    def get_by_id(self, item_id: str) -> Item | None:
        """Return an item by its ID, or None if not found."""

    @abstractmethod
    def get_by_sku(self, sku: str) -> Item | None:
        """Return an item by SKU (case-insensitive), or None."""

    @abstractmethod
    def list_all(self) -> list[Item]:
        """Return every item."""

    @abstractmethod
    def add(self, item: Item) -> Item:
        """Persist a new item, assigning its ID and first version.

        Raises DuplicateSkuError if the SKU is already taken.
        """

    @abstractmethod
    def update_details(self, item_id: str, changes: dict[str, Any]) -> Item:
        """Apply non-quantity edits onto the *stored* record.

        The stored quantity is always kept, so an edit built from a stale
        read can never roll back a ledger movement.
        """

    @abstractmethod
    def compare_and_set_quantity(
        self, item_id: str, expected_version: int, new_quantity: int
    ) -> bool:
        """Set the quantity only if the stored version still matches.

        Reserved for the ledger engine.  Returns False when another writer
        got there first.
        """

    @abstractmethod
    def delete(self, item_id: str) -> None:
        """Remove an item.  Callers check for referencing transactions first."""
