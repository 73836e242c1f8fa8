"""Application services: item queries."""

from __future__ import annotations

from stockledger.application.dto import ItemDTO
from stockledger.domain.exceptions import EntityNotFoundError
from stockledger.domain.model.item import Item
from stockledger.domain.repository.item_repository import ItemRepository


class ShowItemHandler:

    def __init__(self, item_repo: ItemRepository) -> None:
        self._item_repo = item_repo

    def handle(self, item_id: str) -> ItemDTO:
        return ItemDTO.from_domain(_load(self._item_repo, item_id))


class CurrentQuantityHandler:
    """Latest committed quantity of one item."""

    def __init__(self, item_repo: ItemRepository) -> None:
        self._item_repo = item_repo

    def handle(self, item_id: str) -> int:
        return _load(self._item_repo, item_id).quantity


class ListItemsHandler:

    def __init__(self, item_repo: ItemRepository) -> None:
        self._item_repo = item_repo

    def handle(self, category_id: str | None = None) -> list[ItemDTO]:
        items = self._item_repo.list_all()
        if category_id is not None:
            items = [i for i in items if i.category_id == category_id]
        items.sort(key=lambda i: i.name.lower())
        return [ItemDTO.from_domain(i) for i in items]


def _load(item_repo: ItemRepository, item_id: str) -> Item:
    item = item_repo.get_by_id(item_id)
    if item is None:
        raise EntityNotFoundError(f"Item with ID '{item_id}' not found")
    return item
