"""JSON-file-backed implementation of ItemRepository.

Outside a unit of work every call reads and writes ``items.json``
directly.  Inside one (``staged`` is given) calls work on the unit's
in-memory copy, which is only written out on commit.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Callable
from uuid import uuid4

from stockledger.domain.exceptions import DuplicateSkuError, EntityNotFoundError
from stockledger.domain.model.item import Item, normalize_sku
from stockledger.domain.model.value_objects import Money
from stockledger.domain.repository.item_repository import ItemRepository
from stockledger.domain.service.clock import Clock, SystemClock
from stockledger.infrastructure.persistence.json_store import ITEMS, JsonStore


class JsonItemRepository(ItemRepository):

    def __init__(
        self,
        store: JsonStore,
        clock: Clock | None = None,
        staged: dict[str, list[dict]] | None = None,
    ) -> None:
        self._store = store
        self._clock = clock or SystemClock()
        self._staged = staged

    # --- ItemRepository interface ---------------------------------------------

    def get_by_id(self, item_id: str) -> Item | None:
        for raw in self._read():
            if raw["id"] == item_id:
                return self._to_domain(raw)
        return None

    def get_by_sku(self, sku: str) -> Item | None:
        wanted = normalize_sku(sku)
        for raw in self._read():
            if raw["sku"] == wanted:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Item]:
        return [self._to_domain(raw) for raw in self._read()]

    def add(self, item: Item) -> Item:
        def _add(records: list[dict]) -> Item:
            if any(raw["sku"] == item.sku for raw in records):
                raise DuplicateSkuError(item.sku)
            item.id = uuid4().hex
            item.version = 1
            item.created_at = self._clock.now()
            records.append(self._to_raw(item))
            return item

        return self._mutate(_add)

    def update_details(self, item_id: str, changes: dict[str, Any]) -> Item:
        def _update(records: list[dict]) -> Item:
            index = self._index_of(records, item_id)
            current = self._to_domain(records[index])
            updated = current.apply_changes(changes, now=self._clock.now())
            if updated.sku != current.sku and any(
                raw["sku"] == updated.sku for raw in records if raw["id"] != item_id
            ):
                raise DuplicateSkuError(updated.sku)
            updated.version = current.version + 1
            records[index] = self._to_raw(updated)
            return updated

        return self._mutate(_update)

    def compare_and_set_quantity(
        self, item_id: str, expected_version: int, new_quantity: int
    ) -> bool:
        def _cas(records: list[dict]) -> bool:
            index = self._index_of(records, item_id)
            raw = records[index]
            if raw["version"] != expected_version:
                return False
            raw["quantity"] = new_quantity
            raw["version"] = expected_version + 1
            raw["updated_at"] = self._clock.now().isoformat()
            return True

        return self._mutate(_cas)

    def delete(self, item_id: str) -> None:
        def _delete(records: list[dict]) -> None:
            records.pop(self._index_of(records, item_id))

        self._mutate(_delete)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(item: Item) -> dict:
        return {
            "id": item.id,
            "name": item.name,
            "sku": item.sku,
            "description": item.description,
            "quantity": item.quantity,
            "unit_price": item.unit_price.to_wire(),
            "cost_price": item.cost_price.to_wire(),
            "reorder_level": item.reorder_level,
            "reorder_quantity": item.reorder_quantity,
            "category_id": item.category_id,
            "supplier_id": item.supplier_id,
            "location": item.location,
            "version": item.version,
            "created_at": item.created_at.isoformat(),
            "updated_at": item.updated_at.isoformat() if item.updated_at else None,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Item:
        return Item(
            id=raw["id"],
            name=raw["name"],
            sku=raw["sku"],
            description=raw.get("description"),
            quantity=raw["quantity"],
            unit_price=Money(Decimal(raw["unit_price"])),
            cost_price=Money(Decimal(raw["cost_price"])),
            reorder_level=raw.get("reorder_level", 0),
            reorder_quantity=raw.get("reorder_quantity", 0),
            category_id=raw.get("category_id"),
            supplier_id=raw.get("supplier_id"),
            location=raw.get("location"),
            version=raw["version"],
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]) if raw.get("updated_at") else None,
        )

    # --- Record helpers -------------------------------------------------------

    def _read(self) -> list[dict]:
        if self._staged is not None:
            return self._staged[ITEMS]
        return self._store.load(ITEMS)

    def _mutate(self, change: Callable[[list[dict]], Any]) -> Any:
        if self._staged is not None:
            return change(self._staged[ITEMS])
        with self._store.lock:
            records = self._store.load(ITEMS)
            result = change(records)
            self._store.persist({ITEMS: records})
            return result

    @staticmethod
    def _index_of(records: list[dict], item_id: str) -> int:
        for i, raw in enumerate(records):
            if raw["id"] == item_id:
                return i
        raise EntityNotFoundError(f"Item with ID '{item_id}' not found")
