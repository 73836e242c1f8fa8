"""In-memory fake repositories for testing.

These implement the same abstract interfaces as the JSON repositories
but keep everything in dicts.  They are thread-safe so the concurrency
tests can drive the ledger engine from many threads at once.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any
from uuid import uuid4

from stockledger.domain.exceptions import DuplicateSkuError, EntityNotFoundError, StorageError
from stockledger.domain.model.item import Item
from stockledger.domain.model.transaction import Transaction
from stockledger.domain.repository.item_repository import ItemRepository
from stockledger.domain.repository.transaction_log import (
    TransactionFilter,
    TransactionLog,
    TransactionPage,
)
from stockledger.domain.repository.unit_of_work import UnitOfWork
from stockledger.domain.service.clock import Clock, DeterministicClock
from stockledger.domain.service.ledger_engine import LedgerEngine


class FakeItemRepository(ItemRepository):

    def __init__(self, items: list[Item] | None = None, clock: Clock | None = None) -> None:
        self.lock = threading.RLock()
        self._clock = clock or DeterministicClock()
        self._store: dict[str, Item] = {}
        self._next_id = 1
        for item in items or []:
            if item.id is None:
                item.id = self._new_id()
            if item.version == 0:
                item.version = 1
            self._store[item.id] = replace(item)

    def get_by_id(self, item_id: str) -> Item | None:
        with self.lock:
            item = self._store.get(item_id)
            return replace(item) if item else None

    def get_by_sku(self, sku: str) -> Item | None:
        with self.lock:
            for item in self._store.values():
                if item.sku == sku.strip().upper():
                    return replace(item)
        return None

    def list_all(self) -> list[Item]:
        with self.lock:
            return [replace(i) for i in self._store.values()]

    def add(self, item: Item) -> Item:
        with self.lock:
            if any(i.sku == item.sku for i in self._store.values()):
                raise DuplicateSkuError(item.sku)
            item.id = self._new_id()
            item.version = 1
            self._store[item.id] = replace(item)
            return item

    def update_details(self, item_id: str, changes: dict[str, Any]) -> Item:
        with self.lock:
            current = self._require(item_id)
            updated = current.apply_changes(changes, now=self._clock.now())
            if any(i.sku == updated.sku and i.id != item_id for i in self._store.values()):
                raise DuplicateSkuError(updated.sku)
            updated.version = current.version + 1
            self._store[item_id] = updated
            return replace(updated)

    def compare_and_set_quantity(
        self, item_id: str, expected_version: int, new_quantity: int
    ) -> bool:
        with self.lock:
            current = self._require(item_id)
            if current.version != expected_version:
                return False
            self._store[item_id] = replace(
                current, quantity=new_quantity, version=expected_version + 1
            )
            return True

    def delete(self, item_id: str) -> None:
        with self.lock:
            self._require(item_id)
            del self._store[item_id]

    # --- Test helpers ---------------------------------------------------------

    def snapshot(self) -> dict[str, Item]:
        with self.lock:
            return {k: replace(v) for k, v in self._store.items()}

    def _require(self, item_id: str) -> Item:
        item = self._store.get(item_id)
        if item is None:
            raise EntityNotFoundError(f"Item with ID '{item_id}' not found")
        return item

    def _new_id(self) -> str:
        new_id = str(self._next_id)
        self._next_id += 1
        return new_id


class FakeTransactionLog(TransactionLog):

    def __init__(self, clock: Clock | None = None) -> None:
        self.lock = threading.RLock()
        self._clock = clock or DeterministicClock()
        self._records: list[Transaction] = []

    def append(self, transaction: Transaction) -> Transaction:
        with self.lock:
            stamp = self._clock.now()
            if self._records and stamp <= self._records[-1].created_at:
                stamp = self._records[-1].created_at + timedelta(microseconds=1)
            recorded = transaction.stamped(uuid4().hex, stamp)
            self._records.append(recorded)
            return recorded

    def get_by_id(self, transaction_id: str) -> Transaction | None:
        with self.lock:
            for txn in self._records:
                if txn.id == transaction_id:
                    return txn
        return None

    def references_item(self, item_id: str) -> bool:
        with self.lock:
            return any(t.item_id == item_id for t in self._records)

    def query(self, criteria: TransactionFilter) -> TransactionPage:
        with self.lock:
            return criteria.paginate(list(self._records))

    def list_between(
        self, date_from: datetime | None, date_to: datetime | None
    ) -> list[Transaction]:
        with self.lock:
            return [
                t
                for t in self._records
                if (date_from is None or t.created_at >= date_from)
                and (date_to is None or t.created_at < date_to)
            ]

    def all(self) -> list[Transaction]:
        with self.lock:
            return list(self._records)


class FakeUnitOfWork(UnitOfWork):
    """Stages copies of both fakes and swaps them in on commit.

    ``fail_on_commit`` simulates the backing store failing mid-write.
    """

    def __init__(
        self,
        item_repo: FakeItemRepository,
        transaction_log: FakeTransactionLog,
        fail_on_commit: bool = False,
    ) -> None:
        self._item_repo = item_repo
        self._transaction_log = transaction_log
        self._fail_on_commit = fail_on_commit
        self._active = False

    def _begin(self) -> None:
        self._item_repo.lock.acquire()
        self._transaction_log.lock.acquire()
        self._active = True
        self.items = FakeItemRepository(clock=self._item_repo._clock)
        self.items._store = self._item_repo.snapshot()
        self.items._next_id = self._item_repo._next_id
        self.transactions = FakeTransactionLog(clock=self._transaction_log._clock)
        self.transactions._records = self._transaction_log.all()

    def commit(self) -> None:
        if not self._active:
            raise RuntimeError("Unit of work is not active")
        try:
            if self._fail_on_commit:
                raise StorageError("Simulated storage failure")
            self._item_repo._store = self.items._store
            self._item_repo._next_id = self.items._next_id
            self._transaction_log._records = self.transactions._records
        finally:
            self._release()

    def rollback(self) -> None:
        if self._active:
            self._release()

    def _release(self) -> None:
        self._active = False
        self._transaction_log.lock.release()
        self._item_repo.lock.release()


def build_ledger(
    items: list[Item] | None = None,
    clock: Clock | None = None,
    max_attempts: int = 5,
    item_repo: FakeItemRepository | None = None,
) -> tuple[FakeItemRepository, FakeTransactionLog, LedgerEngine]:
    """Wire fakes and a LedgerEngine together."""
    clock = clock or DeterministicClock()
    item_repo = item_repo or FakeItemRepository(items, clock=clock)
    transaction_log = FakeTransactionLog(clock=clock)
    engine = LedgerEngine(
        item_repo=item_repo,
        uow_factory=lambda: FakeUnitOfWork(item_repo, transaction_log),
        max_attempts=max_attempts,
    )
    return item_repo, transaction_log, engine
