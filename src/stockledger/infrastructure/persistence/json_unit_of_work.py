"""JSON-file-backed UnitOfWork.

On entry the unit takes the store lock and stages copies of both record
sets; the repositories it hands out work on those copies.  ``commit``
writes both files through ``JsonStore.persist`` (all or nothing) and
releases the lock; leaving the block without committing just drops the
copies.
"""

from __future__ import annotations

from stockledger.domain.repository.unit_of_work import UnitOfWork
from stockledger.domain.service.clock import Clock, SystemClock
from stockledger.infrastructure.persistence.json_item_repository import JsonItemRepository
from stockledger.infrastructure.persistence.json_store import ITEMS, TRANSACTIONS, JsonStore
from stockledger.infrastructure.persistence.json_transaction_log import JsonTransactionLog


class JsonUnitOfWork(UnitOfWork):

    def __init__(self, store: JsonStore, clock: Clock | None = None) -> None:
        self._store = store
        self._clock = clock or SystemClock()
        self._staged: dict[str, list[dict]] | None = None

    def _begin(self) -> None:
        self._store.lock.acquire()
        try:
            self._staged = {
                ITEMS: self._store.load(ITEMS),
                TRANSACTIONS: self._store.load(TRANSACTIONS),
            }
        except Exception:
            self._store.lock.release()
            raise
        self.items = JsonItemRepository(self._store, self._clock, staged=self._staged)
        self.transactions = JsonTransactionLog(self._store, self._clock, staged=self._staged)

    def commit(self) -> None:
        if self._staged is None:
            raise RuntimeError("Unit of work is not active")
        staged, self._staged = self._staged, None
        try:
            self._store.persist(staged)
        finally:
            self._store.lock.release()

    def rollback(self) -> None:
        if self._staged is None:
            return
        self._staged = None
        self._store.lock.release()
