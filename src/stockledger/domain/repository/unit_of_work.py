"""Abstract unit of work — the atomic boundary of a ledger write.

Everything done through ``uow.items`` and ``uow.transactions`` inside a
``with`` block becomes visible together on ``commit()``.  Leaving the
block without committing, or raising, discards all of it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockledger.domain.repository.item_repository import ItemRepository
from stockledger.domain.repository.transaction_log import TransactionLog


class UnitOfWork(ABC):

    items: ItemRepository
    transactions: TransactionLog

    def __enter__(self) -> UnitOfWork:
        self._begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # An uncommitted block is always rolled back; commit() is explicit.
        self.rollback()

    @abstractmethod
    def _begin(self) -> None:
        """Open the boundary and stage a snapshot of the stores."""

    @abstractmethod
    def commit(self) -> None:
        """Publish every staged change, or none of them.

        Raises StorageError if the backing store fails; in that case all
        staged changes are discarded.
        """

    @abstractmethod
    def rollback(self) -> None:
        """Discard staged changes.  A no-op after a successful commit."""
