"""Abstract append-only log of Transactions, plus its query types."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from stockledger.domain.exceptions import ValidationError
from stockledger.domain.model.transaction import Transaction, TransactionType


@dataclass(frozen=True)
class TransactionFilter:
    """Structured query over the log.

    ``date_from`` is inclusive and ``date_to`` exclusive.  Pages are
    1-based; results are newest first unless ``oldest_first`` is set.
    """

    item_id: str | None = None
    transaction_type: TransactionType | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    page: int = 1
    page_size: int = 20
    oldest_first: bool = False

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValidationError("Page must be 1 or greater")
        if self.page_size < 1:
            raise ValidationError("Page size must be 1 or greater")
        if self.date_from and self.date_to and self.date_from >= self.date_to:
            raise ValidationError("Date range start must be before its end")

    def matches(self, txn: Transaction) -> bool:
        if self.item_id is not None and txn.item_id != self.item_id:
            return False
        if self.transaction_type is not None and txn.transaction_type is not self.transaction_type:
            return False
        if self.date_from is not None and txn.created_at < self.date_from:
            return False
        if self.date_to is not None and txn.created_at >= self.date_to:
            return False
        return True

    def paginate(self, transactions: list[Transaction]) -> TransactionPage:
        """Filter, order and slice an already-loaded list of transactions."""
        selected = [t for t in transactions if self.matches(t)]
        selected.sort(key=lambda t: t.created_at, reverse=not self.oldest_first)
        start = (self.page - 1) * self.page_size
        return TransactionPage(
            transactions=selected[start:start + self.page_size],
            page=self.page,
            page_size=self.page_size,
            total=len(selected),
        )


@dataclass(frozen=True)
class TransactionPage:
    transactions: list[Transaction]
    page: int
    page_size: int
    total: int

    @property
    def pages(self) -> int:
        return max(1, -(-self.total // self.page_size))


class TransactionLog(ABC):

    @abstractmethod
    def append(self, transaction: Transaction) -> Transaction:
        """Stamp the transaction with an ID and timestamp and store it.

        Timestamps are strictly increasing across the log.  Existing
        entries are never overwritten.
        """

    @abstractmethod
    def get_by_id(self, transaction_id: str) -> Transaction | None:
        """Return a transaction by its ID, or None if not found."""

    @abstractmethod
    def references_item(self, item_id: str) -> bool:
        """True if any transaction refers to the item."""

    @abstractmethod
    def query(self, criteria: TransactionFilter) -> TransactionPage:
        """Return one page of transactions matching the filter."""

    @abstractmethod
    def list_between(
        self, date_from: datetime | None, date_to: datetime | None
    ) -> list[Transaction]:
        """Every transaction in the window, oldest first (for projections)."""
