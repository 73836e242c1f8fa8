"""Application services: transaction history queries."""

from __future__ import annotations

from datetime import datetime

from stockledger.application.dto import TransactionDTO, TransactionPageDTO
from stockledger.domain.exceptions import EntityNotFoundError, ValidationError
from stockledger.domain.model.transaction import TransactionType
from stockledger.domain.repository.transaction_log import TransactionFilter, TransactionLog


class ListTransactionsHandler:

    def __init__(
        self,
        transaction_log: TransactionLog,
        default_page_size: int = 20,
        max_page_size: int = 100,
    ) -> None:
        self._transaction_log = transaction_log
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size

    def handle(
        self,
        item_id: str | None = None,
        transaction_type: str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        page: int = 1,
        page_size: int | None = None,
        oldest_first: bool = False,
    ) -> TransactionPageDTO:
        size = page_size if page_size is not None else self._default_page_size
        if size > self._max_page_size:
            raise ValidationError(f"Page size cannot exceed {self._max_page_size}")

        criteria = TransactionFilter(
            item_id=item_id or None,
            transaction_type=TransactionType.parse(transaction_type) if transaction_type else None,
            date_from=date_from,
            date_to=date_to,
            page=page,
            page_size=size,
            oldest_first=oldest_first,
        )
        return TransactionPageDTO.from_domain(self._transaction_log.query(criteria))


class ShowTransactionHandler:

    def __init__(self, transaction_log: TransactionLog) -> None:
        self._transaction_log = transaction_log

    def handle(self, transaction_id: str) -> TransactionDTO:
        txn = self._transaction_log.get_by_id(transaction_id)
        if txn is None:
            raise EntityNotFoundError(f"Transaction '{transaction_id}' not found")
        return TransactionDTO.from_domain(txn)
