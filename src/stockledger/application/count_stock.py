"""Application service: Stock Count use case.

The explicit correction path: rather than overwriting a quantity, the
difference between the counted and the booked quantity is recorded as an
adjustment transaction.
"""

from __future__ import annotations

from stockledger.application.dto import TransactionDTO
from stockledger.domain.service.ledger_engine import LedgerEngine


class CountStockHandler:

    def __init__(self, engine: LedgerEngine) -> None:
        self._engine = engine

    def handle(
        self,
        item_id: str,
        counted_quantity: int,
        user_id: str | None,
        reference_number: str | None = None,
        notes: str | None = None,
    ) -> TransactionDTO | None:
        """Returns the adjustment, or None when the count already matched."""
        txn = self._engine.reconcile(
            item_id=item_id,
            counted_quantity=counted_quantity,
            user_id=user_id,
            reference_number=reference_number,
            notes=notes,
        )
        return TransactionDTO.from_domain(txn) if txn is not None else None
