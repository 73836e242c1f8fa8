"""Application service: Record Transaction use case.

Turns raw caller input (strings for type and price) into a
TransactionRequest and hands it to the ledger engine.
"""

from __future__ import annotations

from stockledger.application.dto import TransactionDTO
from stockledger.domain.model.transaction import TransactionRequest, TransactionType
from stockledger.domain.model.value_objects import Money
from stockledger.domain.service.ledger_engine import LedgerEngine


class RecordTransactionHandler:

    def __init__(self, engine: LedgerEngine) -> None:
        self._engine = engine

    def handle(
        self,
        transaction_type: str,
        item_id: str,
        unit_price: str,
        user_id: str | None,
        quantity: int | None = None,
        delta: int | None = None,
        supplier_id: str | None = None,
        reference_number: str | None = None,
        notes: str | None = None,
    ) -> TransactionDTO:
        """Record one stock movement.

        ``quantity`` is the positive unit count for every type except
        ``adjustment``, which takes a signed ``delta`` instead.
        """
        request = TransactionRequest(
            transaction_type=TransactionType.parse(transaction_type),
            item_id=item_id,
            unit_price=Money.of(unit_price),
            user_id=user_id,
            quantity=quantity,
            delta=delta,
            supplier_id=supplier_id,
            reference_number=reference_number,
            notes=notes,
        )
        return TransactionDTO.from_domain(self._engine.apply(request))
