"""JSON-file-backed implementation of TransactionLog.

Append-only: the only write is ``append``.  Timestamps come from the
injected clock and are bumped by a microsecond when needed so that they
strictly increase along the log.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
from uuid import uuid4

from stockledger.domain.model.transaction import Transaction, TransactionType
from stockledger.domain.model.value_objects import Money, Quantity
from stockledger.domain.repository.transaction_log import (
    TransactionFilter,
    TransactionLog,
    TransactionPage,
)
from stockledger.domain.service.clock import Clock, SystemClock
from stockledger.infrastructure.persistence.json_store import TRANSACTIONS, JsonStore

_TICK = timedelta(microseconds=1)


class JsonTransactionLog(TransactionLog):

    def __init__(
        self,
        store: JsonStore,
        clock: Clock | None = None,
        staged: dict[str, list[dict]] | None = None,
    ) -> None:
        self._store = store
        self._clock = clock or SystemClock()
        self._staged = staged

    # --- TransactionLog interface ---------------------------------------------

    def append(self, transaction: Transaction) -> Transaction:
        if self._staged is not None:
            return self._append_to(self._staged[TRANSACTIONS], transaction)
        with self._store.lock:
            records = self._store.load(TRANSACTIONS)
            recorded = self._append_to(records, transaction)
            self._store.persist({TRANSACTIONS: records})
            return recorded

    def get_by_id(self, transaction_id: str) -> Transaction | None:
        for raw in self._read():
            if raw["id"] == transaction_id:
                return self._to_domain(raw)
        return None

    def references_item(self, item_id: str) -> bool:
        return any(raw["item_id"] == item_id for raw in self._read())

    def query(self, criteria: TransactionFilter) -> TransactionPage:
        return criteria.paginate([self._to_domain(raw) for raw in self._read()])

    def list_between(
        self, date_from: datetime | None, date_to: datetime | None
    ) -> list[Transaction]:
        selected = [
            txn
            for txn in (self._to_domain(raw) for raw in self._read())
            if (date_from is None or txn.created_at >= date_from)
            and (date_to is None or txn.created_at < date_to)
        ]
        selected.sort(key=lambda t: t.created_at)
        return selected

    # --- Internal helpers -----------------------------------------------------

    def _append_to(self, records: list[dict], transaction: Transaction) -> Transaction:
        stamp = self._clock.now()
        if records:
            last = max(datetime.fromisoformat(raw["created_at"]) for raw in records)
            if stamp <= last:
                stamp = last + _TICK
        recorded = transaction.stamped(uuid4().hex, stamp)
        records.append(self._to_raw(recorded))
        return recorded

    def _read(self) -> list[dict]:
        if self._staged is not None:
            return self._staged[TRANSACTIONS]
        return self._store.load(TRANSACTIONS)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(txn: Transaction) -> dict:
        return {
            "id": txn.id,
            "transaction_type": txn.transaction_type.value,
            "item_id": txn.item_id,
            "quantity": txn.quantity.value,
            "quantity_change": txn.quantity_change,
            "quantity_before": txn.quantity_before,
            "quantity_after": txn.quantity_after,
            "unit_price": txn.unit_price.to_wire(),
            "total_price": txn.total_price.to_wire(),
            "user_id": txn.user_id,
            "supplier_id": txn.supplier_id,
            "reference_number": txn.reference_number,
            "notes": txn.notes,
            "created_at": txn.created_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Transaction:
        return Transaction(
            id=raw["id"],
            transaction_type=TransactionType(raw["transaction_type"]),
            item_id=raw["item_id"],
            quantity=Quantity(raw["quantity"]),
            quantity_change=raw["quantity_change"],
            quantity_before=raw["quantity_before"],
            quantity_after=raw["quantity_after"],
            unit_price=Money(Decimal(raw["unit_price"])),
            total_price=Money(Decimal(raw["total_price"])),
            user_id=raw["user_id"],
            supplier_id=raw.get("supplier_id"),
            reference_number=raw.get("reference_number"),
            notes=raw.get("notes"),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
