"""Application service: Delete Item use case."""

from __future__ import annotations

from stockledger.domain.service.ledger_engine import LedgerEngine


class DeleteItemHandler:

    def __init__(self, engine: LedgerEngine) -> None:
        self._engine = engine

    def handle(self, item_id: str) -> None:
        """Delete an item that no transaction refers to.

        Raises EntityNotFoundError for an unknown item and InUseError once
        any movement has been recorded against it.
        """
        self._engine.remove_item(item_id)
