"""Domain service: Ledger Engine.

Applies stock movements to items.  This is the only code path that
changes an item's quantity, and it does so under two guarantees:

- the quantity never goes negative, and
- the transaction record and the quantity change become visible
  together or not at all.

Concurrent writers are handled optimistically.  The item is read
outside the write boundary; inside it the quantity is compare-and-swapped
against the version that was read.  Losing the race means another
movement landed first, so the engine re-reads the item and re-checks the
invariant against the fresh quantity before trying again.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable

from stockledger.domain.exceptions import (
    ConflictError,
    EntityNotFoundError,
    InsufficientStockError,
    InUseError,
    InvalidQuantityError,
    UserRequiredError,
)
from stockledger.domain.model.item import Item
from stockledger.domain.model.transaction import (
    Transaction,
    TransactionRequest,
    TransactionType,
)
from stockledger.domain.repository.item_repository import ItemRepository
from stockledger.domain.repository.unit_of_work import UnitOfWork
from stockledger.logging_config import get_logger

logger = get_logger("domain.ledger_engine")

DEFAULT_MAX_ATTEMPTS = 5


class LedgerEngine:

    def __init__(
        self,
        item_repo: ItemRepository,
        uow_factory: Callable[[], UnitOfWork],
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._item_repo = item_repo
        self._uow_factory = uow_factory
        self._max_attempts = max_attempts

    def apply(self, request: TransactionRequest) -> Transaction:
        """Validate and apply one movement, returning the recorded transaction.

        Raises UserRequiredError, InvalidQuantityError or ValidationError
        for bad input, EntityNotFoundError for an unknown item,
        InsufficientStockError when stock would go negative, and
        ConflictError when every compare-and-swap attempt lost.
        Validation and stock failures are never retried.
        """
        require_user(request.user_id)
        change = request.signed_change()
        return self._commit_movement(request.item_id, lambda item: (request, change))

    def reconcile(
        self,
        item_id: str,
        counted_quantity: int,
        user_id: str | None,
        reference_number: str | None = None,
        notes: str | None = None,
    ) -> Transaction | None:
        """Bring an item's quantity to a physically counted value.

        Records an adjustment for the difference, priced at the item's cost
        price.  The difference is recomputed on every attempt, so the result
        is the counted value even if other movements land concurrently.
        Returns None when the count already matches.
        """
        require_user(user_id)
        if isinstance(counted_quantity, bool) or not isinstance(counted_quantity, int):
            raise InvalidQuantityError("Counted quantity must be an integer")
        if counted_quantity < 0:
            raise InvalidQuantityError("Counted quantity cannot be negative")

        def _plan(item: Item) -> tuple[TransactionRequest, int] | None:
            delta = counted_quantity - item.quantity
            if delta == 0:
                return None
            request = TransactionRequest(
                transaction_type=TransactionType.ADJUSTMENT,
                item_id=item_id,
                unit_price=item.cost_price,
                user_id=user_id,
                delta=delta,
                reference_number=reference_number,
                notes=notes or f"Stock count: {item.quantity} -> {counted_quantity}",
            )
            return request, delta

        return self._commit_movement(item_id, _plan)

    def open_item(
        self,
        item: Item,
        opening_quantity: int = 0,
        user_id: str | None = None,
    ) -> tuple[Item, Transaction | None]:
        """Add a new item and book its opening stock in the same write.

        The opening balance is a ``stock_in`` at the item's cost price.
        If anything fails, neither the item nor the transaction is stored.
        """
        opening: TransactionRequest | None = None
        if opening_quantity:
            require_user(user_id)
            opening = TransactionRequest(
                transaction_type=TransactionType.STOCK_IN,
                item_id="",
                unit_price=item.cost_price,
                user_id=user_id,
                quantity=opening_quantity,
                supplier_id=item.supplier_id,
                notes="Opening balance",
            )
            opening.signed_change()

        with self._uow_factory() as uow:
            added = uow.items.add(item)
            recorded = None
            if opening is not None:
                request = replace(opening, item_id=added.id)
                pending = Transaction.record(request, quantity_before=0, change=opening_quantity)
                # a brand-new item has no competing writers inside the unit
                uow.items.compare_and_set_quantity(added.id, added.version, opening_quantity)
                recorded = uow.transactions.append(pending)
            stored = uow.items.get_by_id(added.id)
            uow.commit()

        logger.info(
            "Created item %s",
            stored.sku,
            extra={"item_id": stored.id, "opening_quantity": stored.quantity},
        )
        return stored, recorded

    def remove_item(self, item_id: str) -> None:
        """Delete an item that no transaction refers to.

        The reference check and the delete share one unit of work, so no
        movement can be recorded against the item in between.
        """
        with self._uow_factory() as uow:
            item = uow.items.get_by_id(item_id)
            if item is None:
                raise EntityNotFoundError(f"Item with ID '{item_id}' not found")
            if uow.transactions.references_item(item_id):
                raise InUseError(
                    f"Item '{item.name}' has recorded transactions and cannot be deleted"
                )
            uow.items.delete(item_id)
            uow.commit()

        logger.info("Deleted item %s", item.sku, extra={"item_id": item_id})

    # --- Internal helpers -----------------------------------------------------

    def _commit_movement(
        self,
        item_id: str,
        plan: Callable[[Item], tuple[TransactionRequest, int] | None],
    ) -> Transaction | None:
        for attempt in range(1, self._max_attempts + 1):
            item = self._item_repo.get_by_id(item_id)
            if item is None:
                raise EntityNotFoundError(f"Item with ID '{item_id}' not found")

            planned = plan(item)
            if planned is None:
                return None
            request, change = planned

            try:
                new_quantity = item.quantity_after(change)
            except InsufficientStockError:
                logger.warning(
                    "Rejected %s: insufficient stock",
                    request.transaction_type.value,
                    extra={
                        "item_id": item.id,
                        "requested": -change,
                        "available": item.quantity,
                        "attempt": attempt,
                    },
                )
                raise

            pending = Transaction.record(request, quantity_before=item.quantity, change=change)

            with self._uow_factory() as uow:
                if not uow.items.compare_and_set_quantity(item.id, item.version, new_quantity):
                    logger.debug(
                        "Lost quantity race, retrying",
                        extra={"item_id": item.id, "version": item.version, "attempt": attempt},
                    )
                    continue
                recorded = uow.transactions.append(pending)
                uow.commit()

            logger.info(
                "Recorded %s of %d",
                recorded.transaction_type.value,
                recorded.quantity.value,
                extra={
                    "transaction_id": recorded.id,
                    "item_id": item.id,
                    "quantity_before": recorded.quantity_before,
                    "quantity_after": recorded.quantity_after,
                    "actor_id": recorded.user_id,
                },
            )
            return recorded

        logger.warning(
            "Gave up after %d conflicting attempts",
            self._max_attempts,
            extra={"item_id": item_id},
        )
        raise ConflictError(
            f"Item '{item_id}' is being updated concurrently; "
            f"gave up after {self._max_attempts} attempts"
        )


def require_user(user_id: str | None) -> None:
    if not user_id or not user_id.strip():
        raise UserRequiredError()
