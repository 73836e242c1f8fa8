"""HTTP routes over the application handlers.

Handlers raise DomainException subclasses; ``app.py`` turns those into
JSON error responses, so routes only deal with the happy path.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status

from stockledger.application.add_item import AddItemHandler
from stockledger.application.count_stock import CountStockHandler
from stockledger.application.delete_item import DeleteItemHandler
from stockledger.application.list_transactions import (
    ListTransactionsHandler,
    ShowTransactionHandler,
)
from stockledger.application.record_transaction import RecordTransactionHandler
from stockledger.application.reports import (
    InventoryValueReportHandler,
    ShowReorderAlertsHandler,
    TransactionReportHandler,
)
from stockledger.application.show_items import (
    CurrentQuantityHandler,
    ListItemsHandler,
    ShowItemHandler,
)
from stockledger.application.update_item import UpdateItemHandler
from stockledger.domain.service.clock import ensure_utc
from stockledger.infrastructure.bootstrap import Services
from stockledger.infrastructure.http.schemas import (
    ItemIn,
    ItemPatch,
    StockCountIn,
    TransactionIn,
    to_wire,
)

router = APIRouter()


def get_services(request: Request) -> Services:
    return request.app.state.services


# ============================================================================
# Transactions
# ============================================================================


@router.post("/transactions", status_code=status.HTTP_201_CREATED, tags=["Transactions"])
def record_transaction(body: TransactionIn, svc: Services = Depends(get_services)) -> Any:
    dto = RecordTransactionHandler(svc.engine).handle(
        transaction_type=body.type,
        item_id=body.item_id,
        unit_price=body.unit_price,
        user_id=body.user_id,
        quantity=body.quantity,
        delta=body.delta,
        supplier_id=body.supplier_id,
        reference_number=body.reference_number,
        notes=body.notes,
    )
    return to_wire(dto)


@router.get("/transactions", tags=["Transactions"])
def list_transactions(
    item_id: Optional[str] = Query(default=None, alias="itemId"),
    txn_type: Optional[str] = Query(default=None, alias="type"),
    date_from: Optional[datetime] = Query(default=None, alias="from"),
    date_to: Optional[datetime] = Query(default=None, alias="to"),
    page: int = Query(default=1, ge=1),
    page_size: Optional[int] = Query(default=None, alias="pageSize", ge=1),
    svc: Services = Depends(get_services),
) -> Any:
    handler = ListTransactionsHandler(
        svc.transaction_log,
        default_page_size=svc.settings.DEFAULT_PAGE_SIZE,
        max_page_size=svc.settings.MAX_PAGE_SIZE,
    )
    result = handler.handle(
        item_id=item_id,
        transaction_type=txn_type,
        date_from=ensure_utc(date_from),
        date_to=ensure_utc(date_to),
        page=page,
        page_size=page_size,
    )
    return to_wire(result)


@router.get("/transactions/{transaction_id}", tags=["Transactions"])
def show_transaction(transaction_id: str, svc: Services = Depends(get_services)) -> Any:
    return to_wire(ShowTransactionHandler(svc.transaction_log).handle(transaction_id))


# ============================================================================
# Items
# ============================================================================


@router.post("/items", status_code=status.HTTP_201_CREATED, tags=["Items"])
def add_item(body: ItemIn, svc: Services = Depends(get_services)) -> Any:
    dto = AddItemHandler(svc.engine).handle(
        name=body.name,
        sku=body.sku,
        unit_price=body.unit_price,
        cost_price=body.cost_price,
        reorder_level=body.reorder_level,
        reorder_quantity=body.reorder_quantity,
        category_id=body.category_id,
        supplier_id=body.supplier_id,
        location=body.location,
        description=body.description,
        opening_quantity=body.opening_quantity,
        user_id=body.user_id,
    )
    return to_wire(dto)


@router.get("/items", tags=["Items"])
def list_items(
    category_id: Optional[str] = Query(default=None, alias="categoryId"),
    svc: Services = Depends(get_services),
) -> Any:
    return to_wire(ListItemsHandler(svc.item_repo).handle(category_id=category_id))


@router.get("/items/{item_id}", tags=["Items"])
def show_item(item_id: str, svc: Services = Depends(get_services)) -> Any:
    return to_wire(ShowItemHandler(svc.item_repo).handle(item_id))


@router.get("/items/{item_id}/currentQuantity", tags=["Items"])
def current_quantity(item_id: str, svc: Services = Depends(get_services)) -> Any:
    quantity = CurrentQuantityHandler(svc.item_repo).handle(item_id)
    return {"itemId": item_id, "quantity": quantity}


@router.patch("/items/{item_id}", tags=["Items"])
def update_item(item_id: str, body: ItemPatch, svc: Services = Depends(get_services)) -> Any:
    changes = body.model_dump(exclude_unset=True)
    return to_wire(UpdateItemHandler(svc.item_repo).handle(item_id, changes))


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["Items"])
def delete_item(item_id: str, svc: Services = Depends(get_services)) -> Response:
    DeleteItemHandler(svc.engine).handle(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/items/{item_id}/stock-count", tags=["Items"])
def count_stock(item_id: str, body: StockCountIn, svc: Services = Depends(get_services)) -> Any:
    dto = CountStockHandler(svc.engine).handle(
        item_id=item_id,
        counted_quantity=body.counted_quantity,
        user_id=body.user_id,
        reference_number=body.reference_number,
        notes=body.notes,
    )
    return {"adjusted": dto is not None, "transaction": to_wire(dto) if dto else None}


# ============================================================================
# Read side
# ============================================================================


@router.get("/reorder-alerts", tags=["Reports"])
def reorder_alerts(svc: Services = Depends(get_services)) -> Any:
    return to_wire(ShowReorderAlertsHandler(svc.reorder_monitor).handle())


@router.get("/reports/inventory-value", tags=["Reports"])
def inventory_value(svc: Services = Depends(get_services)) -> Any:
    return to_wire(InventoryValueReportHandler(svc.reporting).handle())


@router.get("/reports/transactions", tags=["Reports"])
def transaction_report(
    period: Optional[str] = Query(default=None),
    date_from: Optional[datetime] = Query(default=None, alias="from"),
    date_to: Optional[datetime] = Query(default=None, alias="to"),
    svc: Services = Depends(get_services),
) -> Any:
    if period is None and date_from is None and date_to is None:
        period = "week"
    totals = TransactionReportHandler(svc.reporting).handle(
        period=period,
        date_from=ensure_utc(date_from),
        date_to=ensure_utc(date_to),
    )
    return to_wire(totals)
