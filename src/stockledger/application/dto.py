"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI / HTTP layers and the application layer
without exposing domain internals.  Money is carried as a fixed-point
string (e.g. ``"50.00"``), never as a float.
"""

from __future__ import annotations

from dataclasses import dataclass

from stockledger.domain.model.item import Item
from stockledger.domain.model.transaction import Transaction
from stockledger.domain.repository.transaction_log import TransactionPage
from stockledger.domain.service.reorder_monitor import ReorderAlert
from stockledger.domain.service.reporting import InventoryValueReport, TransactionTotals


@dataclass(frozen=True)
class ItemDTO:
    id: str
    name: str
    sku: str
    description: str | None
    quantity: int
    unit_price: str
    cost_price: str
    reorder_level: int
    reorder_quantity: int
    category_id: str | None
    supplier_id: str | None
    location: str | None
    below_reorder_level: bool
    created_at: str
    updated_at: str | None

    @staticmethod
    def from_domain(item: Item) -> ItemDTO:
        return ItemDTO(
            id=item.id,  # type: ignore[arg-type]
            name=item.name,
            sku=item.sku,
            description=item.description,
            quantity=item.quantity,
            unit_price=item.unit_price.to_wire(),
            cost_price=item.cost_price.to_wire(),
            reorder_level=item.reorder_level,
            reorder_quantity=item.reorder_quantity,
            category_id=item.category_id,
            supplier_id=item.supplier_id,
            location=item.location,
            below_reorder_level=item.is_below_reorder_level,
            created_at=item.created_at.isoformat(),
            updated_at=item.updated_at.isoformat() if item.updated_at else None,
        )


@dataclass(frozen=True)
class TransactionDTO:
    id: str
    transaction_type: str
    item_id: str
    quantity: int
    quantity_change: int
    quantity_before: int
    quantity_after: int
    unit_price: str
    total_price: str
    user_id: str
    supplier_id: str | None
    reference_number: str | None
    notes: str | None
    created_at: str

    @staticmethod
    def from_domain(txn: Transaction) -> TransactionDTO:
        return TransactionDTO(
            id=txn.id,  # type: ignore[arg-type]
            transaction_type=txn.transaction_type.value,
            item_id=txn.item_id,
            quantity=txn.quantity.value,
            quantity_change=txn.quantity_change,
            quantity_before=txn.quantity_before,
            quantity_after=txn.quantity_after,
            unit_price=txn.unit_price.to_wire(),
            total_price=txn.total_price.to_wire(),
            user_id=txn.user_id,
            supplier_id=txn.supplier_id,
            reference_number=txn.reference_number,
            notes=txn.notes,
            created_at=txn.created_at.isoformat(),  # type: ignore[union-attr]
        )


@dataclass(frozen=True)
class TransactionPageDTO:
    transactions: list[TransactionDTO]
    page: int
    page_size: int
    total: int
    pages: int

    @staticmethod
    def from_domain(page: TransactionPage) -> TransactionPageDTO:
        return TransactionPageDTO(
            transactions=[TransactionDTO.from_domain(t) for t in page.transactions],
            page=page.page,
            page_size=page.page_size,
            total=page.total,
            pages=page.pages,
        )


@dataclass(frozen=True)
class ReorderAlertDTO:
    item_id: str
    name: str
    sku: str
    quantity: int
    reorder_level: int
    reorder_quantity: int
    shortfall: int
    supplier_id: str | None

    @staticmethod
    def from_domain(alert: ReorderAlert) -> ReorderAlertDTO:
        item = alert.item
        return ReorderAlertDTO(
            item_id=item.id,  # type: ignore[arg-type]
            name=item.name,
            sku=item.sku,
            quantity=item.quantity,
            reorder_level=item.reorder_level,
            reorder_quantity=item.reorder_quantity,
            shortfall=alert.shortfall,
            supplier_id=item.supplier_id,
        )


@dataclass(frozen=True)
class CategoryValueDTO:
    category_id: str
    item_count: int
    total_quantity: int
    total_value: str


@dataclass(frozen=True)
class InventoryValueDTO:
    categories: list[CategoryValueDTO]
    total_value: str

    @staticmethod
    def from_domain(report: InventoryValueReport) -> InventoryValueDTO:
        return InventoryValueDTO(
            categories=[
                CategoryValueDTO(
                    category_id=c.category_id,
                    item_count=c.item_count,
                    total_quantity=c.total_quantity,
                    total_value=c.total_value.to_wire(),
                )
                for c in report.categories
            ],
            total_value=report.total_value.to_wire(),
        )


@dataclass(frozen=True)
class TransactionTotalsDTO:
    date_from: str | None
    date_to: str | None
    outbound_value: str
    transaction_count: int
    counts_by_type: dict[str, int]

    @staticmethod
    def from_domain(totals: TransactionTotals) -> TransactionTotalsDTO:
        return TransactionTotalsDTO(
            date_from=totals.date_from.isoformat() if totals.date_from else None,
            date_to=totals.date_to.isoformat() if totals.date_to else None,
            outbound_value=totals.outbound_value.to_wire(),
            transaction_count=totals.transaction_count,
            counts_by_type=dict(totals.counts_by_type),
        )
