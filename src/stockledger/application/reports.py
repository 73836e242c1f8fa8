"""Application services: read-side reports (reorder alerts, value, totals)."""

from __future__ import annotations

from datetime import datetime

from stockledger.application.dto import (
    InventoryValueDTO,
    ReorderAlertDTO,
    TransactionTotalsDTO,
)
from stockledger.domain.exceptions import ValidationError
from stockledger.domain.service.reorder_monitor import ReorderMonitor
from stockledger.domain.service.reporting import ReportingService


class ShowReorderAlertsHandler:

    def __init__(self, monitor: ReorderMonitor) -> None:
        self._monitor = monitor

    def handle(self) -> list[ReorderAlertDTO]:
        return [ReorderAlertDTO.from_domain(a) for a in self._monitor.list_below_reorder_level()]


class InventoryValueReportHandler:

    def __init__(self, reporting: ReportingService) -> None:
        self._reporting = reporting

    def handle(self) -> InventoryValueDTO:
        return InventoryValueDTO.from_domain(self._reporting.inventory_value_by_category())


class TransactionReportHandler:

    def __init__(self, reporting: ReportingService) -> None:
        self._reporting = reporting

    def handle(
        self,
        period: str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> TransactionTotalsDTO:
        """Totals for a named period, or for an explicit window."""
        if period and (date_from or date_to):
            raise ValidationError("Give either a period or a date range, not both")
        if period:
            totals = self._reporting.transaction_totals_for_period(period)
        else:
            totals = self._reporting.transaction_totals(date_from, date_to)
        return TransactionTotalsDTO.from_domain(totals)
