"""Domain service: Reporting projections.

Aggregates recomputed from the item store and the transaction log on
every call.  Nothing here writes.
"""

from __future__ import annotations

from calendar import monthrange
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from stockledger.domain.exceptions import ValidationError
from stockledger.domain.model.value_objects import Money
from stockledger.domain.repository.item_repository import ItemRepository
from stockledger.domain.repository.transaction_log import TransactionLog
from stockledger.domain.service.clock import Clock

UNCATEGORIZED = "uncategorized"

# Named reporting windows ending at "now": a week, or a number of calendar months.
PERIODS = {
    "week": ("days", 7),
    "month": ("months", 1),
    "quarter": ("months", 3),
    "year": ("months", 12),
}


@dataclass(frozen=True)
class CategoryValue:
    category_id: str
    item_count: int
    total_quantity: int
    total_value: Money


@dataclass(frozen=True)
class InventoryValueReport:
    categories: list[CategoryValue]
    total_value: Money


@dataclass(frozen=True)
class TransactionTotals:
    date_from: datetime | None
    date_to: datetime | None
    outbound_value: Money
    transaction_count: int
    counts_by_type: dict[str, int] = field(default_factory=dict)


class ReportingService:

    def __init__(
        self,
        item_repo: ItemRepository,
        transaction_log: TransactionLog,
        clock: Clock,
    ) -> None:
        self._item_repo = item_repo
        self._transaction_log = transaction_log
        self._clock = clock

    def inventory_value_by_category(self) -> InventoryValueReport:
        """Sum of quantity x unit price per category, highest value first.

        Items without a category land in the ``uncategorized`` bucket.
        """
        buckets: dict[str, tuple[int, int, Money]] = {}
        for item in self._item_repo.list_all():
            key = item.category_id or UNCATEGORIZED
            count, quantity, value = buckets.get(key, (0, 0, Money.zero()))
            buckets[key] = (count + 1, quantity + item.quantity, value + item.stock_value)

        categories = [
            CategoryValue(
                category_id=key,
                item_count=count,
                total_quantity=quantity,
                total_value=value,
            )
            for key, (count, quantity, value) in buckets.items()
        ]
        categories.sort(key=lambda c: (-c.total_value.amount, c.category_id))

        total = Money.zero()
        for category in categories:
            total = total + category.total_value
        return InventoryValueReport(categories=categories, total_value=total)

    def transaction_totals(
        self,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> TransactionTotals:
        """Outbound (sale / stock-out) value and per-type counts in a window.

        ``date_from`` is inclusive, ``date_to`` exclusive; either may be
        open-ended.
        """
        if date_from and date_to and date_from >= date_to:
            raise ValidationError("Date range start must be before its end")

        outbound = Money.zero()
        counts: dict[str, int] = {}
        transactions = self._transaction_log.list_between(date_from, date_to)
        for txn in transactions:
            if txn.transaction_type.is_outbound:
                outbound = outbound + txn.total_price
            key = txn.transaction_type.value
            counts[key] = counts.get(key, 0) + 1

        return TransactionTotals(
            date_from=date_from,
            date_to=date_to,
            outbound_value=outbound,
            transaction_count=len(transactions),
            counts_by_type=counts,
        )

    def transaction_totals_for_period(self, period: str) -> TransactionTotals:
        """Totals for one of the named windows in ``PERIODS``."""
        date_from, date_to = self.period_window(period)
        return self.transaction_totals(date_from, date_to)

    def period_window(self, period: str) -> tuple[datetime, datetime]:
        """Start and exclusive end of a named period.

        Month-based periods step back by calendar months, clamping the day
        to the length of the target month (31 May minus a month is 30 April).
        """
        window = PERIODS.get((period or "").strip().lower())
        if window is None:
            raise ValidationError(
                f"Unknown period '{period}' (expected one of: {', '.join(PERIODS)})"
            )
        unit, count = window
        now = self._clock.now()
        start = now - timedelta(days=count) if unit == "days" else months_before(now, count)
        # end is exclusive, so nudge it past "now" to include this instant
        return start, now + timedelta(microseconds=1)


def months_before(moment: datetime, months: int) -> datetime:
    """The same wall-clock time ``months`` calendar months earlier."""
    index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(index, 12)
    month += 1
    day = min(moment.day, monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)
