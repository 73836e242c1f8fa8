from datetime import datetime, timedelta, timezone

import pytest

from stockledger.domain.exceptions import ValidationError
from stockledger.domain.model.transaction import Transaction, TransactionType
from stockledger.domain.model.value_objects import Money, Quantity
from stockledger.domain.repository.transaction_log import TransactionFilter

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _txn(n, item_id="1", txn_type=TransactionType.SALE):
    return Transaction(
        id=str(n),
        transaction_type=txn_type,
        item_id=item_id,
        quantity=Quantity(1),
        quantity_change=-1,
        quantity_before=10,
        quantity_after=9,
        unit_price=Money.zero(),
        total_price=Money.zero(),
        user_id="alice",
        created_at=T0 + timedelta(minutes=n),
    )


LOG = [
    _txn(1),
    _txn(2, item_id="2"),
    _txn(3, txn_type=TransactionType.PURCHASE),
    _txn(4),
    _txn(5, item_id="2", txn_type=TransactionType.PURCHASE),
]


def test_newest_first_by_default():
    page = TransactionFilter().paginate(LOG)
    assert [t.id for t in page.transactions] == ["5", "4", "3", "2", "1"]
    assert page.total == 5


def test_oldest_first():
    page = TransactionFilter(oldest_first=True).paginate(LOG)
    assert [t.id for t in page.transactions] == ["1", "2", "3", "4", "5"]


def test_item_and_type_filters_combine():
    page = TransactionFilter(item_id="1", transaction_type=TransactionType.SALE).paginate(LOG)
    assert [t.id for t in page.transactions] == ["4", "1"]


def test_date_range_is_half_open():
    criteria = TransactionFilter(
        date_from=T0 + timedelta(minutes=2),
        date_to=T0 + timedelta(minutes=4),
    )
    assert [t.id for t in criteria.paginate(LOG).transactions] == ["3", "2"]


def test_pages_do_not_overlap():
    first = TransactionFilter(page=1, page_size=2).paginate(LOG)
    third = TransactionFilter(page=3, page_size=2).paginate(LOG)
    assert [t.id for t in first.transactions] == ["5", "4"]
    assert [t.id for t in third.transactions] == ["1"]
    assert first.pages == 3


def test_page_past_the_end_is_empty():
    page = TransactionFilter(page=9, page_size=2).paginate(LOG)
    assert page.transactions == []
    assert page.total == 5


def test_empty_log_has_one_page():
    assert TransactionFilter().paginate([]).pages == 1


@pytest.mark.parametrize("kwargs", [
    {"page": 0},
    {"page_size": 0},
    {"date_from": T0, "date_to": T0},
])
def test_invalid_criteria(kwargs):
    with pytest.raises(ValidationError):
        TransactionFilter(**kwargs)
