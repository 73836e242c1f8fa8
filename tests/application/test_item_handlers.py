"""Tests for the item use cases: add, update, delete and queries."""

import pytest

from stockledger.application.add_item import AddItemHandler
from stockledger.application.delete_item import DeleteItemHandler
from stockledger.application.record_transaction import RecordTransactionHandler
from stockledger.application.show_items import (
    CurrentQuantityHandler,
    ListItemsHandler,
    ShowItemHandler,
)
from stockledger.application.update_item import UpdateItemHandler
from stockledger.domain.exceptions import (
    DuplicateSkuError,
    EntityNotFoundError,
    InUseError,
    InvalidQuantityError,
    StorageError,
    UserRequiredError,
    ValidationError,
)
from stockledger.domain.service.ledger_engine import LedgerEngine
from tests.fakes import FakeItemRepository, FakeTransactionLog, FakeUnitOfWork, build_ledger


@pytest.fixture
def ledger():
    return build_ledger()


@pytest.fixture
def add_item(ledger):
    items, _, engine = ledger
    return AddItemHandler(engine)


class TestAddItem:

    def test_creates_item_at_zero(self, add_item, ledger):
        dto = add_item.handle(name="Widget", sku="wid-1", unit_price="4.50")

        assert dto.quantity == 0
        assert dto.sku == "WID-1"
        assert dto.unit_price == "4.50"
        assert dto.cost_price == "0.00"
        assert ledger[1].all() == []

    def test_opening_quantity_is_booked_as_stock_in(self, add_item, ledger):
        dto = add_item.handle(
            name="Widget",
            sku="WID-1",
            unit_price="4.50",
            cost_price="2.00",
            opening_quantity=12,
            user_id="alice",
        )

        assert dto.quantity == 12
        [txn] = ledger[1].all()
        assert txn.transaction_type.value == "stock_in"
        assert txn.quantity_before == 0
        assert txn.total_price.to_wire() == "24.00"
        assert txn.notes == "Opening balance"

    def test_opening_quantity_needs_a_user(self, add_item, ledger):
        with pytest.raises(UserRequiredError):
            add_item.handle(name="Widget", sku="WID-1", unit_price="1", opening_quantity=3)
        assert ledger[0].list_all() == []

    def test_negative_opening_quantity(self, add_item):
        with pytest.raises(InvalidQuantityError):
            add_item.handle(name="Widget", sku="WID-1", unit_price="1", opening_quantity=-1, user_id="a")

    def test_duplicate_sku_is_case_insensitive(self, add_item):
        add_item.handle(name="Widget", sku="WID-1", unit_price="1")
        with pytest.raises(DuplicateSkuError):
            add_item.handle(name="Other", sku=" wid-1 ", unit_price="1")

    def test_float_price_rejected(self, add_item):
        with pytest.raises(ValidationError, match="float"):
            add_item.handle(name="Widget", sku="WID-1", unit_price=4.5)

    def test_missing_name(self, add_item):
        with pytest.raises(ValidationError, match="name is required"):
            add_item.handle(name="  ", sku="WID-1", unit_price="1")

    def test_failed_write_leaves_no_half_created_item(self):
        items = FakeItemRepository()
        log = FakeTransactionLog()
        failing = LedgerEngine(items, lambda: FakeUnitOfWork(items, log, fail_on_commit=True))
        working = LedgerEngine(items, lambda: FakeUnitOfWork(items, log))
        details = dict(name="Widget", sku="W-1", unit_price="1.00", opening_quantity=10, user_id="a")

        with pytest.raises(StorageError):
            AddItemHandler(failing).handle(**details)

        assert items.list_all() == []
        assert log.all() == []
        # the SKU is still free for a retry
        assert AddItemHandler(working).handle(**details).quantity == 10


class TestUpdateItem:

    def test_updates_details(self, add_item, ledger):
        item = add_item.handle(name="Widget", sku="WID-1", unit_price="1.00")

        dto = UpdateItemHandler(ledger[0]).handle(
            item.id, {"name": "Big widget", "unit_price": "2.25", "reorder_level": 4}
        )

        assert dto.name == "Big widget"
        assert dto.unit_price == "2.25"
        assert dto.reorder_level == 4
        assert dto.updated_at is not None

    def test_quantity_is_not_editable(self, add_item, ledger):
        item = add_item.handle(name="Widget", sku="WID-1", unit_price="1", opening_quantity=5, user_id="a")

        with pytest.raises(ValidationError, match="record a transaction"):
            UpdateItemHandler(ledger[0]).handle(item.id, {"quantity": 99})

        assert ledger[0].get_by_id(item.id).quantity == 5

    def test_price_change_leaves_history_alone(self, add_item, ledger):
        item = add_item.handle(
            name="Widget", sku="WID-1", unit_price="1", cost_price="3.00",
            opening_quantity=2, user_id="a",
        )
        UpdateItemHandler(ledger[0]).handle(item.id, {"cost_price": "9.00"})

        [txn] = ledger[1].all()
        assert txn.unit_price.to_wire() == "3.00"
        assert txn.total_price.to_wire() == "6.00"

    def test_sku_collision(self, add_item, ledger):
        add_item.handle(name="A", sku="A-1", unit_price="1")
        b = add_item.handle(name="B", sku="B-1", unit_price="1")
        with pytest.raises(DuplicateSkuError):
            UpdateItemHandler(ledger[0]).handle(b.id, {"sku": "a-1"})

    def test_empty_changes(self, add_item, ledger):
        item = add_item.handle(name="Widget", sku="WID-1", unit_price="1")
        with pytest.raises(ValidationError, match="No changes"):
            UpdateItemHandler(ledger[0]).handle(item.id, {})

    def test_unknown_item(self, ledger):
        with pytest.raises(EntityNotFoundError):
            UpdateItemHandler(ledger[0]).handle("missing", {"name": "x"})


class TestDeleteItem:

    def test_deletes_unused_item(self, add_item, ledger):
        item = add_item.handle(name="Widget", sku="WID-1", unit_price="1")
        DeleteItemHandler(ledger[2]).handle(item.id)
        assert ledger[0].get_by_id(item.id) is None

    def test_refuses_item_with_history(self, add_item, ledger):
        item = add_item.handle(name="Widget", sku="WID-1", unit_price="1", opening_quantity=1, user_id="a")
        with pytest.raises(InUseError):
            DeleteItemHandler(ledger[2]).handle(item.id)
        assert ledger[0].get_by_id(item.id) is not None

    def test_unknown_item(self, ledger):
        with pytest.raises(EntityNotFoundError):
            DeleteItemHandler(ledger[2]).handle("missing")


class TestQueries:

    def test_show_and_current_quantity(self, add_item, ledger):
        item = add_item.handle(name="Widget", sku="WID-1", unit_price="1")
        RecordTransactionHandler(ledger[2]).handle(
            transaction_type="purchase", item_id=item.id, unit_price="1.00", user_id="a", quantity=8
        )

        assert ShowItemHandler(ledger[0]).handle(item.id).quantity == 8
        assert CurrentQuantityHandler(ledger[0]).handle(item.id) == 8

    def test_reads_do_not_change_anything(self, add_item, ledger):
        item = add_item.handle(name="Widget", sku="WID-1", unit_price="1", opening_quantity=3, user_id="a")
        before = ledger[0].snapshot()

        for _ in range(3):
            CurrentQuantityHandler(ledger[0]).handle(item.id)
            ShowItemHandler(ledger[0]).handle(item.id)

        assert ledger[0].snapshot() == before
        assert len(ledger[1].all()) == 1

    def test_current_quantity_unknown_item(self, ledger):
        with pytest.raises(EntityNotFoundError):
            CurrentQuantityHandler(ledger[0]).handle("missing")

    def test_list_sorted_by_name_and_filtered(self, add_item, ledger):
        add_item.handle(name="bolt", sku="B", unit_price="1", category_id="hardware")
        add_item.handle(name="Anchor", sku="A", unit_price="1", category_id="hardware")
        add_item.handle(name="Cable", sku="C", unit_price="1", category_id="electrical")

        handler = ListItemsHandler(ledger[0])

        assert [i.name for i in handler.handle()] == ["Anchor", "bolt", "Cable"]
        assert [i.name for i in handler.handle(category_id="hardware")] == ["Anchor", "bolt"]
