"""Tests for the read side of the stock ledger."""

from uuid import uuid4

import pytest

from inventory_kernel.domain.conditions import StockCondition
from inventory_kernel.domain.dtos import StockMovementRequest
from inventory_kernel.exceptions import StaleStockReferenceError, StockNotFoundError
from tests.conftest import RECEIVING_OFFICE_ID, SUPPLY_OFFICE_ID


@pytest.fixture
def move(ledger_service):
    """Write one unit movement and return its record."""

    def _move(
        asset,
        item_no,
        condition,
        initial_condition,
        office_id=RECEIVING_OFFICE_ID,
        reference="TEST-REF",
    ):
        counts = {"ins": 1} if condition is StockCondition.RETURNED else {"outs": 1}
        return ledger_service.create_stock(
            StockMovementRequest(
                asset_id=asset.id,
                item_no=item_no,
                condition=condition,
                initial_condition=initial_condition,
                office_id=office_id,
                reference=reference,
                **counts,
            )
        )

    return _move


def _issue(move, asset, item_no, office_id=RECEIVING_OFFICE_ID):
    return move(
        asset, item_no, StockCondition.REISSUED, StockCondition.GOOD_CONDITION, office_id
    )


class TestEntryLookups:
    def test_unknown_entry(self, stock_selector, session):
        with pytest.raises(StockNotFoundError):
            stock_selector.get_stock_by_id(uuid4())

    def test_entries_by_reference(self, create_property, move, stock_selector):
        asset = create_property(quantity=3)
        move(asset, "1", StockCondition.REISSUED, StockCondition.GOOD_CONDITION, reference="ICS-1")
        move(asset, "2", StockCondition.REISSUED, StockCondition.GOOD_CONDITION, reference="ICS-1")
        move(asset, "3", StockCondition.REISSUED, StockCondition.GOOD_CONDITION, reference="ICS-2")
        assert [e.item_no for e in stock_selector.get_stocks_by_reference("ICS-1")] == ["1", "2"]


class TestLatestEntry:
    def test_latest_tracks_newest_movement(self, create_property, move, stock_selector):
        asset = create_property(quantity=2)
        _issue(move, asset, "1")
        returned = move(asset, "1", StockCondition.RETURNED, StockCondition.REISSUED, SUPPLY_OFFICE_ID)
        latest = stock_selector.get_latest_stock(asset.id, "1")
        assert latest.id == returned.id
        assert latest.condition is StockCondition.RETURNED

    def test_same_instant_ordered_by_seq(self, create_property, move, stock_selector):
        asset = create_property(quantity=2)
        first = _issue(move, asset, "1")
        second = move(asset, "1", StockCondition.LOST, StockCondition.REISSUED)
        assert first.created_at == second.created_at
        assert stock_selector.get_latest_stock(asset.id, "1").id == second.id

    def test_unit_without_entries(self, create_property, stock_selector):
        asset = create_property(quantity=2)
        assert stock_selector.get_latest_stock(asset.id, "2") is None

    def test_require_latest_rejects_superseded_entry(self, create_property, move, stock_selector):
        asset = create_property(quantity=2)
        issued = _issue(move, asset, "1")
        newer = move(asset, "1", StockCondition.RETURNED, StockCondition.REISSUED, SUPPLY_OFFICE_ID)
        with pytest.raises(StaleStockReferenceError) as exc_info:
            stock_selector.require_latest(issued.id)
        assert exc_info.value.latest_stock_id == str(newer.id)
        assert stock_selector.require_latest(newer.id).id == newer.id

    def test_require_latest_ignores_consumables(self, create_consumable, ledger_service, stock_selector):
        asset = create_consumable(quantity=5)
        ledger_service.create_stock(
            StockMovementRequest(asset_id=asset.id, outs=1, condition=StockCondition.REISSUED)
        )
        receipt = stock_selector.get_stocks_by_asset_id(asset.id)[0]
        assert stock_selector.require_latest(receipt.id).id == receipt.id


class TestUnitsOut:
    def test_latest_stocks_filtered(self, create_property, move, stock_selector):
        asset = create_property(quantity=3)
        _issue(move, asset, "1")
        _issue(move, asset, "2", office_id=SUPPLY_OFFICE_ID)
        move(asset, "2", StockCondition.RETURNED, StockCondition.REISSUED, SUPPLY_OFFICE_ID)

        reissued = stock_selector.get_latest_stocks([StockCondition.REISSUED], asset_id=asset.id)
        assert [e.item_no for e in reissued] == ["1"]

        at_supply = stock_selector.get_latest_stocks(office_id=SUPPLY_OFFICE_ID)
        assert [(e.item_no, e.condition) for e in at_supply] == [
            ("1-3", StockCondition.GOOD_CONDITION),
            ("2", StockCondition.RETURNED),
        ]

    def test_reissued_stocks_per_office(self, create_property, move, stock_selector):
        asset = create_property(quantity=3)
        one = _issue(move, asset, "1")
        two = _issue(move, asset, "2")
        _issue(move, asset, "3", office_id=SUPPLY_OFFICE_ID)

        out = stock_selector.get_reissued_stocks(office_id=RECEIVING_OFFICE_ID)
        assert {e.id for e in out} == {one.id, two.id}

        remaining = stock_selector.get_reissued_stocks(
            office_id=RECEIVING_OFFICE_ID, exclude_stock_ids=[one.id]
        )
        assert [e.id for e in remaining] == [two.id]

    def test_consumable_entries_never_listed(self, create_consumable, ledger_service, stock_selector):
        asset = create_consumable(quantity=5)
        ledger_service.create_stock(
            StockMovementRequest(
                asset_id=asset.id,
                outs=1,
                condition=StockCondition.REISSUED,
                office_id=RECEIVING_OFFICE_ID,
            )
        )
        assert stock_selector.get_reissued_stocks(office_id=RECEIVING_OFFICE_ID) == []
