"""
Append-only enforcement at the ORM layer.

Ledger entries can never be updated or deleted, and an asset's cached
quantity can only move in the same flush as a new ledger entry.
"""

import pytest

from inventory_kernel.db.unit_of_work import unit_of_work
from inventory_kernel.exceptions import ImmutabilityViolationError, TransactionRequiredError
from inventory_kernel.models.asset import AssetModel
from inventory_kernel.models.stock import StockEntryModel


class TestStockEntryImmutability:
    def test_update_rejected(self, session, create_property, stock_selector):
        asset = create_property(quantity=2)
        entry = stock_selector.get_entry(stock_selector.get_stocks_by_asset_id(asset.id)[0].id)
        entry.ins = 20

        with pytest.raises(ImmutabilityViolationError) as exc_info:
            session.flush()
        assert exc_info.value.entity_type == "StockEntry"
        session.rollback()

        assert stock_selector.get_stocks_by_asset_id(asset.id)[0].ins == 2

    def test_delete_rejected(self, session, create_property, stock_selector):
        asset = create_property(quantity=2)
        entry = session.get(StockEntryModel, stock_selector.get_stocks_by_asset_id(asset.id)[0].id)
        session.delete(entry)

        with pytest.raises(ImmutabilityViolationError):
            session.flush()
        session.rollback()

        assert len(stock_selector.get_stocks_by_asset_id(asset.id)) == 1


class TestQuantityCache:
    def test_quantity_change_without_entry_rejected(self, session, create_property):
        asset = create_property(quantity=2)
        row = session.get(AssetModel, asset.id)
        row.quantity = 1

        with pytest.raises(ImmutabilityViolationError) as exc_info:
            session.flush()
        assert exc_info.value.entity_type == "Asset"
        session.rollback()

        assert session.get(AssetModel, asset.id).quantity == 2

    def test_other_attribute_changes_allowed(self, session, create_property):
        asset = create_property(quantity=2)
        row = session.get(AssetModel, asset.id)
        row.description = "Ergonomic"
        session.flush()
        session.commit()
        assert session.get(AssetModel, asset.id).description == "Ergonomic"

    def test_violation_is_logged(self, session, create_property, captured_logs):
        asset = create_property(quantity=2)
        session.get(AssetModel, asset.id).quantity = 5
        with pytest.raises(ImmutabilityViolationError):
            session.flush()
        session.rollback()
        blocked = [r for r in captured_logs() if r["message"] == "immutability_violation_blocked"]
        assert blocked[0]["reason"] == "quantity_without_ledger_entry"

    def test_direct_quantity_update_needs_ledger_entry(self, session, asset_service, create_property):
        asset = create_property(quantity=2)
        with pytest.raises(ImmutabilityViolationError):
            with unit_of_work(session, "bare_quantity_update") as uow:
                asset_service.update_asset_qty_by_id(uow, asset.id, 7)
        assert asset_service.get_asset_by_id(asset.id).quantity == 2

    def test_quantity_update_requires_unit_of_work(self, session, asset_service, create_property):
        asset = create_property(quantity=2)
        with unit_of_work(session, "closed") as uow:
            pass
        with pytest.raises(TransactionRequiredError):
            asset_service.update_asset_qty_by_id(uow, asset.id, 1)
