"""
End-to-end ledger scenarios across issue slips, returns and loss reports.

Each scenario starts from a SEP asset received with 10 units and checks
both the ledger rows written and the cached asset quantity.
"""

import pytest

from inventory_kernel.domain.conditions import StockCondition
from inventory_kernel.domain.dtos import StockMovementRequest
from inventory_kernel.exceptions import BadRequestError, StaleStockReferenceError
from inventory_modules.issue_slip.schemas import IssueSlipCreateRequest
from inventory_modules.loss.models import LossStatus
from inventory_modules.loss.schemas import LossApproveRequest, LossCreateRequest
from inventory_modules.returns.models import StockRemarks
from inventory_modules.returns.schemas import (
    ReturnApproveRequest,
    ReturnCompleteRequest,
    ReturnCreateRequest,
)
from tests.conftest import APPROVER_ID, CUSTODIAN_ID, RECEIVER_ID, SUPERVISOR_ID


@pytest.fixture
def issued_three(create_property, issue_units):
    """Scenario A setup: 10 units received, 3 issued."""
    asset = create_property(quantity=10)
    slip, entries = issue_units(asset, 3)
    return asset, slip, entries


def _return_units(return_service, entries, remarks=StockRemarks.FOR_REISSUE):
    document = return_service.create_return(
        ReturnCreateRequest(
            type="SEP",
            returned_by=CUSTODIAN_ID,
            items=[{"stock_id": e.id, "stock_remarks": remarks} for e in entries],
        )
    )
    return_service.update_status_to_approved(document.id, ReturnApproveRequest(approved_by=APPROVER_ID))
    return return_service.update_status_to_completed(
        document.id, ReturnCompleteRequest(received_by=SUPERVISOR_ID)
    )


class TestScenarioA:
    def test_issue_three_units(self, issued_three, asset_service, stock_selector, ledger_selector):
        asset, slip, entries = issued_three

        assert [(e.item_no, e.condition, e.outs) for e in entries] == [
            ("1", StockCondition.REISSUED, 1),
            ("2", StockCondition.REISSUED, 1),
            ("3", StockCondition.REISSUED, 1),
        ]
        info = asset_service.get_asset_by_id(asset.id)
        assert info.initial_qty == 10
        assert info.quantity == 7
        assert len(stock_selector.get_stocks_by_asset_id(asset.id)) == 4
        assert ledger_selector.verify_asset_quantity(asset.id).is_consistent


class TestScenarioB:
    def test_return_one_unit_for_reissue(
        self, issued_three, return_service, asset_service, stock_selector, ledger_selector
    ):
        asset, _, entries = issued_three
        document = _return_units(return_service, entries[:1])

        written = stock_selector.get_stocks_by_reference(document.return_no)
        assert [(e.item_no, e.ins, e.outs, e.condition) for e in written] == [
            ("1", 1, 0, StockCondition.RETURNED),
        ]
        assert asset_service.get_asset_by_id(asset.id).quantity == 8
        assert ledger_selector.verify_asset_quantity(asset.id).is_consistent


class TestScenarioC:
    def test_over_issue_rejected_without_writes(
        self, issued_three, issue_slip_service, asset_service, stock_selector
    ):
        asset, _, _ = issued_three
        before = stock_selector.get_stocks_by_asset_id(asset.id)

        with pytest.raises(BadRequestError):
            issue_slip_service.create_issue_slip(
                IssueSlipCreateRequest(asset_id=asset.id, quantity=8, received_by=CUSTODIAN_ID)
            )

        assert stock_selector.get_stocks_by_asset_id(asset.id) == before
        assert asset_service.get_asset_by_id(asset.id).quantity == 7


class TestScenarioD:
    def test_lost_unit_keeps_quantity(
        self, issued_three, loss_service, asset_service, stock_selector, ledger_selector
    ):
        asset, _, entries = issued_three
        loss = loss_service.create_loss(
            LossCreateRequest(
                type="SEP",
                loss_status=LossStatus.LOST,
                supervisor_id=SUPERVISOR_ID,
                items=[{"stock_id": entries[1].id}],
            )
        )
        loss_service.update_status_to_approved(loss.id, LossApproveRequest(supervisor_id=SUPERVISOR_ID))
        loss_service.update_status_to_completed(loss.id)

        written = stock_selector.get_stocks_by_reference(loss.loss_no)
        assert [(e.item_no, e.condition, e.outs) for e in written] == [
            ("2", StockCondition.LOST, 1),
        ]
        assert asset_service.get_asset_by_id(asset.id).quantity == 7
        assert ledger_selector.verify_asset_quantity(asset.id).is_consistent


class TestIssuanceBoundary:
    def test_exactly_remaining_succeeds(self, issued_three, issue_units, asset_service):
        asset, _, _ = issued_three
        slip, entries = issue_units(asset, 7)
        assert slip.issue_item_no == "4-10"
        assert [e.item_no for e in entries] == [str(n) for n in range(4, 11)]
        assert asset_service.get_asset_by_id(asset.id).quantity == 0

    def test_one_more_than_remaining_fails(self, issued_three, issue_units, stock_selector):
        asset, _, _ = issued_three
        before = len(stock_selector.get_stocks_by_asset_id(asset.id))
        with pytest.raises(BadRequestError):
            issue_units(asset, 8)
        assert len(stock_selector.get_stocks_by_asset_id(asset.id)) == before

    def test_issue_after_return_renumbers_unit_still_out(
        self, issued_three, return_service, issue_units, asset_service, stock_selector
    ):
        asset, _, entries = issued_three
        _return_units(return_service, entries[:1])
        slip, _ = issue_units(asset, 8)
        # Numbers restart at initial_qty - quantity + 1, not at a free number
        assert slip.issue_item_no == "3-10"
        assert asset_service.get_asset_by_id(asset.id).quantity == 0

        # Unit 3 from the first slip is still out, but its entry is superseded
        with pytest.raises(StaleStockReferenceError):
            stock_selector.require_latest(entries[2].id)


class TestWholeRegistry:
    def test_every_asset_consistent_after_mixed_activity(
        self, create_property, create_consumable, issue_units, return_service,
        ledger_service, ledger_selector,
    ):
        laptops = create_property(quantity=4)
        chairs = create_property(quantity=6)
        paper = create_consumable(quantity=50)
        _, out = issue_units(laptops, 3)
        issue_units(chairs, 2, received_by=RECEIVER_ID)
        _return_units(return_service, out[:2])
        _return_units(return_service, out[2:], StockRemarks.FOR_DISPOSAL)
        ledger_service.create_stock(
            StockMovementRequest(asset_id=paper.id, outs=12, condition=StockCondition.REISSUED)
        )

        checks = ledger_selector.verify_all()
        assert len(checks) == 3
        assert all(c.is_consistent for c in checks)
        by_asset = {c.asset_id: c.ledger_quantity for c in checks}
        assert by_asset == {laptops.id: 3, chairs.id: 4, paper.id: 38}
