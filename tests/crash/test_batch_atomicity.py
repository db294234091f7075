"""
Fault injection for batch and document-level writes.

A batch, or a document transition that writes several ledger entries, is
one unit of work.  These tests break it part-way through and check that:

1. No ledger entry from the failed group survives
2. Cached asset quantities are untouched
3. Counters consumed inside the group are rolled back with it
4. A failure after commit (notification) does not undo the commit
"""

from unittest.mock import patch

import pytest

from inventory_kernel.domain.conditions import StockCondition
from inventory_kernel.domain.dtos import BatchItem, IssueBatchRequest, StockMovementRequest
from inventory_kernel.exceptions import InsufficientStockError
from inventory_kernel.services.notification import LoggingNotificationService
from inventory_kernel.services.sequence_service import CounterType
from inventory_kernel.services.stock_ledger import StockLedgerService
from inventory_modules.issue_slip.models import IssueSlipStatus
from inventory_modules.issue_slip.schemas import IssueSlipCreateRequest, IssueSlipIssueRequest
from inventory_modules.loss.models import LossStatus
from inventory_modules.loss.schemas import LossCreateRequest
from inventory_modules.ris.models import RisStatus
from inventory_modules.ris.schemas import (
    RisApproveRequest,
    RisCreateRequest,
    RisIssueRequest,
    RisReviewRequest,
)
from tests.conftest import APPROVER_ID, CUSTODIAN_ID, RECEIVING_OFFICE_ID, SUPERVISOR_ID


class SimulatedCrash(Exception):
    """Exception to simulate a crash at a specific point."""
    pass


def crash_on_call(n):
    """
    Side effect for a patched ``StockLedgerService.write_movement``.

    Delegates to the real method and raises ``SimulatedCrash`` on the
    ``n``-th call instead of writing.
    """
    original = StockLedgerService.write_movement
    calls = []

    def _write(self, uow, movement):
        calls.append(movement.asset_id)
        if len(calls) == n:
            raise SimulatedCrash(f"Simulated crash on ledger write {n}")
        return original(self, uow, movement)

    _write.calls = calls
    return _write


def _issue(asset_id, qty):
    return BatchItem(asset_id=asset_id, qty=qty, condition=StockCondition.REISSUED)


@pytest.fixture
def five_consumables(create_consumable):
    return [create_consumable(quantity=5) for _ in range(5)]


def _snapshot(assets, asset_service, stock_selector):
    return {
        a.id: (
            asset_service.get_asset_by_id(a.id).quantity,
            len(stock_selector.get_stocks_by_asset_id(a.id)),
        )
        for a in assets
    }


class TestBatchAllOrNothing:
    def test_invalid_fourth_item_writes_nothing(
        self, five_consumables, batch_service, asset_service, stock_selector, sequence_service
    ):
        before = _snapshot(five_consumables, asset_service, stock_selector)
        seq_before = sequence_service.current_value(CounterType.STOCK_LEDGER.value)
        items = [_issue(a.id, 1) for a in five_consumables]
        items[3] = _issue(five_consumables[3].id, 6)

        with pytest.raises(InsufficientStockError):
            batch_service.issue_stock_by_batch(
                IssueBatchRequest(office_id=RECEIVING_OFFICE_ID, items=items)
            )

        assert _snapshot(five_consumables, asset_service, stock_selector) == before
        assert sequence_service.current_value(CounterType.STOCK_LEDGER.value) == seq_before

    def test_crash_on_fourth_write_writes_nothing(
        self, five_consumables, batch_service, asset_service, stock_selector,
        sequence_service, ledger_selector,
    ):
        before = _snapshot(five_consumables, asset_service, stock_selector)
        seq_before = sequence_service.current_value(CounterType.STOCK_LEDGER.value)
        side_effect = crash_on_call(4)

        with patch.object(
            StockLedgerService, "write_movement", autospec=True, side_effect=side_effect
        ):
            with pytest.raises(SimulatedCrash):
                batch_service.issue_stock_by_batch(
                    IssueBatchRequest(
                        office_id=RECEIVING_OFFICE_ID,
                        items=[_issue(a.id, 2) for a in five_consumables],
                    )
                )

        assert len(side_effect.calls) == 4
        assert _snapshot(five_consumables, asset_service, stock_selector) == before
        assert sequence_service.current_value(CounterType.STOCK_LEDGER.value) == seq_before
        assert all(c.is_consistent for c in ledger_selector.verify_all())

    def test_ledger_usable_after_crash(
        self, five_consumables, batch_service, ledger_service, sequence_service
    ):
        seq_before = sequence_service.current_value(CounterType.STOCK_LEDGER.value)
        with patch.object(
            StockLedgerService, "write_movement", autospec=True, side_effect=crash_on_call(2)
        ):
            with pytest.raises(SimulatedCrash):
                batch_service.issue_stock_by_batch(
                    IssueBatchRequest(items=[_issue(a.id, 1) for a in five_consumables])
                )

        record = ledger_service.create_stock(
            StockMovementRequest(
                asset_id=five_consumables[0].id, outs=1, condition=StockCondition.REISSUED
            )
        )
        assert record.seq == seq_before + 1
        assert record.balance == 4


class TestDocumentTransitionAtomicity:
    def test_issue_slip_crash_keeps_slip_pending(
        self, issue_slip_service, issue_units, create_property, asset_service, stock_selector
    ):
        asset = create_property(quantity=10)
        slip = issue_slip_service.create_issue_slip(
            IssueSlipCreateRequest(asset_id=asset.id, quantity=3, received_by=CUSTODIAN_ID)
        )

        with patch.object(
            StockLedgerService, "write_movement", autospec=True, side_effect=crash_on_call(3)
        ):
            with pytest.raises(SimulatedCrash):
                issue_slip_service.update_status_to_issued(
                    slip.id, IssueSlipIssueRequest(issued_by=APPROVER_ID)
                )

        assert issue_slip_service.get_issue_slip_by_id(slip.id).status is IssueSlipStatus.PENDING
        assert stock_selector.get_stocks_by_reference(slip.issue_slip_no) == []
        assert asset_service.get_asset_by_id(asset.id).quantity == 10

        # The numbers the crashed issue would have used are still free
        retried, entries = issue_units(asset, 3)
        assert retried.issue_item_no == "1-3"
        assert [e.item_no for e in entries] == ["1", "2", "3"]

    def test_ris_crash_rolls_back_every_line(
        self, ris_service, create_consumable, asset_service, stock_selector
    ):
        supplies = [create_consumable(quantity=10) for _ in range(5)]
        ris = ris_service.create_ris(
            RisCreateRequest(
                requested_by=CUSTODIAN_ID,
                items=[{"asset_id": a.id, "request_qty": 2} for a in supplies],
            )
        )
        ris_service.update_status_to_evaluating(ris.id)
        ris_service.update_status_to_for_review(
            ris.id,
            RisReviewRequest(items=[{"asset_id": a.id, "issue_qty": 2} for a in supplies]),
        )
        ris_service.update_status_to_pending(ris.id, RisApproveRequest(approved_by=APPROVER_ID))

        with patch.object(
            StockLedgerService, "write_movement", autospec=True, side_effect=crash_on_call(4)
        ):
            with pytest.raises(SimulatedCrash):
                ris_service.update_status_to_issued(
                    ris.id, RisIssueRequest(issued_by=APPROVER_ID, received_by=CUSTODIAN_ID)
                )

        assert ris_service.get_ris_by_id(ris.id).status is RisStatus.PENDING
        assert stock_selector.get_stocks_by_reference(ris.ris_no) == []
        assert [asset_service.get_asset_by_id(a.id).quantity for a in supplies] == [10] * 5


class TestAfterCommitFailure:
    def test_notification_crash_keeps_report(
        self, loss_service, notifier, create_property, issue_units, captured_logs
    ):
        asset = create_property(quantity=3)
        _, entries = issue_units(asset, 1)

        with patch.object(
            LoggingNotificationService, "send",
            side_effect=SimulatedCrash("Simulated mail outage"),
        ):
            loss = loss_service.create_loss(
                LossCreateRequest(
                    type="SEP",
                    loss_status=LossStatus.STOLEN,
                    supervisor_id=SUPERVISOR_ID,
                    items=[{"stock_id": entries[0].id}],
                )
            )

        assert loss_service.get_loss_by_id(loss.id).loss_no == loss.loss_no
        assert notifier.sent == []
        assert any(r["message"] == "notification_failed" for r in captured_logs())
