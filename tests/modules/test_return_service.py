"""
Return lifecycle tests.

Units come back from the office they were issued to: ``for-reissue``
units re-enter the pool, ``for-disposal`` units are parked until a waste
report disposes of them.
"""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from inventory_kernel.domain.conditions import AssetType, StockCondition
from inventory_kernel.exceptions import (
    BadRequestError,
    InvalidConditionTransitionError,
    InvalidTransitionError,
    OfficeNotFoundError,
    StaleStockReferenceError,
)
from inventory_modules.returns.models import ReturnStatus, StockRemarks
from inventory_modules.returns.schemas import (
    ReturnApproveRequest,
    ReturnCompleteRequest,
    ReturnCreateRequest,
)
from tests.conftest import (
    APPROVER_ID,
    CUSTODIAN_ID,
    NO_OFFICE_USER_ID,
    RECEIVER_ID,
    SUPERVISOR_ID,
    SUPPLY_OFFICE_ID,
)


def _request(entries, remarks=StockRemarks.FOR_REISSUE, asset_type=AssetType.SEP,
             returned_by=CUSTODIAN_ID):
    return ReturnCreateRequest(
        type=asset_type,
        returned_by=returned_by,
        items=[{"stock_id": e.id, "stock_remarks": remarks} for e in entries],
    )


@pytest.fixture
def completed_return(return_service):
    def _complete(document, received_by=SUPERVISOR_ID):
        return_service.update_status_to_approved(
            document.id, ReturnApproveRequest(approved_by=APPROVER_ID)
        )
        return return_service.update_status_to_completed(
            document.id, ReturnCompleteRequest(received_by=received_by)
        )

    return _complete


class TestCreateReturn:
    def test_pending_return_drafted(self, return_service, create_property, issue_units):
        asset = create_property(quantity=5)
        _, entries = issue_units(asset, 2)
        document = return_service.create_return(_request(entries))

        assert document.status is ReturnStatus.PENDING
        assert document.return_no == "2024-01-15-01"
        assert document.office_id == SUPPLY_OFFICE_ID
        assert document.returned_by_name == "Ana Custodio"
        assert [i.item_no for i in document.items] == ["1", "2"]

    def test_drafting_moves_no_stock(
        self, return_service, create_property, issue_units, asset_service
    ):
        asset = create_property(quantity=5)
        _, entries = issue_units(asset, 2)
        return_service.create_return(_request(entries))
        assert asset_service.get_asset_by_id(asset.id).quantity == 3

    def test_sep_and_ppe_numbered_independently(
        self, return_service, create_property, issue_units
    ):
        sep = create_property(quantity=2)
        ppe = create_property(asset_type=AssetType.PPE, quantity=2)
        _, sep_entries = issue_units(sep, 1)
        _, ppe_entries = issue_units(ppe, 1)

        first = return_service.create_return(_request(sep_entries))
        second = return_service.create_return(_request(ppe_entries, asset_type=AssetType.PPE))
        # Each type keeps its own counter, so the same day yields the same number
        assert first.return_no == second.return_no == "2024-01-15-01"
        assert (first.type, second.type) == (AssetType.SEP, AssetType.PPE)

    def test_type_mismatch(self, return_service, create_property, issue_units):
        asset = create_property(quantity=5)
        _, entries = issue_units(asset, 1)
        with pytest.raises(BadRequestError):
            return_service.create_return(_request(entries, asset_type=AssetType.PPE))

    def test_superseded_entry_rejected(
        self, return_service, create_property, issue_units, completed_return
    ):
        asset = create_property(quantity=5)
        _, entries = issue_units(asset, 1)
        completed_return(return_service.create_return(_request(entries)))
        with pytest.raises(StaleStockReferenceError):
            return_service.create_return(_request(entries))

    def test_unissued_unit_cannot_be_returned(self, return_service, create_property, stock_selector):
        asset = create_property(quantity=5)
        receipt = stock_selector.get_stocks_by_asset_id(asset.id)
        with pytest.raises(InvalidConditionTransitionError):
            return_service.create_return(_request(receipt))

    def test_returner_without_office(self, return_service, create_property, issue_units):
        asset = create_property(quantity=5)
        _, entries = issue_units(asset, 1)
        with pytest.raises(OfficeNotFoundError):
            return_service.create_return(_request(entries, returned_by=NO_OFFICE_USER_ID))

    def test_duplicate_units_rejected_at_boundary(self, create_property, issue_units):
        asset = create_property(quantity=5)
        _, entries = issue_units(asset, 1)
        with pytest.raises(ValidationError):
            _request(entries * 2)

    def test_consumable_returns_rejected_at_boundary(self):
        with pytest.raises(ValidationError):
            ReturnCreateRequest(
                type=AssetType.CONSUMABLE,
                returned_by=CUSTODIAN_ID,
                items=[{"stock_id": uuid4(), "stock_remarks": "for-reissue"}],
            )


class TestCompleteReturn:
    def test_reissue_units_back_in_pool(
        self, return_service, create_property, issue_units, completed_return,
        asset_service, stock_selector, ledger_selector,
    ):
        asset = create_property(quantity=5)
        _, entries = issue_units(asset, 2)
        document = completed_return(return_service.create_return(_request(entries)))

        assert document.status is ReturnStatus.COMPLETED
        assert document.approved_by_name == "Carla Aprobado"
        assert document.received_by_name == "Ben Superior"
        assert document.completed_at is not None
        assert asset_service.get_asset_by_id(asset.id).quantity == 5

        written = stock_selector.get_stocks_by_reference(document.return_no)
        assert [(e.item_no, e.ins, e.condition) for e in written] == [
            ("1", 1, StockCondition.RETURNED),
            ("2", 1, StockCondition.RETURNED),
        ]
        assert all(e.initial_condition is StockCondition.REISSUED for e in written)
        assert all(e.office_id == SUPPLY_OFFICE_ID for e in written)
        assert ledger_selector.verify_asset_quantity(asset.id).is_consistent

    def test_disposal_units_stay_out(
        self, return_service, create_property, issue_units, completed_return,
        asset_service, stock_selector,
    ):
        asset = create_property(quantity=5)
        _, entries = issue_units(asset, 1)
        document = completed_return(
            return_service.create_return(_request(entries, StockRemarks.FOR_DISPOSAL))
        )
        assert asset_service.get_asset_by_id(asset.id).quantity == 4
        latest = stock_selector.get_latest_stock(asset.id, "1")
        assert latest.condition is StockCondition.FOR_DISPOSAL
        assert latest.outs == 1 and latest.ins == 0
        assert latest.reference == document.return_no

    def test_receiver_without_office(
        self, return_service, create_property, issue_units, stock_selector
    ):
        asset = create_property(quantity=5)
        _, entries = issue_units(asset, 1)
        document = return_service.create_return(_request(entries))
        return_service.update_status_to_approved(
            document.id, ReturnApproveRequest(approved_by=APPROVER_ID)
        )
        with pytest.raises(BadRequestError, match="Received by or office ID is invalid."):
            return_service.update_status_to_completed(
                document.id, ReturnCompleteRequest(received_by=NO_OFFICE_USER_ID)
            )
        assert return_service.get_return_by_id(document.id).status is ReturnStatus.APPROVED
        assert stock_selector.get_stocks_by_reference(document.return_no) == []

    def test_receiver_from_other_office_rejected(
        self, return_service, create_property, issue_units, stock_selector, asset_service
    ):
        asset = create_property(quantity=5)
        slip, entries = issue_units(asset, 1)
        document = return_service.create_return(_request(entries))
        return_service.update_status_to_approved(
            document.id, ReturnApproveRequest(approved_by=APPROVER_ID)
        )
        with pytest.raises(BadRequestError, match=slip.issue_slip_no):
            return_service.update_status_to_completed(
                document.id, ReturnCompleteRequest(received_by=RECEIVER_ID)
            )
        assert return_service.get_return_by_id(document.id).status is ReturnStatus.APPROVED
        assert stock_selector.get_stocks_by_reference(document.return_no) == []
        assert asset_service.get_asset_by_id(asset.id).quantity == 4

    def test_complete_requires_approval(self, return_service, create_property, issue_units):
        asset = create_property(quantity=5)
        _, entries = issue_units(asset, 1)
        document = return_service.create_return(_request(entries))
        with pytest.raises(InvalidTransitionError):
            return_service.update_status_to_completed(
                document.id, ReturnCompleteRequest(received_by=SUPERVISOR_ID)
            )

    def test_reissue_numbering_follows_pool_size(
        self, return_service, create_property, issue_units, completed_return
    ):
        asset = create_property(quantity=2)
        _, entries = issue_units(asset, 2)
        completed_return(return_service.create_return(_request(entries[:1])))
        # Numbers derive from initial_qty - quantity alone
        _, again = issue_units(asset, 1)
        assert [e.item_no for e in again] == ["2"]
