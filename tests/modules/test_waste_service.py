"""
Waste materials report tests.

Only units parked as for-disposal by a return can be written off, and
completing the report changes its status without touching the ledger.
"""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from inventory_config.loader import parse_configuration
from inventory_kernel.domain.conditions import AssetType, StockCondition
from inventory_kernel.exceptions import (
    BadRequestError,
    InvalidTransitionError,
    StaleStockReferenceError,
    UserNotFoundError,
)
from inventory_modules.returns.models import StockRemarks
from inventory_modules.returns.schemas import (
    ReturnApproveRequest,
    ReturnCompleteRequest,
    ReturnCreateRequest,
)
from inventory_modules.waste.models import DisposalType, WasteStatus
from inventory_modules.waste.schemas import WasteCompleteRequest, WasteCreateRequest
from inventory_modules.waste.service import WasteService
from tests.conftest import APPROVER_ID, CUSTODIAN_ID, SUPERVISOR_ID


@pytest.fixture
def disposable_units(return_service, issue_units, stock_selector):
    """Issue units, return them for disposal and hand back their latest entries."""

    def _park(asset, quantity, asset_type=AssetType.SEP):
        _, entries = issue_units(asset, quantity)
        document = return_service.create_return(
            ReturnCreateRequest(
                type=asset_type,
                returned_by=CUSTODIAN_ID,
                items=[
                    {"stock_id": e.id, "stock_remarks": StockRemarks.FOR_DISPOSAL}
                    for e in entries
                ],
            )
        )
        return_service.update_status_to_approved(
            document.id, ReturnApproveRequest(approved_by=APPROVER_ID)
        )
        return_service.update_status_to_completed(
            document.id, ReturnCompleteRequest(received_by=SUPERVISOR_ID)
        )
        return [stock_selector.get_latest_stock(asset.id, e.item_no) for e in entries]

    return _park


def _request(entries, disposal=DisposalType.DESTROYED, **kwargs):
    return WasteCreateRequest(
        place_of_storage="Warehouse B",
        items=[{"stock_id": e.id, "type": disposal} for e in entries],
        **kwargs,
    )


class TestCreateWaste:
    def test_pending_report_drafted(self, waste_service, create_property, disposable_units):
        asset = create_property(quantity=5)
        units = disposable_units(asset, 2)
        waste = waste_service.create_waste(_request(units, certified_by=APPROVER_ID))

        assert waste.status is WasteStatus.PENDING
        assert waste.waste_no == "2024-01-15-01"
        assert waste.place_of_storage == "Warehouse B"
        assert waste.certified_by_name == "Carla Aprobado"
        assert [i.item_no for i in waste.items] == ["1", "2"]
        assert all(i.type is DisposalType.DESTROYED for i in waste.items)

    def test_fund_cluster_follows_ppe(
        self, session, users, notifier, deterministic_clock, create_property, disposable_units
    ):
        config = parse_configuration({
            "config_id": "split-clusters",
            "version": 1,
            "labels": {
                "entity_name": "Division Office",
                "fund_cluster": {"consumable": "01", "sep": "02", "ppe": "03"},
            },
        })
        service = WasteService(session, config=config, notifier=notifier, clock=deterministic_clock)
        sep_units = disposable_units(create_property(quantity=2), 1)
        ppe_units = disposable_units(
            create_property(asset_type=AssetType.PPE, quantity=2), 1, AssetType.PPE
        )

        assert service.create_waste(_request(sep_units)).fund_cluster == "02"
        assert service.create_waste(_request(sep_units + ppe_units)).fund_cluster == "03"

    def test_issued_unit_rejected(self, waste_service, create_property, issue_units):
        asset = create_property(quantity=5)
        _, entries = issue_units(asset, 1)
        with pytest.raises(BadRequestError, match="not for-disposal"):
            waste_service.create_waste(_request(entries))

    def test_superseded_entry_rejected(
        self, waste_service, create_property, disposable_units, stock_selector
    ):
        asset = create_property(quantity=5)
        disposable_units(asset, 1)
        issued = [
            e for e in stock_selector.get_stocks_by_asset_id(asset.id)
            if e.condition is StockCondition.REISSUED
        ]
        with pytest.raises(StaleStockReferenceError):
            waste_service.create_waste(_request(issued))

    def test_unknown_certifier(self, waste_service, create_property, disposable_units):
        units = disposable_units(create_property(quantity=2), 1)
        with pytest.raises(UserNotFoundError):
            waste_service.create_waste(_request(units, certified_by=uuid4()))

    def test_transfer_without_cost_needs_recipient(self):
        with pytest.raises(ValidationError):
            WasteCreateRequest(
                items=[{"stock_id": uuid4(), "type": DisposalType.TRANSFERRED_WITHOUT_COST}],
            )


class TestCompleteWaste:
    def test_completion_leaves_ledger_alone(
        self, waste_service, create_property, disposable_units, asset_service, stock_selector
    ):
        asset = create_property(quantity=5)
        units = disposable_units(asset, 2)
        entries_before = len(stock_selector.get_stocks_by_asset_id(asset.id))
        waste = waste_service.create_waste(_request(units, DisposalType.SOLD_AT_PUBLIC_AUCTION))

        done = waste_service.update_status_to_completed(
            waste.id,
            WasteCompleteRequest(disposal_approved_by=APPROVER_ID, witnessed_by_name="F. Witness"),
        )
        assert done.status is WasteStatus.COMPLETED
        assert done.disposal_approved_by_name == "Carla Aprobado"
        assert done.witnessed_by_name == "F. Witness"
        assert done.completed_at is not None
        assert len(stock_selector.get_stocks_by_asset_id(asset.id)) == entries_before
        assert asset_service.get_asset_by_id(asset.id).quantity == 3

    def test_cannot_complete_twice(self, waste_service, create_property, disposable_units):
        units = disposable_units(create_property(quantity=2), 1)
        waste = waste_service.create_waste(_request(units))
        request = WasteCompleteRequest(disposal_approved_by=APPROVER_ID)
        waste_service.update_status_to_completed(waste.id, request)
        with pytest.raises(InvalidTransitionError):
            waste_service.update_status_to_completed(waste.id, request)
