"""
Waste Service (``inventory_modules.waste.service``).

Responsibility
--------------
Waste materials reports over units whose latest ledger entry is
``for-disposal``.  The report carries the disposal method per unit and is
completed once a disposal approver signs it.

Invariants
----------
- Every unit on a report is, at creation and at completion, the latest
  entry of its unit and in the ``for-disposal`` condition.
- No ledger entries are written and no asset quantity changes.
- The fund cluster is the PPE one as soon as one unit belongs to a PPE
  asset, otherwise the SEP one.
"""

from __future__ import annotations

from uuid import UUID

from inventory_kernel.db.unit_of_work import unit_of_work
from inventory_kernel.domain.conditions import AssetType, StockCondition
from inventory_kernel.domain.dtos import StockEntryRecord
from inventory_kernel.domain.numbering import dated_number
from inventory_kernel.domain.settings import ConfigName, fund_cluster_for
from inventory_kernel.exceptions import BadRequestError
from inventory_kernel.logging_config import LogContext, get_logger
from inventory_kernel.services.directory import resolve_user
from inventory_kernel.services.sequence_service import CounterType
from inventory_modules._lifecycle import LifecycleService
from inventory_modules.waste.models import Waste, WasteStatus
from inventory_modules.waste.orm import WasteItemModel, WasteModel
from inventory_modules.waste.schemas import WasteCompleteRequest, WasteCreateRequest
from inventory_modules.waste.workflows import WASTE_WORKFLOW

logger = get_logger("modules.waste.service")


class WasteService(LifecycleService[WasteModel]):
    """Waste lifecycle: pending -> completed."""

    document_type = "Waste"
    model = WasteModel
    workflow = WASTE_WORKFLOW

    def get_waste_by_id(self, waste_id: UUID) -> Waste:
        return self._get(waste_id).to_dto()

    def _disposable(self, stock_id: UUID) -> StockEntryRecord:
        stock = self._stocks.require_latest(stock_id)
        if stock.condition is not StockCondition.FOR_DISPOSAL:
            raise BadRequestError(
                f"Stock {stock.id} is {stock.condition.value}, not for-disposal."
            )
        return stock

    def create_waste(
        self,
        request: WasteCreateRequest,
        actor_id: UUID | None = None,
    ) -> Waste:
        """
        Draft a pending report.

        Raises:
            StockNotFoundError, StaleStockReferenceError, UserNotFoundError.
            BadRequestError: a unit is not for-disposal.
        """
        entity_name = self._config_value(ConfigName.ENTITY_NAME)
        certifier = (
            resolve_user(self.directory, request.certified_by, "certifier")
            if request.certified_by is not None
            else None
        )

        asset_type = AssetType.SEP
        items: list[WasteItemModel] = []
        for line_number, item in enumerate(request.items, start=1):
            stock = self._disposable(item.stock_id)
            if self._assets.get_asset_by_id(stock.asset_id).type is AssetType.PPE:
                asset_type = AssetType.PPE
            items.append(
                WasteItemModel(
                    line_number=line_number,
                    stock_id=stock.id,
                    asset_id=stock.asset_id,
                    item_no=stock.item_no,
                    serial_no=stock.serial_no,
                    type=item.type.value,
                    remarks=item.remarks,
                    transferred_to=item.transferred_to,
                )
            )
        fund_cluster = self._config_value(fund_cluster_for(asset_type))

        with unit_of_work(self.session, "create_waste") as uow:
            count = self._next_count(uow, CounterType.WASTE)
            now = self.clock.now()
            document = WasteModel(
                waste_no=dated_number(now, count),
                entity_name=entity_name,
                fund_cluster=fund_cluster,
                place_of_storage=request.place_of_storage,
                certified_by=certifier.id if certifier else None,
                certified_by_name=certifier.name if certifier else "",
                status=WasteStatus.PENDING.value,
                created_at=now,
                created_by_id=actor_id,
            )
            for item_model in items:
                item_model.created_at = now
            document.items = items
            self.session.add(document)
            self.session.flush()
            result = document.to_dto()

        logger.info(
            "waste_created",
            extra={
                "waste_id": str(result.id),
                "waste_no": result.waste_no,
                "fund_cluster": result.fund_cluster,
                "item_count": len(result.items),
            },
        )
        return result

    def update_status_to_completed(
        self,
        waste_id: UUID,
        request: WasteCompleteRequest,
    ) -> Waste:
        """Record the disposal approval. Status only; the ledger is untouched."""
        with unit_of_work(self.session, "complete_waste") as uow:
            document = self._load(uow, waste_id)
            with LogContext.bind(document_no=document.waste_no):
                approver = resolve_user(
                    self.directory, request.disposal_approved_by, "disposal approver",
                )
                self._transition(document, WasteStatus.COMPLETED, actor_id=approver.id)
                for item in document.items:
                    self._disposable(item.stock_id)

                document.disposal_approved_by = approver.id
                document.disposal_approved_by_name = approver.name
                document.witnessed_by_name = request.witnessed_by_name
                document.completed_at = self.clock.now()
                self.session.flush()
                result = document.to_dto()

                logger.info(
                    "waste_completed",
                    extra={"waste_id": str(result.id), "item_count": len(result.items)},
                )
        return result
