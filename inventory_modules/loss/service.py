"""
Loss Service (``inventory_modules.loss.service``).

Responsibility
--------------
Reports of lost, stolen, damaged or destroyed SEP/PPE units.  Drafting a
report asks the named supervisor for approval by email once the report has
committed; completing it records each unit's final condition in the ledger.

Architecture
------------
Layer: **Modules** -- orchestration over ``inventory_kernel``.  Completion
goes through ``BatchService.apply_batch``, one batch per holding office,
all inside the same unit of work.

Invariants
----------
- The asset quantity does not change on completion: the units left the
  pool when they were issued, so loss entries are quantity-neutral.
- A unit can be on at most one open (pending or approved) report, and
  units on open reports are left out of ``get_reissued_stocks``.
- The approval email is sent after commit; a failed send is logged and
  never undoes the report.

Failure Modes
-------------
- StockNotFoundError / StaleStockReferenceError: item references.
- InvalidConditionTransitionError: the unit is not out with an office.
- OfficeNotFoundError: the unit's office is unknown.
- UserNotFoundError: supervisor unknown.
- BadRequestError: unit already on an open report, asset type mismatch,
  approval by someone other than the named supervisor.
"""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import select

from inventory_kernel.db.unit_of_work import unit_of_work
from inventory_kernel.domain.conditions import StockCondition, validate_condition_transition
from inventory_kernel.domain.dtos import BatchItem, StockEntryRecord
from inventory_kernel.domain.numbering import dated_number
from inventory_kernel.domain.settings import ConfigName, fund_cluster_for
from inventory_kernel.exceptions import BadRequestError
from inventory_kernel.logging_config import LogContext, get_logger
from inventory_kernel.services.directory import resolve_office, resolve_user
from inventory_kernel.services.notification import Notification, notify_safely
from inventory_kernel.services.sequence_service import CounterType
from inventory_modules._lifecycle import LifecycleService
from inventory_modules.loss.models import Loss, LossReportStatus, LossStatus, LossType
from inventory_modules.loss.orm import LossItemModel, LossModel
from inventory_modules.loss.schemas import (
    LossApproveRequest,
    LossCompleteRequest,
    LossCreateRequest,
)
from inventory_modules.loss.workflows import LOSS_WORKFLOW

logger = get_logger("modules.loss.service")

_OPEN_STATUSES = (LossReportStatus.PENDING.value, LossReportStatus.APPROVED.value)


class LossService(LifecycleService[LossModel]):
    """Loss lifecycle: pending -> approved -> completed."""

    document_type = "Loss"
    model = LossModel
    workflow = LOSS_WORKFLOW

    def get_loss_by_id(self, loss_id: UUID) -> Loss:
        return self._get(loss_id).to_dto()

    def open_stock_ids(self) -> set[UUID]:
        """Ledger entries referenced by pending or approved reports."""
        rows = self.session.execute(
            select(LossItemModel.stock_id)
            .join(LossModel, LossModel.id == LossItemModel.loss_id)
            .where(LossModel.status.in_(_OPEN_STATUSES))
        ).scalars()
        return set(rows)

    def get_reissued_stocks(self, office_id: UUID | None = None) -> list[StockEntryRecord]:
        """Units out with an office that are not already on an open report."""
        return self._stocks.get_reissued_stocks(
            office_id=office_id,
            exclude_stock_ids=self.open_stock_ids(),
        )

    # =========================================================================
    # Create
    # =========================================================================

    def create_loss(
        self,
        request: LossCreateRequest,
        actor_id: UUID | None = None,
    ) -> Loss:
        """
        Draft a pending report and email the supervisor after commit.

        Raises:
            See module docstring.
        """
        loss_type = LossType.for_asset_type(request.type)
        entity_name = self._config_value(ConfigName.ENTITY_NAME)
        fund_cluster = self._config_value(fund_cluster_for(loss_type.asset_type))
        supervisor = resolve_user(self.directory, request.supervisor_id, "supervisor")
        already_reported = self.open_stock_ids()

        items: list[LossItemModel] = []
        office_name = ""
        for line_number, item in enumerate(request.items, start=1):
            stock = self._stocks.require_latest(item.stock_id)
            if stock.id in already_reported:
                raise BadRequestError(f"Stock {stock.id} is already on an open loss report.")
            asset = self._assets.get_asset_by_id(stock.asset_id)
            if asset.type is not request.type:
                raise BadRequestError(
                    f"Stock {stock.id} belongs to a {asset.type.value} asset, "
                    f"not {request.type.value}."
                )
            validate_condition_transition(stock.condition, request.loss_status.condition)
            office = resolve_office(self.directory, stock.office_id)
            office_name = office_name or office.name
            items.append(
                LossItemModel(
                    line_number=line_number,
                    stock_id=stock.id,
                    asset_id=stock.asset_id,
                    item_no=stock.item_no,
                    serial_no=stock.serial_no,
                    office_id=office.id,
                    remarks=item.remarks,
                )
            )

        with unit_of_work(self.session, "create_loss") as uow:
            count = self._next_count(uow, CounterType(loss_type.value))
            now = self.clock.now()
            document = LossModel(
                type=loss_type.value,
                loss_no=dated_number(now, count),
                entity_name=entity_name,
                fund_cluster=fund_cluster,
                loss_status=request.loss_status.value,
                office_name=office_name,
                description=request.description,
                circumstances=request.circumstances,
                police_notified=request.police_notified,
                police_station=request.police_station,
                police_report_date=request.police_report_date,
                attachment=request.attachment,
                government_id=request.government_id,
                government_id_no=request.government_id_no,
                government_id_date=request.government_id_date,
                supervisor_id=supervisor.id,
                supervisor_name=supervisor.name,
                status=LossReportStatus.PENDING.value,
                created_at=now,
                created_by_id=actor_id,
            )
            for item_model in items:
                item_model.created_at = now
            document.items = items
            self.session.add(document)
            self.session.flush()
            result = document.to_dto()

            notification = Notification(
                recipient=supervisor.email,
                subject=f"Request for {loss_type.value} Approval",
                template="loss-approval",
                context={
                    "loss_id": str(result.id),
                    "loss_no": result.loss_no,
                    "loss_status": result.loss_status.value,
                    "supervisor_name": supervisor.name,
                },
            )
            uow.after_commit(lambda: notify_safely(self.notifier, notification))

        logger.info(
            "loss_created",
            extra={
                "loss_id": str(result.id),
                "loss_no": result.loss_no,
                "loss_status": result.loss_status.value,
                "item_count": len(result.items),
            },
        )
        return result

    # =========================================================================
    # Approve
    # =========================================================================

    def update_status_to_approved(
        self,
        loss_id: UUID,
        request: LossApproveRequest,
    ) -> Loss:
        with unit_of_work(self.session, "approve_loss") as uow:
            document = self._load(uow, loss_id)
            if request.supervisor_id != document.supervisor_id:
                raise BadRequestError("Only the assigned supervisor can approve this report.")
            supervisor = resolve_user(self.directory, request.supervisor_id, "supervisor")
            self._transition(document, LossReportStatus.APPROVED, actor_id=supervisor.id)
            document.supervisor_date = self.clock.now()
            self.session.flush()
            result = document.to_dto()

        logger.info("loss_approved", extra={"loss_id": str(loss_id)})
        return result

    # =========================================================================
    # Complete
    # =========================================================================

    def update_status_to_completed(
        self,
        loss_id: UUID,
        request: LossCompleteRequest | None = None,
    ) -> Loss:
        """
        Record every reported unit's final condition.

        Postconditions:
            - One entry per unit with ``condition`` = the loss status,
              ``outs=1``, reference = loss number, office = the unit's office.
            - Asset quantities unchanged; status ``completed``.
        """
        remarks = request.remarks if request is not None else ""
        with unit_of_work(self.session, "complete_loss") as uow:
            document = self._load(uow, loss_id)
            with LogContext.bind(document_no=document.loss_no):
                self._transition(document, LossReportStatus.COMPLETED)
                condition = LossStatus(document.loss_status).condition

                by_office: dict[UUID | None, list[BatchItem]] = {}
                for item in document.items:
                    stock = self._stocks.require_latest(item.stock_id)
                    by_office.setdefault(item.office_id, []).append(
                        BatchItem(
                            asset_id=item.asset_id,
                            qty=1,
                            condition=condition,
                            reference=document.loss_no,
                            serial_no=item.serial_no,
                            item_no=item.item_no,
                            initial_condition=StockCondition(stock.condition),
                            remarks=remarks or item.remarks,
                        )
                    )
                written = self._apply_by_office(uow, by_office)

                document.completed_at = self.clock.now()
                self.session.flush()
                result = document.to_dto()

                logger.info(
                    "loss_completed",
                    extra={
                        "loss_id": str(result.id),
                        "condition": condition.value,
                        "entry_count": written,
                    },
                )
        return result

    def _apply_by_office(
        self,
        uow,
        by_office: dict[UUID | None, Sequence[BatchItem]],
    ) -> int:
        written = 0
        for office_id, batch in by_office.items():
            written += self._batch.apply_batch(uow, office_id, batch).entry_count
        return written
