"""
Maintenance Service (``inventory_modules.maintenance.service``).

Responsibility
--------------
Maintenance requests for a single unit: creation (code ``MNT-yyyy-mm-dd-NN``),
scheduling, rescheduling with a reason, completion and cancellation.

Nothing here writes to the stock ledger; the unit keeps its condition while
it is being serviced.

Failure Modes
-------------
- StockNotFoundError / AssetNotFoundError: the unit or its asset.
- UserNotFoundError / OfficeNotFoundError: assignee or their office,
  completing user.
- InvalidTransitionError: status change out of order.
"""

from __future__ import annotations

from uuid import UUID

from inventory_kernel.db.unit_of_work import unit_of_work
from inventory_kernel.domain.numbering import dated_number
from inventory_kernel.logging_config import get_logger
from inventory_kernel.services.directory import resolve_office, resolve_user
from inventory_kernel.services.sequence_service import CounterType
from inventory_modules._lifecycle import LifecycleService
from inventory_modules.maintenance.models import Maintenance, MaintenanceStatus
from inventory_modules.maintenance.orm import MaintenanceModel
from inventory_modules.maintenance.schemas import (
    MaintenanceCancelRequest,
    MaintenanceCompleteRequest,
    MaintenanceCreateRequest,
    MaintenanceRescheduleRequest,
    MaintenanceScheduleRequest,
)
from inventory_modules.maintenance.workflows import MAINTENANCE_WORKFLOW

logger = get_logger("modules.maintenance.service")

CODE_PREFIX = "MNT"


class MaintenanceService(LifecycleService[MaintenanceModel]):
    """Maintenance lifecycle; see ``MAINTENANCE_WORKFLOW``."""

    document_type = "Maintenance"
    model = MaintenanceModel
    workflow = MAINTENANCE_WORKFLOW

    def get_maintenance_by_id(self, maintenance_id: UUID) -> Maintenance:
        return self._get(maintenance_id).to_dto()

    def create_maintenance(
        self,
        request: MaintenanceCreateRequest,
        actor_id: UUID | None = None,
    ) -> Maintenance:
        stock = self._stocks.get_stock_by_id(request.stock_id)
        asset = self._assets.get_asset_by_id(stock.asset_id)
        assignee = resolve_user(self.directory, request.assignee_id, "assignee")
        office = resolve_office(self.directory, assignee.office_id)

        with unit_of_work(self.session, "create_maintenance") as uow:
            count = self._next_count(uow, CounterType.MAINTENANCE)
            now = self.clock.now()
            document = MaintenanceModel(
                code=dated_number(now, count, prefix=CODE_PREFIX),
                stock_id=stock.id,
                asset_id=asset.id,
                name=asset.name,
                assignee_id=assignee.id,
                office_name=office.name,
                issue=request.issue,
                type=request.type,
                attachment=request.attachment,
                remarks=request.remarks,
                status=MaintenanceStatus.PENDING.value,
                created_at=now,
                created_by_id=actor_id,
            )
            self.session.add(document)
            self.session.flush()
            result = document.to_dto()

        logger.info(
            "maintenance_created",
            extra={
                "maintenance_id": str(result.id),
                "code": result.code,
                "stock_id": str(result.stock_id),
                "assignee_id": str(result.assignee_id),
            },
        )
        return result

    def update_status_to_scheduled(
        self,
        maintenance_id: UUID,
        request: MaintenanceScheduleRequest,
    ) -> Maintenance:
        with unit_of_work(self.session, "schedule_maintenance") as uow:
            document = self._load(uow, maintenance_id)
            self._transition(document, MaintenanceStatus.SCHEDULED)
            document.scheduled_at = request.scheduled_at
            self.session.flush()
            return document.to_dto()

    def update_status_to_rescheduled(
        self,
        maintenance_id: UUID,
        request: MaintenanceRescheduleRequest,
    ) -> Maintenance:
        """Move the schedule; allowed repeatedly once scheduled."""
        with unit_of_work(self.session, "reschedule_maintenance") as uow:
            document = self._load(uow, maintenance_id)
            self._transition(document, MaintenanceStatus.RESCHEDULED)
            document.scheduled_at = request.scheduled_at
            document.reschedule_reason = request.reschedule_reason
            self.session.flush()
            return document.to_dto()

    def update_status_to_completed(
        self,
        maintenance_id: UUID,
        request: MaintenanceCompleteRequest,
    ) -> Maintenance:
        with unit_of_work(self.session, "complete_maintenance") as uow:
            document = self._load(uow, maintenance_id)
            completer = resolve_user(self.directory, request.completed_by, "personnel")
            self._transition(document, MaintenanceStatus.COMPLETED, actor_id=completer.id)
            document.completed_by = completer.id
            document.completed_at = self.clock.now()
            if request.remarks is not None:
                document.remarks = request.remarks
            self.session.flush()
            result = document.to_dto()

        logger.info(
            "maintenance_completed",
            extra={"maintenance_id": str(maintenance_id), "completed_by": str(completer.id)},
        )
        return result

    def update_status_to_cancelled(
        self,
        maintenance_id: UUID,
        request: MaintenanceCancelRequest | None = None,
    ) -> Maintenance:
        with unit_of_work(self.session, "cancel_maintenance") as uow:
            document = self._load(uow, maintenance_id)
            self._transition(document, MaintenanceStatus.CANCELLED)
            if request is not None and request.remarks:
                document.remarks = request.remarks
            self.session.flush()
            return document.to_dto()
