"""
Return Service (``inventory_modules.returns.service``).

Responsibility
--------------
Records the return of issued SEP/PPE units.  Completing a return writes
one ledger entry per unit through the batch protocol: ``returned`` units
go back into the on-hand pool (``ins=1``), ``for-disposal`` units leave
the quantity alone.

Architecture
------------
Layer: **Modules** -- orchestration over ``inventory_kernel``.  Multi-item
document, so completion goes through ``BatchService.apply_batch`` with the
unit of work this service already holds.

Invariants
----------
- A unit is referenced through its latest ledger entry; a superseded entry
  is rejected both when the return is drafted and when it completes.
- The requested condition change must be in the condition transition table.
- Number allocation, ledger writes and the status change share one unit of
  work.

Failure Modes
-------------
- UserNotFoundError / OfficeNotFoundError: returning user or their office.
- StockNotFoundError / StaleStockReferenceError: item references.
- InvalidConditionTransitionError: a unit that is not out with an office.
- BadRequestError: asset type differs from the return type.  At completion,
  also a receiver without an office or from an office that did not issue
  the units.
- InvalidTransitionError: status change out of order.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select

from inventory_kernel.db.unit_of_work import unit_of_work
from inventory_kernel.domain.conditions import (
    AssetType,
    StockCondition,
    validate_condition_transition,
)
from inventory_kernel.domain.dtos import BatchItem
from inventory_kernel.domain.numbering import dated_number
from inventory_kernel.domain.settings import ConfigName, fund_cluster_for
from inventory_kernel.exceptions import BadRequestError
from inventory_kernel.logging_config import LogContext, get_logger
from inventory_kernel.services.directory import resolve_office, resolve_user
from inventory_kernel.services.sequence_service import CounterType
from inventory_modules._lifecycle import LifecycleService
from inventory_modules.issue_slip.orm import IssueSlipModel
from inventory_modules.returns.models import Return, ReturnStatus, StockRemarks
from inventory_modules.returns.orm import ReturnItemModel, ReturnModel
from inventory_modules.returns.schemas import (
    ReturnApproveRequest,
    ReturnCompleteRequest,
    ReturnCreateRequest,
)
from inventory_modules.returns.workflows import RETURN_WORKFLOW

logger = get_logger("modules.returns.service")

_RETURN_COUNTERS: dict[AssetType, CounterType] = {
    AssetType.SEP: CounterType.RETURN_SEP,
    AssetType.PPE: CounterType.RETURN_PPE,
}


class ReturnService(LifecycleService[ReturnModel]):
    """Return lifecycle: pending -> approved -> completed."""

    document_type = "Return"
    model = ReturnModel
    workflow = RETURN_WORKFLOW

    def get_return_by_id(self, return_id: UUID) -> Return:
        return self._get(return_id).to_dto()

    def create_return(
        self,
        request: ReturnCreateRequest,
        actor_id: UUID | None = None,
    ) -> Return:
        """
        Draft a pending return.

        Every item must be the latest entry of a unit of an asset of the
        return's type, in a condition that may become the requested one.
        """
        entity_name = self._config_value(ConfigName.ENTITY_NAME)
        fund_cluster = self._config_value(fund_cluster_for(request.type))
        returner = resolve_user(self.directory, request.returned_by, "returner")
        office = resolve_office(self.directory, returner.office_id)

        items: list[ReturnItemModel] = []
        for line_number, item in enumerate(request.items, start=1):
            stock = self._stocks.require_latest(item.stock_id)
            asset = self._assets.get_asset_by_id(stock.asset_id)
            if asset.type is not request.type:
                raise BadRequestError(
                    f"Stock {stock.id} belongs to a {asset.type.value} asset, "
                    f"not {request.type.value}."
                )
            validate_condition_transition(stock.condition, item.stock_remarks.condition)
            items.append(
                ReturnItemModel(
                    line_number=line_number,
                    stock_id=stock.id,
                    stock_remarks=item.stock_remarks.value,
                    asset_id=stock.asset_id,
                    item_no=stock.item_no,
                    serial_no=stock.serial_no,
                )
            )

        with unit_of_work(self.session, "create_return") as uow:
            count = self._next_count(uow, _RETURN_COUNTERS[request.type])
            now = self.clock.now()
            document = ReturnModel(
                type=request.type.value,
                return_no=dated_number(now, count),
                entity_name=entity_name,
                fund_cluster=fund_cluster,
                returned_by=returner.id,
                returned_by_name=returner.name,
                office_id=office.id,
                office_name=office.name,
                status=ReturnStatus.PENDING.value,
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
            "return_created",
            extra={
                "return_id": str(result.id),
                "return_no": result.return_no,
                "type": result.type.value,
                "item_count": len(result.items),
            },
        )
        return result

    def update_status_to_approved(
        self,
        return_id: UUID,
        request: ReturnApproveRequest,
    ) -> Return:
        with unit_of_work(self.session, "approve_return") as uow:
            document = self._load(uow, return_id)
            approver = resolve_user(self.directory, request.approved_by, "approver")
            self._transition(document, ReturnStatus.APPROVED, actor_id=approver.id)
            document.approved_by = approver.id
            document.approved_by_name = approver.name
            document.approved_at = self.clock.now()
            self.session.flush()
            result = document.to_dto()

        logger.info(
            "return_approved",
            extra={"return_id": str(return_id), "approved_by": str(approver.id)},
        )
        return result

    def _check_issuing_office(self, reference: str, office_id: UUID) -> None:
        """
        Reject a receiving office other than the one that issued the unit.

        Units that reached their holder without an issue slip (transfers)
        carry no issuing office and are not checked.
        """
        issued_by = self.session.execute(
            select(IssueSlipModel.issued_by).where(IssueSlipModel.issue_slip_no == reference)
        ).scalar_one_or_none()
        if issued_by is None:
            return
        issuer = resolve_user(self.directory, issued_by, "issuer")
        if issuer.office_id != office_id:
            raise BadRequestError(
                f"Only the office that issued {reference} can complete this return."
            )

    def update_status_to_completed(
        self,
        return_id: UUID,
        request: ReturnCompleteRequest,
    ) -> Return:
        """
        Receive the units back and record them in the ledger.

        Postconditions:
            - One entry per item, qty 1, reference = return number, office =
              the receiving user's office, which must be the issuing office.
            - ``for-reissue`` units raise the asset quantity by one each.
            - Status ``completed`` with ``completed_at``; all in one commit.

        Raises:
            BadRequestError: "Received by or office ID is invalid." when the
                receiving user has no office, or when that office did not
                issue the slip a unit was issued on.
        """
        with unit_of_work(self.session, "complete_return") as uow:
            document = self._load(uow, return_id)
            with LogContext.bind(document_no=document.return_no):
                self._transition(document, ReturnStatus.COMPLETED)

                receiver = resolve_user(self.directory, request.received_by, "receiver")
                if receiver.office_id is None:
                    raise BadRequestError("Received by or office ID is invalid.")
                office = resolve_office(self.directory, receiver.office_id)

                batch = []
                for item in document.items:
                    stock = self._stocks.require_latest(item.stock_id)
                    self._check_issuing_office(stock.reference, office.id)
                    batch.append(
                        BatchItem(
                            asset_id=item.asset_id,
                            qty=1,
                            condition=StockRemarks(item.stock_remarks).condition,
                            reference=document.return_no,
                            serial_no=item.serial_no,
                            item_no=item.item_no,
                            initial_condition=StockCondition(stock.condition),
                        )
                    )
                self._batch.apply_batch(uow, office.id, batch)

                document.received_by = receiver.id
                document.received_by_name = receiver.name
                document.completed_at = self.clock.now()
                document.updated_by_id = receiver.id
                self.session.flush()
                result = document.to_dto()

                logger.info(
                    "return_completed",
                    extra={
                        "return_id": str(result.id),
                        "office_id": str(office.id),
                        "item_count": len(result.items),
                    },
                )
        return result
