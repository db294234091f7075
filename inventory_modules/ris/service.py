"""
RIS Service (``inventory_modules.ris.service``).

Responsibility
--------------
Requisition and issue of consumables: drafting a request for the
requester's office, evaluating and reviewing issue quantities, approval,
cancellation, and issuing the approved quantities through the batch
protocol.

Architecture
------------
Layer: **Modules** -- orchestration over ``inventory_kernel``.  Issuing
composes the status change and ``BatchService.apply_batch`` in one unit of
work; the batch is never given a transaction of its own.

Invariants
----------
- ``request_qty`` is fixed at creation; later edits only touch
  ``issue_qty`` and remarks, and only for assets already on the RIS.
- An evaluated ``issue_qty`` never exceeds the asset's quantity at the time
  of review; the ledger checks availability again when issuing.
- Lines with ``issue_qty == 0`` are skipped when issuing; a RIS with
  nothing to issue is rejected.
- Issued entries carry ``condition=reissued``, ``outs=issue_qty`` and
  reference = RIS number.

Failure Modes
-------------
- AssetNotFoundError, UserNotFoundError, OfficeNotFoundError.
- BadRequestError: non-consumable asset, asset not on the RIS, nothing to
  issue, edit of an issued/cancelled RIS.
- InsufficientStockError: evaluated or issued quantity above availability.
- InvalidTransitionError: status change out of order.
"""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from inventory_kernel.db.unit_of_work import unit_of_work
from inventory_kernel.domain.conditions import AssetType, StockCondition
from inventory_kernel.domain.dtos import BatchItem
from inventory_kernel.domain.numbering import dated_number
from inventory_kernel.domain.settings import ConfigName
from inventory_kernel.exceptions import BadRequestError, InsufficientStockError
from inventory_kernel.logging_config import LogContext, get_logger
from inventory_kernel.services.directory import resolve_office, resolve_user
from inventory_kernel.services.sequence_service import CounterType
from inventory_modules._lifecycle import LifecycleService
from inventory_modules.ris.models import Ris, RisSerialNo, RisStatus
from inventory_modules.ris.orm import RisItemModel, RisModel, RisSerialNoModel
from inventory_modules.ris.schemas import (
    RisApproveRequest,
    RisCancelRequest,
    RisCreateRequest,
    RisIssueRequest,
    RisItemUpdate,
    RisReviewRequest,
    RisUpdateRequest,
)
from inventory_modules.ris.workflows import RIS_WORKFLOW

logger = get_logger("modules.ris.service")


class RisService(LifecycleService[RisModel]):
    """RIS lifecycle; see ``RIS_WORKFLOW``."""

    document_type = "RIS"
    model = RisModel
    workflow = RIS_WORKFLOW

    def get_ris_by_id(self, ris_id: UUID) -> Ris:
        return self._get(ris_id).to_dto()

    def _apply_item_updates(
        self,
        document: RisModel,
        updates: Sequence[RisItemUpdate],
        check_available: bool = False,
    ) -> None:
        for update in updates:
            item = document.item_for(update.asset_id)
            if item is None:
                raise BadRequestError(
                    f"Asset with ID {update.asset_id} not found in the current RIS."
                )
            if update.issue_qty is not None:
                if check_available:
                    asset = self._assets.get_asset_by_id(item.asset_id)
                    if update.issue_qty > asset.quantity:
                        raise InsufficientStockError(
                            str(asset.id), asset.name, asset.quantity, update.issue_qty,
                        )
                item.issue_qty = update.issue_qty
            if update.remarks is not None:
                item.remarks = update.remarks

    # =========================================================================
    # Create / update
    # =========================================================================

    def create_ris(self, request: RisCreateRequest, actor_id: UUID | None = None) -> Ris:
        """
        Draft a RIS for the requester's office, status ``for-evaluation``.

        Every line starts with ``issue_qty=0``.
        """
        entity_name = self._config_value(ConfigName.ENTITY_NAME)
        fund_cluster = self._config_value(ConfigName.FUND_CLUSTER_CONSUMABLE)
        rcc = self._config_value(ConfigName.RESPONSIBILITY_CENTER_CODE)
        requester = resolve_user(self.directory, request.requested_by, "requester")
        office = resolve_office(self.directory, requester.office_id)

        items: list[RisItemModel] = []
        for line_number, item in enumerate(request.items, start=1):
            asset = self._assets.get_asset_by_id(item.asset_id)
            if asset.type is not AssetType.CONSUMABLE:
                raise BadRequestError(f"Asset {asset.id} is not a consumable.")
            items.append(
                RisItemModel(
                    line_number=line_number,
                    asset_id=asset.id,
                    asset_name=asset.name,
                    request_qty=item.request_qty,
                    issue_qty=0,
                    remarks=item.remarks,
                )
            )

        with unit_of_work(self.session, "create_ris") as uow:
            count = self._next_count(uow, CounterType.REQUISITION_AND_ISSUE_SLIPS)
            now = self.clock.now()
            document = RisModel(
                ris_no=dated_number(now, count),
                entity_name=entity_name,
                fund_cluster=fund_cluster,
                rcc=rcc,
                division_id=requester.division_id or office.division_id,
                office_id=office.id,
                purpose=request.purpose,
                requested_by=requester.id,
                requested_by_name=requester.name,
                status=RisStatus.FOR_EVALUATION.value,
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
            "ris_created",
            extra={
                "ris_id": str(result.id),
                "ris_no": result.ris_no,
                "office_id": str(result.office_id),
                "item_count": len(result.items),
            },
        )
        return result

    def update_ris_by_id(
        self,
        ris_id: UUID,
        request: RisUpdateRequest,
        actor_id: UUID | None = None,
    ) -> Ris:
        """
        Edit purpose, remarks and existing lines of an open RIS.

        Raises:
            BadRequestError: RIS already issued or cancelled, or a line names
                an asset that is not on the RIS.
        """
        with unit_of_work(self.session, "update_ris_by_id") as uow:
            document = self._load(uow, ris_id)
            self._require_open(document)
            if request.items is not None:
                self._apply_item_updates(document, request.items)
            if request.purpose is not None:
                document.purpose = request.purpose
            if request.remarks is not None:
                document.remarks = request.remarks
            document.updated_at = self.clock.now()
            document.updated_by_id = actor_id
            self.session.flush()
            result = document.to_dto()

        logger.info("ris_updated", extra={"ris_id": str(ris_id)})
        return result

    # =========================================================================
    # Evaluation and approval
    # =========================================================================

    def update_status_to_evaluating(self, ris_id: UUID, actor_id: UUID | None = None) -> Ris:
        with unit_of_work(self.session, "evaluate_ris") as uow:
            document = self._load(uow, ris_id)
            self._transition(document, RisStatus.EVALUATING, actor_id=actor_id)
            self.session.flush()
            return document.to_dto()

    def update_status_to_for_review(
        self,
        ris_id: UUID,
        request: RisReviewRequest,
        actor_id: UUID | None = None,
    ) -> Ris:
        """
        Record the evaluated issue quantities and submit for review.

        Raises:
            InsufficientStockError: an issue quantity above the asset's
                current quantity.
        """
        with unit_of_work(self.session, "review_ris") as uow:
            document = self._load(uow, ris_id)
            self._transition(document, RisStatus.FOR_REVIEW, actor_id=actor_id)
            self._apply_item_updates(document, request.items, check_available=True)
            self.session.flush()
            result = document.to_dto()

        logger.info(
            "ris_evaluated",
            extra={"ris_id": str(ris_id), "total_issue_qty": result.total_issue_qty},
        )
        return result

    def update_status_to_pending(self, ris_id: UUID, request: RisApproveRequest) -> Ris:
        with unit_of_work(self.session, "approve_ris") as uow:
            document = self._load(uow, ris_id)
            approver = resolve_user(self.directory, request.approved_by, "approver")
            self._transition(document, RisStatus.PENDING, actor_id=approver.id)
            document.approved_by = approver.id
            document.approved_at = request.approved_at or self.clock.now()
            self.session.flush()
            result = document.to_dto()

        logger.info(
            "ris_approved",
            extra={"ris_id": str(ris_id), "approved_by": str(approver.id)},
        )
        return result

    def update_status_to_cancelled(
        self,
        ris_id: UUID,
        request: RisCancelRequest | None = None,
        actor_id: UUID | None = None,
    ) -> Ris:
        with unit_of_work(self.session, "cancel_ris") as uow:
            document = self._load(uow, ris_id)
            self._transition(document, RisStatus.CANCELLED, actor_id=actor_id)
            if request is not None and request.remarks:
                document.remarks = request.remarks
            self.session.flush()
            result = document.to_dto()

        logger.info("ris_cancelled", extra={"ris_id": str(ris_id)})
        return result

    # =========================================================================
    # Issue
    # =========================================================================

    def update_status_to_issued(self, ris_id: UUID, request: RisIssueRequest) -> Ris:
        """
        Issue the approved quantities to the RIS office.

        Postconditions:
            - One ``reissued`` entry per non-zero line, ``outs=issue_qty``,
              reference = RIS number; asset quantities down accordingly.
            - Status ``issued`` with issuer, receiver and ``completed_at``.
            - All of it in one commit.
        """
        with unit_of_work(self.session, "issue_ris") as uow:
            document = self._load(uow, ris_id)
            with LogContext.bind(document_no=document.ris_no):
                self._transition(document, RisStatus.ISSUED)
                issuer = resolve_user(self.directory, request.issued_by, "issuer")
                receiver = resolve_user(self.directory, request.received_by, "receiver")

                batch = [
                    BatchItem(
                        asset_id=item.asset_id,
                        qty=item.issue_qty,
                        condition=StockCondition.REISSUED,
                        reference=document.ris_no,
                        remarks=item.remarks,
                    )
                    for item in document.items
                    if item.issue_qty > 0
                ]
                if not batch:
                    raise BadRequestError("RIS has no items with an issue quantity.")
                result_batch = self._batch.apply_batch(uow, document.office_id, batch)

                document.issued_by = issuer.id
                document.received_by = receiver.id
                document.completed_at = self.clock.now()
                document.updated_by_id = issuer.id
                self.session.flush()
                result = document.to_dto()

                logger.info(
                    "ris_issued",
                    extra={
                        "ris_id": str(result.id),
                        "office_id": str(result.office_id),
                        "entry_count": result_batch.entry_count,
                        "total_issue_qty": result.total_issue_qty,
                    },
                )
        return result

    # =========================================================================
    # Report serial numbers
    # =========================================================================

    def increment_serial_no_counter(self, ris_id: UUID) -> RisSerialNo:
        """Allocate the next dated report serial number for a RIS."""
        with unit_of_work(self.session, "increment_serial_no_counter") as uow:
            self._load(uow, ris_id)
            count = self._next_count(uow, CounterType.RIS_SERIAL_NO)
            now = self.clock.now()
            serial = RisSerialNoModel(
                ris_id=ris_id,
                serial_no=dated_number(now, count),
                created_at=now,
            )
            self.session.add(serial)
            self.session.flush()
            result = serial.to_dto()

        logger.info(
            "ris_serial_no_allocated",
            extra={"ris_id": str(ris_id), "serial_no": result.serial_no},
        )
        return result
