"""
Issue Slip Service (``inventory_modules.issue_slip.service``).

Responsibility
--------------
Drafts ICS/PAR issue slips for SEP/PPE assets and issues them: issuing
numbers the units out of the asset's initial allotment and writes one
``reissued`` ledger entry per unit, to the receiving user's office.

Architecture
------------
Layer: **Modules** -- orchestration over ``inventory_kernel``.  Single-asset
document, so ledger writes go straight through
``StockLedgerService.write_movement``.

Invariants
----------
- Every public method owns exactly one unit of work.
- The slip number's counter value is allocated in the same unit of work as
  the slip, so a rollback leaves no gap.
- Issued unit numbers are ``totalIssued + 1 .. totalIssued + quantity`` and
  never pass the asset's ``initial_qty``.

Failure Modes
-------------
- AssetNotFoundError, UserNotFoundError, OfficeNotFoundError.
- InsufficientStockError: slip quantity above the asset's quantity.
- ExceedsInitialQuantityError: numbering would pass ``initial_qty``.
- SerialNumberCountError, CostNotDefinedError, ConfigurationError.
- InvalidTransitionError: issuing a slip that is not pending.

Usage::

    service = IssueSlipService(session, config=config, ceilings=config.slip_ceilings)
    slip = service.create_issue_slip(IssueSlipCreateRequest(...))
    slip = service.update_status_to_issued(slip.id, IssueSlipIssueRequest(issued_by=...))
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session

from inventory_config.schema import SlipCeilings
from inventory_kernel.db.unit_of_work import unit_of_work
from inventory_kernel.domain.clock import Clock
from inventory_kernel.domain.conditions import AssetType, StockCondition
from inventory_kernel.domain.dtos import StockMovementRequest
from inventory_kernel.domain.numbering import (
    dated_number,
    issue_item_numbers,
    item_number_range,
    monthly_number,
)
from inventory_kernel.domain.settings import (
    ConfigName,
    ConfigurationStore,
    fund_cluster_for,
)
from inventory_kernel.exceptions import (
    BadRequestError,
    CostNotDefinedError,
    InsufficientStockError,
    SerialNumberCountError,
)
from inventory_kernel.logging_config import LogContext, get_logger
from inventory_kernel.services.asset_service import AssetInfo
from inventory_kernel.services.directory import (
    DirectoryService,
    resolve_office,
    resolve_user,
)
from inventory_kernel.services.notification import NotificationService
from inventory_kernel.services.sequence_service import CounterType
from inventory_modules._lifecycle import LifecycleService
from inventory_modules.issue_slip.models import (
    IssueSlip,
    IssueSlipStatus,
    SlipClass,
    classify_slip,
)
from inventory_modules.issue_slip.orm import IssueSlipModel
from inventory_modules.issue_slip.schemas import (
    IssueSlipCreateRequest,
    IssueSlipIssueRequest,
    IssueSlipUpdateRequest,
)
from inventory_modules.issue_slip.workflows import ISSUE_SLIP_WORKFLOW

logger = get_logger("modules.issue_slip.service")


def _check_quantity(asset: AssetInfo, quantity: int, serial_numbers: list[str]) -> None:
    if quantity > asset.quantity:
        raise InsufficientStockError(str(asset.id), asset.name, asset.quantity, quantity)
    if len(serial_numbers) > quantity:
        raise SerialNumberCountError(len(serial_numbers), quantity)


class IssueSlipService(LifecycleService[IssueSlipModel]):
    """
    Issue slip lifecycle: pending -> issued.

    ``ceilings`` decides SPLV/SPHV/PAR; pass the loaded configuration's
    ``slip_ceilings``.
    """

    document_type = "IssueSlip"
    model = IssueSlipModel
    workflow = ISSUE_SLIP_WORKFLOW

    def __init__(
        self,
        session: Session,
        config: ConfigurationStore | None = None,
        directory: DirectoryService | None = None,
        notifier: NotificationService | None = None,
        clock: Clock | None = None,
        ceilings: SlipCeilings | None = None,
    ):
        super().__init__(session, config, directory, notifier, clock)
        self.ceilings = ceilings or SlipCeilings()

    def _slip_number(self, slip_class: SlipClass, count: int) -> str:
        now = self.clock.now()
        if slip_class is SlipClass.PAR:
            return dated_number(now, count, prefix=slip_class.value)
        return monthly_number(now, count, slip_class.value)

    def get_issue_slip_by_id(self, slip_id: UUID) -> IssueSlip:
        return self._get(slip_id).to_dto()

    # =========================================================================
    # Create
    # =========================================================================

    def create_issue_slip(
        self,
        request: IssueSlipCreateRequest,
        actor_id: UUID | None = None,
    ) -> IssueSlip:
        """
        Draft a pending slip.

        Nothing moves in the ledger yet; availability is checked again when
        the slip is issued.

        Raises:
            AssetNotFoundError, InsufficientStockError, SerialNumberCountError,
            UserNotFoundError, CostNotDefinedError, BadRequestError (cost band),
            ConfigurationError.
        """
        entity_name = self._config_value(ConfigName.ENTITY_NAME)
        asset = self._assets.get_asset_by_id(request.asset_id)
        _check_quantity(asset, request.quantity, request.serial_numbers)
        receiver = resolve_user(self.directory, request.received_by, "receiver")
        if asset.cost is None:
            raise CostNotDefinedError(str(asset.id))
        slip_class = classify_slip(asset.type, asset.cost, self.ceilings)
        fund_cluster = self._config_value(fund_cluster_for(asset.type))
        counter = (
            CounterType.PROPERTY_ACKNOWLEDGEMENT_RECEIPTS
            if asset.type is AssetType.PPE
            else CounterType.INVENTORY_CUSTODIAN_SLIPS
        )

        with unit_of_work(self.session, "create_issue_slip") as uow:
            count = self._next_count(uow, counter)
            slip = IssueSlipModel(
                type=slip_class.slip_type.value,
                slip_class=slip_class.value,
                issue_slip_no=self._slip_number(slip_class, count),
                entity_name=entity_name,
                fund_cluster=fund_cluster,
                asset_id=asset.id,
                asset_name=asset.name,
                quantity=request.quantity,
                estimated_useful_life=request.estimated_useful_life,
                remarks=request.remarks,
                received_by=receiver.id,
                received_by_name=receiver.name,
                status=IssueSlipStatus.PENDING.value,
                created_at=self.clock.now(),
                created_by_id=actor_id,
            )
            slip.serial_numbers = request.serial_numbers
            self.session.add(slip)
            self.session.flush()
            result = slip.to_dto()

        logger.info(
            "issue_slip_created",
            extra={
                "slip_id": str(result.id),
                "issue_slip_no": result.issue_slip_no,
                "slip_class": result.slip_class.value,
                "asset_id": str(result.asset_id),
                "quantity": result.quantity,
            },
        )
        return result

    # =========================================================================
    # Update (pending only)
    # =========================================================================

    def update_issue_slip_by_id(
        self,
        slip_id: UUID,
        request: IssueSlipUpdateRequest,
        actor_id: UUID | None = None,
    ) -> IssueSlip:
        """
        Edit a pending slip.

        Raises:
            BadRequestError: the slip has already been issued.
        """
        with unit_of_work(self.session, "update_issue_slip_by_id") as uow:
            slip = self._load(uow, slip_id)
            if slip.status != IssueSlipStatus.PENDING.value:
                raise BadRequestError("Only a pending issue slip can be updated.")
            quantity = request.quantity if request.quantity is not None else slip.quantity
            serials = (
                request.serial_numbers
                if request.serial_numbers is not None
                else slip.serial_numbers
            )
            _check_quantity(self._assets.get_asset_by_id(slip.asset_id), quantity, serials)

            if request.received_by is not None:
                receiver = resolve_user(self.directory, request.received_by, "receiver")
                slip.received_by = receiver.id
                slip.received_by_name = receiver.name
            slip.quantity = quantity
            slip.serial_numbers = serials
            if request.estimated_useful_life is not None:
                slip.estimated_useful_life = request.estimated_useful_life
            if request.remarks is not None:
                slip.remarks = request.remarks
            slip.updated_at = self.clock.now()
            slip.updated_by_id = actor_id
            self.session.flush()
            result = slip.to_dto()

        logger.info("issue_slip_updated", extra={"slip_id": str(slip_id)})
        return result

    # =========================================================================
    # Issue
    # =========================================================================

    def update_status_to_issued(
        self,
        slip_id: UUID,
        request: IssueSlipIssueRequest,
    ) -> IssueSlip:
        """
        Issue the slip's units to the receiving user's office.

        Preconditions:
            - Slip is pending.
            - Asset quantity covers the slip quantity.
            - ``totalIssued + quantity <= initial_qty``.

        Postconditions:
            - One ``reissued`` entry per unit (``outs=1``, ``item_no`` "n",
              reference = slip number), asset quantity down by ``quantity``.
            - ``issue_item_no`` is "n" or "start-end"; ``item_no`` is the last
              unit number; slip status is ``issued``.
            - All of the above commit together or not at all.
        """
        with unit_of_work(self.session, "update_status_to_issued") as uow:
            slip = self._load(uow, slip_id)
            with LogContext.bind(document_no=slip.issue_slip_no):
                self._transition(slip, IssueSlipStatus.ISSUED)

                asset = self._assets.lock_asset(uow, slip.asset_id)
                if slip.quantity > asset.quantity:
                    raise InsufficientStockError(
                        str(asset.id), asset.name, asset.quantity, slip.quantity,
                    )
                numbers = issue_item_numbers(
                    asset.initial_qty, asset.quantity, slip.quantity, str(asset.id),
                )

                issuer = resolve_user(self.directory, request.issued_by, "issuer")
                receiver = resolve_user(self.directory, slip.received_by, "receiver")
                office = resolve_office(self.directory, receiver.office_id)

                serials = slip.serial_numbers
                for index, unit_no in enumerate(numbers):
                    self._batch.ledger.write_movement(
                        uow,
                        StockMovementRequest(
                            asset_id=asset.id,
                            item_no=str(unit_no),
                            outs=1,
                            condition=StockCondition.REISSUED,
                            initial_condition=StockCondition.GOOD_CONDITION,
                            office_id=office.id,
                            reference=slip.issue_slip_no,
                            serial_no=serials[index] if index < len(serials) else "",
                            number_of_days_to_consume=slip.estimated_useful_life,
                            remarks=slip.remarks,
                        ),
                    )

                slip.issue_item_no = item_number_range(numbers[0], numbers[-1])
                slip.item_no = str(numbers[-1])
                slip.issued_by = issuer.id
                slip.issued_by_name = issuer.name
                slip.received_at = request.received_at or self.clock.now()
                slip.updated_by_id = issuer.id
                self.session.flush()
                result = slip.to_dto()

                logger.info(
                    "issue_slip_issued",
                    extra={
                        "slip_id": str(result.id),
                        "asset_id": str(result.asset_id),
                        "issue_item_no": result.issue_item_no,
                        "office_id": str(office.id),
                    },
                )
        return result
