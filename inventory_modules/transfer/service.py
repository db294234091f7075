"""
Transfer Service (``inventory_modules.transfer.service``).

Responsibility
--------------
Inventory/property transfer reports: drafting (checks every unit and the
on-hand pool), approval, and completion, which writes one ``transferred``
entry per unit through the batch protocol.

Architecture
------------
Layer: **Modules** -- orchestration over ``inventory_kernel``.  Transfers
are the one movement whose balance the caller computes, because a report
mixes units taken from the on-hand pool with units already out with an
office.

Invariants
----------
- Running balance per asset, starting from the locked asset quantity:
    * a unit leaving the pool (latest entry good-condition or returned)
      records ``running - 1`` and lowers the running balance;
    * a unit already issued records ``running`` unchanged.
- A unit taken from the initial pool (good-condition receipt entry) is
  numbered ``initial_qty - running + 1``, continuing the issuance
  sequence; every other unit keeps its item number.
- Only pool entries may appear more than once on a report, and the pool
  must cover every listed pool unit.
- Entries carry reference = transfer number and are labelled with the
  receiving office (``to_office_id``) or, without one, the ``to`` label.
"""

from __future__ import annotations

from collections import Counter
from uuid import UUID

from inventory_kernel.db.unit_of_work import unit_of_work
from inventory_kernel.domain.conditions import (
    INBOUND_CONDITIONS,
    StockCondition,
    validate_condition_transition,
)
from inventory_kernel.domain.dtos import BatchItem
from inventory_kernel.domain.numbering import dated_number
from inventory_kernel.domain.settings import ConfigName, fund_cluster_for
from inventory_kernel.exceptions import BadRequestError, InsufficientStockError
from inventory_kernel.logging_config import LogContext, get_logger
from inventory_kernel.services.directory import resolve_office, resolve_user
from inventory_kernel.services.sequence_service import CounterType
from inventory_modules._lifecycle import LifecycleService
from inventory_modules.transfer.models import Transfer, TransferStatus
from inventory_modules.transfer.orm import TransferItemModel, TransferModel
from inventory_modules.transfer.schemas import (
    TransferApproveRequest,
    TransferCompleteRequest,
    TransferCreateRequest,
)
from inventory_modules.transfer.workflows import TRANSFER_WORKFLOW

logger = get_logger("modules.transfer.service")


class TransferService(LifecycleService[TransferModel]):
    """Transfer lifecycle: pending -> approved -> completed."""

    document_type = "Transfer"
    model = TransferModel
    workflow = TRANSFER_WORKFLOW

    def get_transfer_by_id(self, transfer_id: UUID) -> Transfer:
        return self._get(transfer_id).to_dto()

    def create_transfer(
        self,
        request: TransferCreateRequest,
        actor_id: UUID | None = None,
    ) -> Transfer:
        """
        Draft a pending transfer report.

        Raises:
            StockNotFoundError, StaleStockReferenceError,
            InvalidConditionTransitionError, OfficeNotFoundError.
            BadRequestError: wrong asset type, or an issued unit listed twice.
            InsufficientStockError: more pool units than the asset has on hand.
        """
        asset_type = request.type.asset_type
        entity_name = self._config_value(ConfigName.ENTITY_NAME)
        fund_cluster = self._config_value(fund_cluster_for(asset_type))
        if request.to_office_id is not None:
            resolve_office(self.directory, request.to_office_id)

        seen: set[UUID] = set()
        pool_units: Counter[UUID] = Counter()
        items: list[TransferItemModel] = []
        for line_number, item in enumerate(request.items, start=1):
            stock = self._stocks.require_latest(item.stock_id)
            asset = self._assets.get_asset_by_id(stock.asset_id)
            if asset.type is not asset_type:
                raise BadRequestError(
                    f"Stock {stock.id} belongs to a {asset.type.value} asset, "
                    f"not {asset_type.value}."
                )
            validate_condition_transition(stock.condition, StockCondition.TRANSFERRED)
            if stock.id in seen and stock.condition is not StockCondition.GOOD_CONDITION:
                raise BadRequestError(f"Stock {stock.id} is listed more than once.")
            seen.add(stock.id)
            if stock.condition in INBOUND_CONDITIONS:
                pool_units[asset.id] += 1
                if pool_units[asset.id] > asset.quantity:
                    raise InsufficientStockError(
                        str(asset.id), asset.name, asset.quantity, pool_units[asset.id],
                    )
            items.append(
                TransferItemModel(
                    line_number=line_number,
                    stock_id=stock.id,
                    asset_id=stock.asset_id,
                    item_no=stock.item_no,
                    serial_no=stock.serial_no,
                )
            )

        with unit_of_work(self.session, "create_transfer") as uow:
            count = self._next_count(uow, CounterType(request.type.value))
            now = self.clock.now()
            document = TransferModel(
                type=request.type.value,
                transfer_no=dated_number(now, count),
                entity_name=entity_name,
                fund_cluster=fund_cluster,
                transfer_from=request.transfer_from,
                transfer_to=request.transfer_to,
                to_office_id=request.to_office_id,
                division_id=request.division_id,
                transfer_reason=request.transfer_reason,
                transfer_type=request.transfer_type.value,
                status=TransferStatus.PENDING.value,
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
            "transfer_created",
            extra={
                "transfer_id": str(result.id),
                "transfer_no": result.transfer_no,
                "type": result.type.value,
                "item_count": len(result.items),
                "pool_unit_count": sum(pool_units.values()),
            },
        )
        return result

    def update_status_to_approved(
        self,
        transfer_id: UUID,
        request: TransferApproveRequest,
    ) -> Transfer:
        with unit_of_work(self.session, "approve_transfer") as uow:
            document = self._load(uow, transfer_id)
            approver = resolve_user(self.directory, request.approved_by, "approver")
            self._transition(document, TransferStatus.APPROVED, actor_id=approver.id)
            document.approved_by = approver.id
            document.approved_at = self.clock.now()
            self.session.flush()
            result = document.to_dto()

        logger.info(
            "transfer_approved",
            extra={"transfer_id": str(transfer_id), "approved_by": str(approver.id)},
        )
        return result

    def update_status_to_completed(
        self,
        transfer_id: UUID,
        request: TransferCompleteRequest,
    ) -> Transfer:
        """
        Move every listed unit to the receiving side.

        Postconditions:
            - One ``transferred`` entry per line with the running balance
              described in the module docstring.
            - Status ``completed`` with issuer, receiver and ``completed_at``;
              all in one commit.
        """
        with unit_of_work(self.session, "complete_transfer") as uow:
            document = self._load(uow, transfer_id)
            with LogContext.bind(document_no=document.transfer_no):
                issuer = resolve_user(self.directory, request.issued_by, "issuer")
                self._transition(document, TransferStatus.COMPLETED, actor_id=issuer.id)

                running: dict[UUID, int] = {}
                initial: dict[UUID, int] = {}
                batch: list[BatchItem] = []
                for item in document.items:
                    stock = self._stocks.require_latest(item.stock_id)
                    if stock.asset_id not in running:
                        asset = self._assets.lock_asset(uow, stock.asset_id)
                        running[asset.id] = asset.quantity
                        initial[asset.id] = asset.initial_qty
                    balance = running[stock.asset_id]

                    item_no = stock.item_no
                    if stock.condition is StockCondition.GOOD_CONDITION:
                        item_no = str(initial[stock.asset_id] - balance + 1)
                    if stock.condition in INBOUND_CONDITIONS:
                        if balance < 1:
                            raise InsufficientStockError(
                                str(stock.asset_id), stock.asset_name, balance, 1,
                            )
                        balance -= 1
                        running[stock.asset_id] = balance

                    batch.append(
                        BatchItem(
                            asset_id=stock.asset_id,
                            qty=1,
                            condition=StockCondition.TRANSFERRED,
                            reference=document.transfer_no,
                            serial_no=stock.serial_no,
                            item_no=item_no,
                            initial_condition=stock.condition,
                            balance=balance,
                        )
                    )
                written = self._batch.apply_batch(
                    uow, document.to_office_id, batch, office_name=document.transfer_to,
                )

                document.issued_by = issuer.id
                document.received_by_name = request.received_by_name
                document.received_by_designation = request.received_by_designation
                document.completed_at = self.clock.now()
                self.session.flush()
                result = document.to_dto()

                logger.info(
                    "transfer_completed",
                    extra={
                        "transfer_id": str(result.id),
                        "entry_count": written.entry_count,
                        "asset_count": len(running),
                    },
                )
        return result
