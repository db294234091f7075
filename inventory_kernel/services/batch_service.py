"""
BatchService -- the batch issuance/return protocol.

Responsibility:
    Apply a list of (asset, quantity, condition) items as one group: every
    item becomes one ledger movement, all inside one unit of work, so a
    batch is all-or-nothing.

Architecture position:
    Kernel > Services.  Lifecycle handlers call ``apply_batch`` with the
    unit of work they already hold; ``issue_stock_by_batch`` and
    ``create_stock_by_batch`` are the top-level entry points that open
    their own.

Invariants enforced:
    - Items are written sequentially, in request order.  Each write reads
      the asset quantity the previous one left behind, so two items for
      the same asset never race on the cached quantity.
    - ``returned`` items carry ``ins=qty``; every other condition carries
      ``outs=qty``.
    - When an item names the condition it leaves (``initial_condition``),
      the change must be in the condition transition table.
    - Item shapes are checked before the first write.

Failure modes:
    - InvalidBatchItemError: malformed item (index is 1-based).
    - InvalidConditionTransitionError: disallowed condition change.
    - Any ledger write error (AssetNotFoundError, InsufficientStockError,
      ...) propagates unchanged and the whole batch rolls back.
"""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy.orm import Session

from inventory_kernel.db.unit_of_work import UnitOfWork, unit_of_work
from inventory_kernel.domain.clock import Clock
from inventory_kernel.domain.conditions import (
    INBOUND_CONDITIONS,
    StockCondition,
    validate_condition_transition,
)
from inventory_kernel.domain.dtos import (
    BatchItem,
    BatchResult,
    IssueBatchRequest,
    StockInBatchRequest,
    StockMovementRequest,
)
from inventory_kernel.exceptions import InvalidBatchItemError
from inventory_kernel.logging_config import get_logger
from inventory_kernel.models.stock import StockEntryModel
from inventory_kernel.services.base import BaseService
from inventory_kernel.services.directory import DirectoryService, SqlDirectoryService
from inventory_kernel.services.stock_ledger import StockLedgerService

logger = get_logger("services.batch")


def _check_item(index: int, item: BatchItem) -> None:
    if item.condition is StockCondition.GOOD_CONDITION:
        raise InvalidBatchItemError(index, "good-condition stock is received, not issued")
    if item.condition is StockCondition.TRANSFERRED:
        if item.balance is None:
            raise InvalidBatchItemError(index, "a transferred item must carry its balance")
    elif item.balance is not None:
        raise InvalidBatchItemError(index, "balance is only accepted for transferred items")
    validate_condition_transition(item.initial_condition, item.condition)


def movement_for(
    office_id: UUID | None,
    item: BatchItem,
    office_name: str = "",
) -> StockMovementRequest:
    """Translate a batch item into a ledger movement."""
    if item.condition is StockCondition.RETURNED:
        ins, outs = item.qty, 0
    else:
        ins, outs = 0, item.qty
    return StockMovementRequest(
        asset_id=item.asset_id,
        item_no=item.item_no,
        ins=ins,
        outs=outs,
        balance=item.balance,
        condition=item.condition,
        initial_condition=item.initial_condition,
        office_id=office_id,
        office_name=office_name,
        reference=item.reference,
        serial_no=item.serial_no,
        remarks=item.remarks,
    )


class BatchService(BaseService[StockEntryModel]):
    """
    Batch protocol over ``StockLedgerService``.

    Contract:
        ``apply_batch`` needs an open unit of work and never commits.
        The two top-level wrappers own their unit of work end to end and
        refuse to run inside someone else's.
    """

    def __init__(
        self,
        session: Session,
        directory: DirectoryService | None = None,
        clock: Clock | None = None,
    ):
        super().__init__(session, clock)
        self.directory = directory or SqlDirectoryService(session)
        self.ledger = StockLedgerService(session, directory=self.directory, clock=self.clock)

    def apply_batch(
        self,
        uow: UnitOfWork,
        office_id: UUID | None,
        items: Sequence[BatchItem],
        office_name: str = "",
    ) -> BatchResult:
        """
        Write every item, in order, inside ``uow``.

        ``office_name`` labels the entries when there is no ``office_id``
        (e.g. a transfer to another division).

        Raises:
            TransactionRequiredError: ``uow`` is not open.
            InvalidBatchItemError: empty batch or malformed item.
        """
        uow.require_active("apply_batch")
        if not items:
            raise InvalidBatchItemError(0, "a batch needs at least one item")
        for index, item in enumerate(items, start=1):
            _check_item(index, item)

        entries = tuple(
            self.ledger.write_movement(uow, movement_for(office_id, item, office_name))
            for item in items
        )

        logger.info(
            "batch_applied",
            extra={
                "office_id": str(office_id) if office_id else None,
                "item_count": len(entries),
                "asset_count": len({e.asset_id for e in entries}),
            },
        )
        return BatchResult(office_id=office_id, entries=entries)

    def issue_stock_by_batch(self, request: IssueBatchRequest) -> BatchResult:
        """Issue/return/transfer a batch in its own unit of work."""
        logger.info(
            "issue_stock_by_batch_started",
            extra={"item_count": len(request.items)},
        )
        with unit_of_work(self.session, "issue_stock_by_batch") as uow:
            return self.apply_batch(uow, request.office_id, request.items)

    def create_stock_by_batch(self, request: StockInBatchRequest) -> BatchResult:
        """
        Receive stock for several assets in one unit of work.

        Every item is an inbound movement (``ins=qty``).
        """
        logger.info(
            "create_stock_by_batch_started",
            extra={"item_count": len(request.items)},
        )
        with unit_of_work(self.session, "create_stock_by_batch") as uow:
            entries = []
            for index, item in enumerate(request.items, start=1):
                if item.condition not in INBOUND_CONDITIONS:
                    raise InvalidBatchItemError(index, "stock-in items must be inbound")
                entries.append(
                    self.ledger.write_movement(
                        uow,
                        StockMovementRequest(
                            asset_id=item.asset_id,
                            ins=item.qty,
                            condition=item.condition,
                            office_id=request.office_id,
                            reference=item.reference or request.reference,
                            attachment=item.attachment or request.attachment,
                            number_of_days_to_consume=item.number_of_days_to_consume,
                            remarks=item.remarks,
                        ),
                    )
                )
            result = BatchResult(office_id=request.office_id, entries=tuple(entries))

        logger.info("stock_received_by_batch", extra={"item_count": result.entry_count})
        return result
