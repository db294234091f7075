"""
StockLedgerService -- the stock ledger write path.

Responsibility:
    Append one movement to the stock ledger and move the asset's cached
    ``quantity`` to match, as a single flush inside the caller's unit of
    work.  ``create_stock`` is the top-level entry point that opens its
    own unit of work.

Architecture position:
    Kernel > Services -- imperative shell.  Balance arithmetic lives in
    ``inventory_kernel.domain.ledger_rules``; this module only sequences
    the reads and writes around it.

Invariants enforced:
    - Ledger/quantity coupling: the entry and the new ``quantity`` are
      flushed together, and the immutability listener rejects any flush
      that moves ``quantity`` without a new entry for the same asset.
    - Ordering: every entry takes the next value of the ``stock-ledger``
      counter as its ``seq``, allocated before anything is mutated.
    - Row lock: the asset row is read ``FOR UPDATE`` so concurrent writes
      to one asset serialize at the database (PostgreSQL).
    - The write path computes the new balance from the cached quantity,
      never by re-summing the ledger.  Transfers record the balance the
      caller supplies.

Failure modes:
    - AssetNotFoundError: asset missing or soft-deleted.
    - InvalidMovementError: ins/outs/balance shape not allowed for the
      condition.
    - InsufficientStockError: a reissue would go below zero, or a transfer
      of an on-hand unit finds nothing on hand.
    - OfficeNotFoundError: the office reference is unknown.
    - TransactionRequiredError: ``write_movement`` called with a closed
      unit of work.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from inventory_kernel.db.unit_of_work import UnitOfWork, unit_of_work
from inventory_kernel.domain.clock import Clock
from inventory_kernel.domain.dtos import StockEntryRecord, StockMovementRequest
from inventory_kernel.domain.ledger_rules import Movement, next_quantity, validate_movement
from inventory_kernel.logging_config import LogContext, get_logger
from inventory_kernel.models.stock import StockEntryModel
from inventory_kernel.services.asset_service import AssetService
from inventory_kernel.services.base import BaseService
from inventory_kernel.services.directory import (
    DirectoryService,
    SqlDirectoryService,
    resolve_office,
)
from inventory_kernel.services.sequence_service import CounterType, SequenceService

logger = get_logger("services.stock_ledger")


class StockLedgerService(BaseService[StockEntryModel]):
    """
    Append-only writer for stock movements.

    Contract:
        ``write_movement(uow, movement)`` requires an open ``UnitOfWork``
        and only flushes.  ``create_stock(request)`` owns its own unit of
        work and commits.
    """

    def __init__(
        self,
        session: Session,
        directory: DirectoryService | None = None,
        clock: Clock | None = None,
    ):
        super().__init__(session, clock)
        self.directory = directory or SqlDirectoryService(session)
        self._assets = AssetService(session, directory=self.directory, clock=self.clock)
        self._sequence = SequenceService(session)

    def write_movement(
        self,
        uow: UnitOfWork,
        movement: StockMovementRequest,
    ) -> StockEntryRecord:
        """
        Append ``movement`` to the ledger and update the asset quantity.

        Preconditions:
            - ``uow`` is open on this service's session.
            - Availability rules specific to a lifecycle document have
              already been checked by the caller.

        Postconditions:
            - Exactly one new ledger entry, flushed.
            - ``asset.quantity`` equals the entry's ``balance``.

        Raises:
            TransactionRequiredError, AssetNotFoundError,
            InvalidMovementError, InsufficientStockError,
            OfficeNotFoundError.
        """
        uow.require_active("write_movement")

        asset = self._assets.lock_asset(uow, movement.asset_id)

        change = Movement(
            condition=movement.condition,
            ins=movement.ins,
            outs=movement.outs,
            balance=movement.balance,
            initial_condition=movement.initial_condition,
        )
        validate_movement(change)
        new_quantity = next_quantity(
            asset.quantity,
            change,
            asset_id=str(asset.id),
            asset_name=asset.name,
        )

        office_name = movement.office_name
        if movement.office_id is not None:
            office_name = resolve_office(self.directory, movement.office_id).name

        seq = self._sequence.increment_counter_by_type(uow, CounterType.STOCK_LEDGER)

        now = self.clock.now()
        entry = StockEntryModel(
            seq=seq,
            asset_id=asset.id,
            asset_name=asset.name,
            item_no=movement.item_no,
            ins=movement.ins,
            outs=movement.outs,
            balance=new_quantity,
            condition=movement.condition.value,
            initial_condition=(
                movement.initial_condition.value if movement.initial_condition else None
            ),
            office_id=movement.office_id,
            office_name=office_name,
            reference=movement.reference,
            serial_no=movement.serial_no,
            attachment=movement.attachment,
            number_of_days_to_consume=movement.number_of_days_to_consume,
            remarks=movement.remarks,
            created_at=now,
        )
        self.session.add(entry)
        previous_quantity = asset.quantity
        self._assets.update_asset_qty_by_id(uow, asset.id, new_quantity)
        self.session.flush()

        logger.info(
            "stock_movement_written",
            extra={
                "asset_id": str(asset.id),
                "seq": seq,
                "item_no": entry.item_no,
                "condition": entry.condition,
                "ins": entry.ins,
                "outs": entry.outs,
                "previous_quantity": previous_quantity,
                "balance": new_quantity,
                "reference": entry.reference,
            },
        )
        return StockEntryRecord.from_model(entry)

    def create_stock(self, request: StockMovementRequest) -> StockEntryRecord:
        """
        Write one movement in its own unit of work.

        Raises:
            TransactionOwnershipError: a unit of work is already open on
                the session (pass it to ``write_movement`` instead).
        """
        with LogContext.bind(asset_id=str(request.asset_id)):
            logger.info(
                "create_stock_started",
                extra={"condition": request.condition.value, "reference": request.reference},
            )
            with unit_of_work(self.session, "create_stock") as uow:
                record = self.write_movement(uow, request)
            logger.info("create_stock_completed", extra={"seq": record.seq})
            return record
