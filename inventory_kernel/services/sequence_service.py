"""
SequenceService -- the Counter Service.

Responsibility:
    Atomic, strictly increasing integers per named counter.  Used for the
    human-readable numbers of assets and lifecycle documents, and for the
    global ``seq`` ordering of stock ledger entries.

Architecture position:
    Kernel > Services -- imperative shell infrastructure.

Invariants enforced:
    - Monotonicity: the locked counter row is the sole source of truth for
      the next value; MAX(...)+1 over the numbered table is never used.
    - Transactional allocation: an increment is visible only when the
      caller's unit of work commits.  A rolled-back document returns its
      number, so document numbers have no gaps.

Failure modes:
    - IntegrityError: concurrent first use of a counter on PostgreSQL
      (handled via savepoint rollback and retry).
    - TransactionRequiredError: ``increment_counter_by_type`` called with a
      closed unit of work.
"""

from enum import Enum

from sqlalchemy import BigInteger, String, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Mapped, Session, mapped_column

from inventory_kernel.db.base import Base
from inventory_kernel.db.unit_of_work import UnitOfWork
from inventory_kernel.logging_config import get_logger

logger = get_logger("services.sequence")


class CounterType(str, Enum):
    """Well-known counter names."""

    STOCK_LEDGER = "stock-ledger"
    CONSUMABLE = "consumable"
    SEMI_EXPENDABLE_PROPERTY = "semi-expendable-property"
    PROPERTY_PLANT_EQUIPMENT = "property-plant-equipment"
    INVENTORY_CUSTODIAN_SLIPS = "inventory-custodian-slips"
    PROPERTY_ACKNOWLEDGEMENT_RECEIPTS = "property-acknowledgement-receipts"
    RETURN_SEP = "return-SEP"
    RETURN_PPE = "return-PPE"
    LOSS_SEP = "RLSDDSP"
    LOSS_PPE = "RLSDDP"
    WASTE = "waste-materials-report"
    REQUISITION_AND_ISSUE_SLIPS = "requisition-and-issue-slips"
    RIS_SERIAL_NO = "ris-serial-no"
    MAINTENANCE = "maintenance"
    INVENTORY_TRANSFER_REPORT = "inventory-transfer-report"
    PROPERTY_TRANSFER_REPORT = "property-transfer-report"


class SequenceCounter(Base):
    """
    Counter table.

    Each row is a named counter with its current value.  Row-level locking
    keeps allocation monotonic under concurrency.
    """

    __tablename__ = "counters"

    name: Mapped[str] = mapped_column(
        String(60),
        nullable=False,
        unique=True,
    )

    current_value: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=0,
    )

    def __repr__(self) -> str:
        return f"<SequenceCounter(name={self.name!r}, value={self.current_value})>"


class SequenceService:
    """
    Transactional counter allocation.

    Contract:
        ``next_value(name)`` returns the next value for ``name`` within the
        session's current transaction.  ``increment_counter_by_type`` is the
        same, but demands the explicit unit of work the value belongs to.

    Non-goals:
        - Does NOT call ``session.commit()``; the unit of work owns that.
    """

    def __init__(self, session: Session):
        self._session = session

    def _locked_counter(self, name: str) -> SequenceCounter | None:
        return self._session.execute(
            select(SequenceCounter)
            .where(SequenceCounter.name == name)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def _create_counter(self, name: str) -> SequenceCounter | None:
        """
        Insert a fresh counter at 1.  Returns None when a concurrent
        PostgreSQL transaction created the row first.
        """
        counter = SequenceCounter(name=name, current_value=1)
        if self._session.get_bind().dialect.name != "postgresql":
            self._session.add(counter)
            self._session.flush()
            return counter

        # Losing the insert race must not discard the caller's pending work
        savepoint = self._session.begin_nested()
        try:
            self._session.add(counter)
            self._session.flush()
        except IntegrityError:
            savepoint.rollback()
            logger.debug("sequence_counter_race_retry", extra={"sequence_name": name})
            return None
        savepoint.commit()
        return counter

    def next_value(self, sequence_name: str) -> int:
        """
        Lock the counter row (creating it on first use), increment, return.

        The returned value is > 0 and greater than any committed value for
        this name.  The row stays locked until the transaction completes.
        """
        counter = self._locked_counter(sequence_name)
        if counter is None:
            counter = self._create_counter(sequence_name)
            if counter is None:
                counter = self._locked_counter(sequence_name)
            else:
                logger.debug(
                    "sequence_allocated",
                    extra={"sequence_name": sequence_name, "value": 1},
                )
                return 1

        counter.current_value += 1
        self._session.flush()
        logger.debug(
            "sequence_allocated",
            extra={"sequence_name": sequence_name, "value": counter.current_value},
        )
        return counter.current_value

    def increment_counter_by_type(
        self,
        uow: UnitOfWork,
        counter_type: CounterType | str,
    ) -> int:
        """
        Allocate the next value of ``counter_type`` inside ``uow``.

        Raises:
            TransactionRequiredError: if ``uow`` is not open.
        """
        uow.require_active("increment_counter_by_type")
        name = counter_type.value if isinstance(counter_type, CounterType) else counter_type
        return self.next_value(name)

    def current_value(self, sequence_name: str) -> int | None:
        """Current value of a counter without incrementing, or None."""
        counter = self._session.execute(
            select(SequenceCounter)
            .where(SequenceCounter.name == sequence_name)
        ).scalar_one_or_none()

        return counter.current_value if counter else None
