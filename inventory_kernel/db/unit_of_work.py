"""
Module: inventory_kernel.db.unit_of_work
Responsibility: The explicit transaction context every low-level write
    requires.  A ``UnitOfWork`` is only ever created by ``unit_of_work()``,
    which owns commit and rollback for the block.
Architecture position: Kernel > DB.  Imported by services; never by models.

Invariants enforced:
    - One unit of work per session at a time.  Opening a second one on the
      same session raises ``TransactionOwnershipError``; composing writes
      means passing the existing ``UnitOfWork`` down, not opening another.
    - A ``UnitOfWork`` is usable only while its block is running.  Writes
      attempted with a closed one raise ``TransactionRequiredError``.
    - After-commit callbacks run only when the commit succeeded, and their
      failures never undo the commit.

Failure modes:
    - Any exception inside the block rolls the session back, is logged at
      WARNING with exc_info, and is re-raised unchanged.
"""

from contextlib import contextmanager
from typing import Callable, Generator
from uuid import UUID, uuid4

from sqlalchemy.orm import Session

from inventory_kernel.exceptions import (
    TransactionOwnershipError,
    TransactionRequiredError,
)
from inventory_kernel.logging_config import get_logger

logger = get_logger("db.unit_of_work")

_SESSION_KEY = "inventory_unit_of_work"


class UnitOfWork:
    """An open transaction on a session, handed explicitly to writers."""

    def __init__(self, session: Session, operation: str):
        self.session = session
        self.operation = operation
        self.id: UUID = uuid4()
        self._active = True
        self._after_commit: list[Callable[[], None]] = []

    @property
    def is_active(self) -> bool:
        return self._active and self.session.info.get(_SESSION_KEY) is self

    def require_active(self, operation: str) -> None:
        """Raise TransactionRequiredError unless this unit of work is open."""
        if not self.is_active:
            raise TransactionRequiredError(operation)

    def after_commit(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` once the transaction has committed."""
        self._after_commit.append(callback)

    def _close(self) -> None:
        self._active = False
        if self.session.info.get(_SESSION_KEY) is self:
            del self.session.info[_SESSION_KEY]

    def _run_after_commit(self) -> None:
        for callback in self._after_commit:
            try:
                callback()
            except Exception:
                logger.warning(
                    "after_commit_callback_failed",
                    extra={"operation": self.operation, "uow_id": str(self.id)},
                    exc_info=True,
                )

    def __repr__(self) -> str:
        return (
            f"<UnitOfWork(operation={self.operation!r}, "
            f"active={self.is_active})>"
        )


def current_unit_of_work(session: Session) -> UnitOfWork | None:
    """Return the unit of work currently open on ``session``, if any."""
    return session.info.get(_SESSION_KEY)


@contextmanager
def unit_of_work(
    session: Session,
    operation: str = "unit_of_work",
) -> Generator[UnitOfWork, None, None]:
    """
    Own the transaction on ``session`` for the duration of the block.

    Postconditions: On normal exit the session is committed and after-commit
        callbacks run.  On exception the session is rolled back and the
        exception is re-raised.

    Raises:
        TransactionOwnershipError: If the session already has an open
            unit of work.

    Usage:
        with unit_of_work(session, "issue_stock_by_batch") as uow:
            batch_service.apply_batch(uow, office_id, items)
    """
    if current_unit_of_work(session) is not None:
        raise TransactionOwnershipError(operation)

    uow = UnitOfWork(session, operation)
    session.info[_SESSION_KEY] = uow
    logger.debug(
        "transaction_started",
        extra={"operation": operation, "uow_id": str(uow.id)},
    )
    try:
        yield uow
        session.commit()
        logger.debug(
            "transaction_committed",
            extra={"operation": operation, "uow_id": str(uow.id)},
        )
    except Exception:
        session.rollback()
        logger.warning(
            "transaction_rolled_back",
            extra={"operation": operation, "uow_id": str(uow.id)},
            exc_info=True,
        )
        raise
    finally:
        uow._close()

    uow._run_after_commit()
