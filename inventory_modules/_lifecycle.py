"""
Shared base for lifecycle document services.

Used by inventory_modules/*/service.py to load a document under a row lock,
move it through its workflow, allocate its number and read configuration
labels, so each service only states what its transitions do.

Architecture: Modules layer. Imports only from inventory_kernel.
"""

from __future__ import annotations

from typing import ClassVar, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from inventory_kernel.db.base import TrackedBase
from inventory_kernel.db.unit_of_work import UnitOfWork
from inventory_kernel.domain.clock import Clock
from inventory_kernel.domain.settings import ConfigName, ConfigurationStore
from inventory_kernel.domain.workflow import Transition, Workflow
from inventory_kernel.exceptions import (
    BadRequestError,
    ConfigurationError,
    DocumentNotFoundError,
)
from inventory_kernel.logging_config import get_logger
from inventory_kernel.selectors.stock_selector import StockSelector
from inventory_kernel.services.asset_service import AssetService
from inventory_kernel.services.base import BaseService
from inventory_kernel.services.batch_service import BatchService
from inventory_kernel.services.directory import DirectoryService, SqlDirectoryService
from inventory_kernel.services.notification import (
    LoggingNotificationService,
    NotificationService,
)
from inventory_kernel.services.sequence_service import CounterType, SequenceService

logger = get_logger("modules.lifecycle")

DocumentT = TypeVar("DocumentT", bound=TrackedBase)


class LifecycleService(BaseService[DocumentT]):
    """
    Common plumbing for one lifecycle document type.

    Subclasses set ``document_type``, ``model`` and ``workflow``.  Every
    public operation of a subclass opens exactly one unit of work; the
    helpers here only run inside it.
    """

    document_type: ClassVar[str]
    model: ClassVar[type]
    workflow: ClassVar[Workflow]

    def __init__(
        self,
        session: Session,
        config: ConfigurationStore | None = None,
        directory: DirectoryService | None = None,
        notifier: NotificationService | None = None,
        clock: Clock | None = None,
    ):
        super().__init__(session, clock)
        self.config = config
        self.directory = directory or SqlDirectoryService(session)
        self.notifier = notifier or LoggingNotificationService()
        self._sequence = SequenceService(session)
        self._stocks = StockSelector(session)
        self._assets = AssetService(
            session, config=config, directory=self.directory, clock=self.clock,
        )
        self._batch = BatchService(session, directory=self.directory, clock=self.clock)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _get(self, document_id: UUID) -> DocumentT:
        document = self.session.get(self.model, document_id)
        if document is None:
            raise DocumentNotFoundError(self.document_type, str(document_id))
        return document

    def _load(self, uow: UnitOfWork, document_id: UUID) -> DocumentT:
        """Document row locked until ``uow`` ends."""
        uow.require_active(f"load_{self.document_type}")
        document = self.session.execute(
            select(self.model)
            .where(self.model.id == document_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if document is None:
            raise DocumentNotFoundError(self.document_type, str(document_id))
        return document

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def _transition(
        self,
        document: DocumentT,
        target: str,
        actor_id: UUID | None = None,
    ) -> Transition:
        """
        Move ``document`` to ``target`` if the workflow allows it.

        Raises:
            InvalidTransitionError: no such transition from the current status.
        """
        transition = self.workflow.transition_for(document.status, target)
        previous = document.status
        document.status = transition.to_state
        document.updated_at = self.clock.now()
        if actor_id is not None:
            document.updated_by_id = actor_id
        logger.info(
            "document_status_changed",
            extra={
                "workflow": self.workflow.name,
                "document_id": str(document.id),
                "from_state": previous,
                "to_state": transition.to_state,
                "action": transition.action,
                "moves_stock": transition.moves_stock,
            },
        )
        return transition

    def _require_open(self, document: DocumentT) -> None:
        """Reject edits to a document that has reached a terminal status."""
        if self.workflow.is_terminal(document.status):
            raise BadRequestError(
                f"{self.document_type} is already {document.status} and cannot be changed."
            )

    # ------------------------------------------------------------------
    # Numbers and labels
    # ------------------------------------------------------------------

    def _next_count(self, uow: UnitOfWork, counter: CounterType) -> int:
        return self._sequence.increment_counter_by_type(uow, counter)

    def _config_value(self, name: ConfigName) -> str:
        if self.config is None:
            raise ConfigurationError(name.value)
        return self.config.get_config_by_name(name)
