"""
Module: inventory_modules.maintenance.orm
Responsibility: SQLAlchemy persistence for maintenance requests.

Architecture position: Modules > Maintenance > ORM.  Inherits from TrackedBase.

Invariants enforced:
    - code is unique.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from inventory_kernel.db.base import TrackedBase


class MaintenanceModel(TrackedBase):
    """
    ORM model for maintenance requests.

    Maps to: inventory_modules.maintenance.models.Maintenance.
    """

    __tablename__ = "maintenances"

    __table_args__ = (
        UniqueConstraint("code", name="uq_maintenances_code"),
        Index("idx_maintenances_status", "status"),
        Index("idx_maintenances_assignee", "assignee_id"),
    )

    code: Mapped[str] = mapped_column(String(100), nullable=False)
    stock_id: Mapped[UUID] = mapped_column(nullable=False)
    asset_id: Mapped[UUID] = mapped_column(nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    assignee_id: Mapped[UUID] = mapped_column(nullable=False)
    office_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    issue: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    attachment: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    remarks: Mapped[str] = mapped_column(Text, nullable=False, default="")
    reschedule_reason: Mapped[str] = mapped_column(Text, nullable=False, default="")
    scheduled_at: Mapped[datetime | None] = mapped_column(nullable=True)
    completed_by: Mapped[UUID | None] = mapped_column(nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")

    def to_dto(self):
        """Convert ORM model to frozen Maintenance DTO."""
        from inventory_modules.maintenance.models import Maintenance, MaintenanceStatus

        return Maintenance(
            id=self.id,
            code=self.code,
            stock_id=self.stock_id,
            asset_id=self.asset_id,
            name=self.name,
            assignee_id=self.assignee_id,
            office_name=self.office_name,
            issue=self.issue,
            status=MaintenanceStatus(self.status),
            created_at=self.created_at,
            type=self.type,
            attachment=self.attachment,
            remarks=self.remarks,
            reschedule_reason=self.reschedule_reason,
            scheduled_at=self.scheduled_at,
            completed_by=self.completed_by,
            completed_at=self.completed_at,
        )

    def __repr__(self) -> str:
        return f"<MaintenanceModel {self.code} status={self.status}>"
