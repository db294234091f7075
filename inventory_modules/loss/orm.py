"""
Module: inventory_modules.loss.orm
Responsibility: SQLAlchemy persistence for loss reports and their items.

Architecture position: Modules > Loss > ORM.  Inherits from TrackedBase.

Invariants enforced:
    - loss_no is unique.
    - Each item keeps the office the unit was with when it was reported.
"""

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import Boolean, Date, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inventory_kernel.db.base import TrackedBase


# ---------------------------------------------------------------------------
# 1. LossModel
# ---------------------------------------------------------------------------


class LossModel(TrackedBase):
    """
    ORM model for loss reports.

    Maps to: inventory_modules.loss.models.Loss.
    """

    __tablename__ = "losses"

    __table_args__ = (
        UniqueConstraint("type", "loss_no", name="uq_losses_type_loss_no"),
        Index("idx_losses_status", "status"),
        Index("idx_losses_supervisor", "supervisor_id"),
    )

    type: Mapped[str] = mapped_column(String(10), nullable=False)
    loss_no: Mapped[str] = mapped_column(String(100), nullable=False)
    entity_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    fund_cluster: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    loss_status: Mapped[str] = mapped_column(String(20), nullable=False)
    office_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")

    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    circumstances: Mapped[str] = mapped_column(Text, nullable=False, default="")

    police_notified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    police_station: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    police_report_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    attachment: Mapped[str] = mapped_column(String(500), nullable=False, default="")

    government_id: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    government_id_no: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    government_id_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    supervisor_id: Mapped[UUID] = mapped_column(nullable=False)
    supervisor_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    supervisor_date: Mapped[datetime | None] = mapped_column(nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")

    items: Mapped[list["LossItemModel"]] = relationship(
        back_populates="loss",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="LossItemModel.line_number",
    )

    def to_dto(self):
        """Convert ORM model to frozen Loss DTO."""
        from inventory_modules.loss.models import (
            Loss,
            LossReportStatus,
            LossStatus,
            LossType,
        )

        return Loss(
            id=self.id,
            type=LossType(self.type),
            loss_no=self.loss_no,
            entity_name=self.entity_name,
            fund_cluster=self.fund_cluster,
            loss_status=LossStatus(self.loss_status),
            office_name=self.office_name,
            supervisor_id=self.supervisor_id,
            supervisor_name=self.supervisor_name,
            status=LossReportStatus(self.status),
            items=tuple(item.to_dto() for item in self.items),
            created_at=self.created_at,
            description=self.description,
            circumstances=self.circumstances,
            police_notified=self.police_notified,
            police_station=self.police_station,
            police_report_date=self.police_report_date,
            attachment=self.attachment,
            government_id=self.government_id,
            government_id_no=self.government_id_no,
            government_id_date=self.government_id_date,
            supervisor_date=self.supervisor_date,
            completed_at=self.completed_at,
        )

    def __repr__(self) -> str:
        return (
            f"<LossModel {self.loss_no} {self.loss_status} "
            f"items={len(self.items)} status={self.status}>"
        )


# ---------------------------------------------------------------------------
# 2. LossItemModel
# ---------------------------------------------------------------------------


class LossItemModel(TrackedBase):
    """One reported unit."""

    __tablename__ = "loss_items"

    __table_args__ = (
        Index("idx_loss_items_loss_id", "loss_id"),
        Index("idx_loss_items_stock_id", "stock_id"),
    )

    loss_id: Mapped[UUID] = mapped_column(ForeignKey("losses.id"), nullable=False)
    line_number: Mapped[int] = mapped_column(nullable=False)
    stock_id: Mapped[UUID] = mapped_column(nullable=False)
    asset_id: Mapped[UUID] = mapped_column(nullable=False)
    item_no: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    serial_no: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    office_id: Mapped[UUID | None] = mapped_column(nullable=True)
    remarks: Mapped[str] = mapped_column(Text, nullable=False, default="")

    loss: Mapped["LossModel"] = relationship(back_populates="items")

    def to_dto(self):
        from inventory_modules.loss.models import LossItem

        return LossItem(
            stock_id=self.stock_id,
            asset_id=self.asset_id,
            item_no=self.item_no,
            serial_no=self.serial_no,
            office_id=self.office_id,
            remarks=self.remarks,
        )

    def __repr__(self) -> str:
        return f"<LossItemModel line={self.line_number} stock={self.stock_id}>"
