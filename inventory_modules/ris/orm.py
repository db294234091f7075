"""
Module: inventory_modules.ris.orm
Responsibility: SQLAlchemy persistence for requisition and issue slips,
    their lines and their report serial numbers.

Architecture position: Modules > RIS > ORM.  Inherits from TrackedBase.

Invariants enforced:
    - ris_no is unique.
    - One line per asset per RIS.
    - Report serial numbers are unique.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inventory_kernel.db.base import TrackedBase


# ---------------------------------------------------------------------------
# 1. RisModel
# ---------------------------------------------------------------------------


class RisModel(TrackedBase):
    """
    ORM model for requisition and issue slips.

    Maps to: inventory_modules.ris.models.Ris.
    """

    __tablename__ = "requisition_issue_slips"

    __table_args__ = (
        UniqueConstraint("ris_no", name="uq_ris_ris_no"),
        Index("idx_ris_status", "status"),
        Index("idx_ris_office", "office_id"),
    )

    ris_no: Mapped[str] = mapped_column(String(100), nullable=False)
    entity_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    fund_cluster: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    rcc: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    division_id: Mapped[UUID | None] = mapped_column(nullable=True)
    office_id: Mapped[UUID] = mapped_column(nullable=False)
    purpose: Mapped[str] = mapped_column(Text, nullable=False, default="")
    remarks: Mapped[str] = mapped_column(Text, nullable=False, default="")

    requested_by: Mapped[UUID] = mapped_column(nullable=False)
    requested_by_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    approved_by: Mapped[UUID | None] = mapped_column(nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(nullable=True)
    issued_by: Mapped[UUID | None] = mapped_column(nullable=True)
    received_by: Mapped[UUID | None] = mapped_column(nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="for-evaluation")

    items: Mapped[list["RisItemModel"]] = relationship(
        back_populates="ris",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="RisItemModel.line_number",
    )

    def item_for(self, asset_id: UUID) -> "RisItemModel | None":
        for item in self.items:
            if item.asset_id == asset_id:
                return item
        return None

    def to_dto(self):
        """Convert ORM model to frozen Ris DTO."""
        from inventory_modules.ris.models import Ris, RisStatus

        return Ris(
            id=self.id,
            ris_no=self.ris_no,
            entity_name=self.entity_name,
            fund_cluster=self.fund_cluster,
            rcc=self.rcc,
            division_id=self.division_id,
            office_id=self.office_id,
            purpose=self.purpose,
            requested_by=self.requested_by,
            requested_by_name=self.requested_by_name,
            status=RisStatus(self.status),
            items=tuple(item.to_dto() for item in self.items),
            created_at=self.created_at,
            remarks=self.remarks,
            approved_by=self.approved_by,
            approved_at=self.approved_at,
            issued_by=self.issued_by,
            received_by=self.received_by,
            completed_at=self.completed_at,
        )

    def __repr__(self) -> str:
        return f"<RisModel {self.ris_no} items={len(self.items)} status={self.status}>"


# ---------------------------------------------------------------------------
# 2. RisItemModel
# ---------------------------------------------------------------------------


class RisItemModel(TrackedBase):
    """One requested consumable."""

    __tablename__ = "requisition_issue_slip_items"

    __table_args__ = (
        UniqueConstraint("ris_id", "asset_id", name="uq_ris_items_asset"),
        Index("idx_ris_items_ris_id", "ris_id"),
    )

    ris_id: Mapped[UUID] = mapped_column(
        ForeignKey("requisition_issue_slips.id"), nullable=False,
    )
    line_number: Mapped[int] = mapped_column(nullable=False)
    asset_id: Mapped[UUID] = mapped_column(nullable=False)
    asset_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    request_qty: Mapped[int] = mapped_column(nullable=False, default=1)
    issue_qty: Mapped[int] = mapped_column(nullable=False, default=0)
    remarks: Mapped[str] = mapped_column(Text, nullable=False, default="")

    ris: Mapped["RisModel"] = relationship(back_populates="items")

    def to_dto(self):
        from inventory_modules.ris.models import RisItem

        return RisItem(
            asset_id=self.asset_id,
            asset_name=self.asset_name,
            request_qty=self.request_qty,
            issue_qty=self.issue_qty,
            remarks=self.remarks,
        )

    def __repr__(self) -> str:
        return (
            f"<RisItemModel line={self.line_number} "
            f"request={self.request_qty} issue={self.issue_qty}>"
        )


# ---------------------------------------------------------------------------
# 3. RisSerialNoModel
# ---------------------------------------------------------------------------


class RisSerialNoModel(TrackedBase):
    """Report serial number handed out for a RIS."""

    __tablename__ = "requisition_issue_slip_serial_nos"

    __table_args__ = (
        UniqueConstraint("serial_no", name="uq_ris_serial_nos_serial_no"),
        Index("idx_ris_serial_nos_ris_id", "ris_id"),
    )

    ris_id: Mapped[UUID] = mapped_column(
        ForeignKey("requisition_issue_slips.id"), nullable=False,
    )
    serial_no: Mapped[str] = mapped_column(String(100), nullable=False)

    def to_dto(self):
        from inventory_modules.ris.models import RisSerialNo

        return RisSerialNo(
            id=self.id,
            ris_id=self.ris_id,
            serial_no=self.serial_no,
            created_at=self.created_at,
        )
