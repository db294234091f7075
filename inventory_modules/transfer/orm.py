"""
Module: inventory_modules.transfer.orm
Responsibility: SQLAlchemy persistence for transfer reports and their items.

Architecture position: Modules > Transfer > ORM.  Inherits from TrackedBase.

Invariants enforced:
    - transfer_no is unique per report type.
    - Items keep request order; the same pool entry may appear on several
      lines, one per unit taken from the pool.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inventory_kernel.db.base import TrackedBase


# ---------------------------------------------------------------------------
# 1. TransferModel
# ---------------------------------------------------------------------------


class TransferModel(TrackedBase):
    """
    ORM model for transfer reports.

    Maps to: inventory_modules.transfer.models.Transfer.
    """

    __tablename__ = "transfers"

    __table_args__ = (
        UniqueConstraint("type", "transfer_no", name="uq_transfers_type_transfer_no"),
        Index("idx_transfers_status", "status"),
    )

    type: Mapped[str] = mapped_column(String(40), nullable=False)
    transfer_no: Mapped[str] = mapped_column(String(100), nullable=False)
    entity_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    fund_cluster: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    transfer_from: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    transfer_to: Mapped[str] = mapped_column(String(200), nullable=False)
    to_office_id: Mapped[UUID | None] = mapped_column(nullable=True)
    division_id: Mapped[UUID | None] = mapped_column(nullable=True)
    transfer_reason: Mapped[str] = mapped_column(Text, nullable=False, default="")
    transfer_type: Mapped[str] = mapped_column(String(20), nullable=False)

    approved_by: Mapped[UUID | None] = mapped_column(nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(nullable=True)
    issued_by: Mapped[UUID | None] = mapped_column(nullable=True)
    received_by_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    received_by_designation: Mapped[str] = mapped_column(
        String(200), nullable=False, default="",
    )
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")

    items: Mapped[list["TransferItemModel"]] = relationship(
        back_populates="transfer",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="TransferItemModel.line_number",
    )

    def to_dto(self):
        """Convert ORM model to frozen Transfer DTO."""
        from inventory_modules.transfer.models import (
            Transfer,
            TransferReportType,
            TransferStatus,
            TransferType,
        )

        return Transfer(
            id=self.id,
            type=TransferReportType(self.type),
            transfer_no=self.transfer_no,
            entity_name=self.entity_name,
            fund_cluster=self.fund_cluster,
            transfer_from=self.transfer_from,
            transfer_to=self.transfer_to,
            transfer_reason=self.transfer_reason,
            transfer_type=TransferType(self.transfer_type),
            status=TransferStatus(self.status),
            items=tuple(item.to_dto() for item in self.items),
            created_at=self.created_at,
            division_id=self.division_id,
            to_office_id=self.to_office_id,
            approved_by=self.approved_by,
            approved_at=self.approved_at,
            issued_by=self.issued_by,
            received_by_name=self.received_by_name,
            received_by_designation=self.received_by_designation,
            completed_at=self.completed_at,
        )

    def __repr__(self) -> str:
        return (
            f"<TransferModel {self.type} {self.transfer_no} "
            f"items={len(self.items)} status={self.status}>"
        )


# ---------------------------------------------------------------------------
# 2. TransferItemModel
# ---------------------------------------------------------------------------


class TransferItemModel(TrackedBase):
    """One unit on a transfer report."""

    __tablename__ = "transfer_items"

    __table_args__ = (Index("idx_transfer_items_transfer_id", "transfer_id"),)

    transfer_id: Mapped[UUID] = mapped_column(ForeignKey("transfers.id"), nullable=False)
    line_number: Mapped[int] = mapped_column(nullable=False)
    stock_id: Mapped[UUID] = mapped_column(nullable=False)
    asset_id: Mapped[UUID] = mapped_column(nullable=False)
    item_no: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    serial_no: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    transfer: Mapped["TransferModel"] = relationship(back_populates="items")

    def to_dto(self):
        from inventory_modules.transfer.models import TransferItem

        return TransferItem(
            stock_id=self.stock_id,
            asset_id=self.asset_id,
            item_no=self.item_no,
            serial_no=self.serial_no,
        )

    def __repr__(self) -> str:
        return f"<TransferItemModel line={self.line_number} stock={self.stock_id}>"
