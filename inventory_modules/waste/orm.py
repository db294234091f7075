"""
Module: inventory_modules.waste.orm
Responsibility: SQLAlchemy persistence for waste materials reports.

Architecture position: Modules > Waste > ORM.  Inherits from TrackedBase.

Invariants enforced:
    - waste_no is unique.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inventory_kernel.db.base import TrackedBase


# ---------------------------------------------------------------------------
# 1. WasteModel
# ---------------------------------------------------------------------------


class WasteModel(TrackedBase):
    """
    ORM model for waste materials reports.

    Maps to: inventory_modules.waste.models.Waste.
    """

    __tablename__ = "wastes"

    __table_args__ = (
        UniqueConstraint("waste_no", name="uq_wastes_waste_no"),
        Index("idx_wastes_status", "status"),
    )

    waste_no: Mapped[str] = mapped_column(String(100), nullable=False)
    entity_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    fund_cluster: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    place_of_storage: Mapped[str] = mapped_column(String(200), nullable=False, default="")

    certified_by: Mapped[UUID | None] = mapped_column(nullable=True)
    certified_by_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    disposal_approved_by: Mapped[UUID | None] = mapped_column(nullable=True)
    disposal_approved_by_name: Mapped[str] = mapped_column(
        String(200), nullable=False, default="",
    )
    witnessed_by_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")

    items: Mapped[list["WasteItemModel"]] = relationship(
        back_populates="waste",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="WasteItemModel.line_number",
    )

    def to_dto(self):
        """Convert ORM model to frozen Waste DTO."""
        from inventory_modules.waste.models import Waste, WasteStatus

        return Waste(
            id=self.id,
            waste_no=self.waste_no,
            entity_name=self.entity_name,
            fund_cluster=self.fund_cluster,
            place_of_storage=self.place_of_storage,
            status=WasteStatus(self.status),
            items=tuple(item.to_dto() for item in self.items),
            created_at=self.created_at,
            certified_by=self.certified_by,
            certified_by_name=self.certified_by_name,
            disposal_approved_by=self.disposal_approved_by,
            disposal_approved_by_name=self.disposal_approved_by_name,
            witnessed_by_name=self.witnessed_by_name,
            completed_at=self.completed_at,
        )

    def __repr__(self) -> str:
        return f"<WasteModel {self.waste_no} items={len(self.items)} status={self.status}>"


# ---------------------------------------------------------------------------
# 2. WasteItemModel
# ---------------------------------------------------------------------------


class WasteItemModel(TrackedBase):
    """One unit on a waste report and how it is disposed of."""

    __tablename__ = "waste_items"

    __table_args__ = (Index("idx_waste_items_waste_id", "waste_id"),)

    waste_id: Mapped[UUID] = mapped_column(ForeignKey("wastes.id"), nullable=False)
    line_number: Mapped[int] = mapped_column(nullable=False)
    stock_id: Mapped[UUID] = mapped_column(nullable=False)
    asset_id: Mapped[UUID] = mapped_column(nullable=False)
    item_no: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    serial_no: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    type: Mapped[str] = mapped_column(String(40), nullable=False)
    remarks: Mapped[str] = mapped_column(Text, nullable=False, default="")
    transferred_to: Mapped[str] = mapped_column(String(200), nullable=False, default="")

    waste: Mapped["WasteModel"] = relationship(back_populates="items")

    def to_dto(self):
        from inventory_modules.waste.models import DisposalType, WasteItem

        return WasteItem(
            stock_id=self.stock_id,
            asset_id=self.asset_id,
            item_no=self.item_no,
            serial_no=self.serial_no,
            type=DisposalType(self.type),
            remarks=self.remarks,
            transferred_to=self.transferred_to,
        )

    def __repr__(self) -> str:
        return f"<WasteItemModel line={self.line_number} {self.type}>"
