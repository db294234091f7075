"""
Module: inventory_modules.returns.orm
Responsibility: SQLAlchemy persistence for returns and their items.

Architecture position: Modules > Returns > ORM.  Inherits from TrackedBase.
    Items live in a child table; ``stock_id`` points at the ledger entry
    the unit was returned from (no foreign key, the ledger is append-only
    and never joined for writes).

Invariants enforced:
    - return_no is unique.
    - One row per returned unit.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inventory_kernel.db.base import TrackedBase


# ---------------------------------------------------------------------------
# 1. ReturnModel
# ---------------------------------------------------------------------------


class ReturnModel(TrackedBase):
    """
    ORM model for returns.

    Maps to: inventory_modules.returns.models.Return.
    """

    __tablename__ = "returns"

    __table_args__ = (
        UniqueConstraint("type", "return_no", name="uq_returns_type_return_no"),
        Index("idx_returns_status", "status"),
        Index("idx_returns_office", "office_id"),
    )

    type: Mapped[str] = mapped_column(String(10), nullable=False)
    return_no: Mapped[str] = mapped_column(String(100), nullable=False)
    entity_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    fund_cluster: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    returned_by: Mapped[UUID] = mapped_column(nullable=False)
    returned_by_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    office_id: Mapped[UUID] = mapped_column(nullable=False)
    office_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")

    approved_by: Mapped[UUID | None] = mapped_column(nullable=True)
    approved_by_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    approved_at: Mapped[datetime | None] = mapped_column(nullable=True)

    received_by: Mapped[UUID | None] = mapped_column(nullable=True)
    received_by_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")

    items: Mapped[list["ReturnItemModel"]] = relationship(
        back_populates="return_doc",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ReturnItemModel.line_number",
    )

    def to_dto(self):
        """Convert ORM model to frozen Return DTO."""
        from inventory_kernel.domain.conditions import AssetType
        from inventory_modules.returns.models import Return, ReturnStatus

        return Return(
            id=self.id,
            type=AssetType(self.type),
            return_no=self.return_no,
            entity_name=self.entity_name,
            fund_cluster=self.fund_cluster,
            returned_by=self.returned_by,
            returned_by_name=self.returned_by_name,
            office_id=self.office_id,
            office_name=self.office_name,
            status=ReturnStatus(self.status),
            items=tuple(item.to_dto() for item in self.items),
            created_at=self.created_at,
            approved_by=self.approved_by,
            approved_by_name=self.approved_by_name,
            approved_at=self.approved_at,
            received_by=self.received_by,
            received_by_name=self.received_by_name,
            completed_at=self.completed_at,
        )

    def __repr__(self) -> str:
        return (
            f"<ReturnModel {self.return_no} type={self.type} "
            f"items={len(self.items)} status={self.status}>"
        )


# ---------------------------------------------------------------------------
# 2. ReturnItemModel
# ---------------------------------------------------------------------------


class ReturnItemModel(TrackedBase):
    """One returned unit."""

    __tablename__ = "return_items"

    __table_args__ = (
        Index("idx_return_items_return_id", "return_id"),
        Index("idx_return_items_stock_id", "stock_id"),
    )

    return_id: Mapped[UUID] = mapped_column(ForeignKey("returns.id"), nullable=False)
    line_number: Mapped[int] = mapped_column(nullable=False)
    stock_id: Mapped[UUID] = mapped_column(nullable=False)
    stock_remarks: Mapped[str] = mapped_column(String(20), nullable=False)
    asset_id: Mapped[UUID] = mapped_column(nullable=False)
    item_no: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    serial_no: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    return_doc: Mapped["ReturnModel"] = relationship(back_populates="items")

    def to_dto(self):
        from inventory_modules.returns.models import ReturnItem, StockRemarks

        return ReturnItem(
            stock_id=self.stock_id,
            stock_remarks=StockRemarks(self.stock_remarks),
            asset_id=self.asset_id,
            item_no=self.item_no,
            serial_no=self.serial_no,
        )

    def __repr__(self) -> str:
        return f"<ReturnItemModel line={self.line_number} stock={self.stock_id}>"
