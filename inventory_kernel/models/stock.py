"""
Stock ledger entry model.

Append-only: one row per movement, never updated or deleted (enforced by
``inventory_kernel.db.immutability``).  The latest row per
``(asset_id, item_no)`` ordered by ``created_at`` then ``seq`` is the
authoritative condition of that unit.
"""

from uuid import UUID

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from inventory_kernel.db.base import TrackedBase


class StockEntryModel(TrackedBase):
    """One movement of stock against an asset."""

    __tablename__ = "stock_ledger_entries"

    __table_args__ = (
        UniqueConstraint("seq", name="uq_stock_ledger_entries_seq"),
        Index("idx_stock_ledger_asset_item", "asset_id", "item_no"),
        Index("idx_stock_ledger_reference", "reference"),
        Index("idx_stock_ledger_office", "office_id"),
    )

    # Global insertion order, allocated from the "stock_ledger" sequence
    seq: Mapped[int] = mapped_column(nullable=False)

    asset_id: Mapped[UUID] = mapped_column(ForeignKey("assets.id"), nullable=False)
    asset_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")

    # Unit number for SEP/PPE ("3"), receipt range ("1-10"), blank for consumables
    item_no: Mapped[str] = mapped_column(String(50), nullable=False, default="")

    ins: Mapped[int] = mapped_column(nullable=False, default=0)
    outs: Mapped[int] = mapped_column(nullable=False, default=0)

    # Asset quantity after this movement
    balance: Mapped[int] = mapped_column(nullable=False, default=0)

    condition: Mapped[str] = mapped_column(String(30), nullable=False)
    initial_condition: Mapped[str | None] = mapped_column(String(30), nullable=True)

    # Office holding the unit; the directory is external, so no FK
    office_id: Mapped[UUID | None] = mapped_column(nullable=True)
    office_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")

    # Human-readable number of the triggering document (join key, not FK)
    reference: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    serial_no: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    attachment: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    number_of_days_to_consume: Mapped[int | None] = mapped_column(nullable=True)
    remarks: Mapped[str] = mapped_column(String(1000), nullable=False, default="")

    def __repr__(self) -> str:
        return (
            f"<StockEntryModel(seq={self.seq}, asset_id={self.asset_id!r}, "
            f"item_no={self.item_no!r}, condition={self.condition!r}, "
            f"ins={self.ins}, outs={self.outs}, balance={self.balance})>"
        )
