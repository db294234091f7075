"""
Asset model.

An asset is a catalog item (consumable, SEP or PPE).  Its ``quantity`` is a
cached aggregate of the stock ledger, maintained only by the ledger write
path inside the same unit of work as the entry that moves it.
"""

from decimal import Decimal

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from inventory_kernel.db.base import SoftDeleteMixin, TrackedBase
from inventory_kernel.domain.conditions import (
    AssetStatus,
    ModeOfAcquisition,
    ProcurementType,
)

__all__ = ["AssetModel", "AssetStatus", "ModeOfAcquisition", "ProcurementType"]


class AssetModel(SoftDeleteMixin, TrackedBase):
    """
    Catalog item with a cached on-hand quantity.

    For SEP/PPE the property-number attributes (``prop_*``) derive the stock
    number; consumables get a dated stock number instead.
    """

    __tablename__ = "assets"

    __table_args__ = (
        Index("idx_assets_type_name", "type", "name"),
        Index("idx_assets_stock_number", "stock_number"),
    )

    # consumable | SEP | PPE
    type: Mapped[str] = mapped_column(String(20), nullable=False)

    entity_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    fund_cluster: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    stock_number: Mapped[str] = mapped_column(String(150), nullable=False, default="")

    # Consumables only
    reorder_point: Mapped[str] = mapped_column(String(50), nullable=False, default="")

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(String(1000), nullable=False, default="")
    unit_of_measurement: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    article: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    cost: Mapped[Decimal | None] = mapped_column(nullable=True)

    # Issuance ceiling for SEP/PPE (units ever numbered never exceed it)
    initial_qty: Mapped[int] = mapped_column(nullable=False, default=0)

    # Cache of the ledger; written only by StockLedgerService
    quantity: Mapped[int] = mapped_column(nullable=False, default=0)

    # Property-number attributes (SEP/PPE)
    prop_year: Mapped[str] = mapped_column(String(10), nullable=False, default="")
    prop_property_code: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    prop_serial_number: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    prop_quantity: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    prop_location: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    prop_counter: Mapped[str] = mapped_column(String(20), nullable=False, default="")

    mode_of_acquisition: Mapped[str] = mapped_column(String(30), nullable=False, default="")
    procurement_type: Mapped[str] = mapped_column(String(30), nullable=False, default="")
    supplier: Mapped[str] = mapped_column(String(200), nullable=False, default="")

    # Asset-level condition label (SEP/PPE)
    condition: Mapped[str] = mapped_column(String(30), nullable=False, default="")

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=AssetStatus.ACTIVE.value,
    )
    @property
    def total_issued(self) -> int:
        """Units ever numbered out of the initial allotment (derived, never stored)."""
        return max(0, self.initial_qty - self.quantity)

    def __repr__(self) -> str:
        return (
            f"<AssetModel(id={self.id!r}, type={self.type!r}, name={self.name!r}, "
            f"quantity={self.quantity})>"
        )
