"""Persistence models for the inventory kernel."""

from inventory_kernel.models.asset import (
    AssetModel,
    AssetStatus,
    ModeOfAcquisition,
    ProcurementType,
)
from inventory_kernel.models.directory import OfficeModel, UserModel
from inventory_kernel.models.stock import StockEntryModel

__all__ = [
    "AssetModel",
    "AssetStatus",
    "ModeOfAcquisition",
    "ProcurementType",
    "OfficeModel",
    "UserModel",
    "StockEntryModel",
]
