"""
Transfer Domain Models (``inventory_modules.transfer.models``).

Inventory (SEP) and property (PPE) transfer reports move units to another
office or outside the division.  Units still in the on-hand pool leave it
when the transfer completes; units already out with an office are only
relabelled ``transferred``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from inventory_kernel.domain.conditions import AssetType


class TransferStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    COMPLETED = "completed"


class TransferReportType(str, Enum):
    INVENTORY_TRANSFER_REPORT = "inventory-transfer-report"
    PROPERTY_TRANSFER_REPORT = "property-transfer-report"

    @property
    def asset_type(self) -> AssetType:
        if self is TransferReportType.PROPERTY_TRANSFER_REPORT:
            return AssetType.PPE
        return AssetType.SEP


class TransferType(str, Enum):
    DONATION = "donation"
    RELOCATE = "relocate"
    REASSIGNMENT = "reassignment"
    OTHERS = "others"


@dataclass(frozen=True)
class TransferItem:
    stock_id: UUID
    asset_id: UUID
    item_no: str
    serial_no: str = ""


@dataclass(frozen=True)
class Transfer:
    id: UUID
    type: TransferReportType
    transfer_no: str
    entity_name: str
    fund_cluster: str
    transfer_from: str
    transfer_to: str
    transfer_reason: str
    transfer_type: TransferType
    status: TransferStatus
    items: tuple[TransferItem, ...]
    created_at: datetime
    division_id: UUID | None = None
    to_office_id: UUID | None = None
    approved_by: UUID | None = None
    approved_at: datetime | None = None
    issued_by: UUID | None = None
    received_by_name: str = ""
    received_by_designation: str = ""
    completed_at: datetime | None = None
