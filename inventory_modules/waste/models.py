"""
Waste Domain Models (``inventory_modules.waste.models``).

A waste materials report lists units already marked ``for-disposal`` and how
each one is disposed of.  The report only records the decision; the ledger
already shows the units out of circulation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class WasteStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class DisposalType(str, Enum):
    DESTROYED = "destroyed"
    SOLD_AT_PRIVATE_SALE = "sold-at-private-sale"
    SOLD_AT_PUBLIC_AUCTION = "sold-at-public-auction"
    TRANSFERRED_WITHOUT_COST = "transferred-without-cost"

    @property
    def needs_recipient(self) -> bool:
        return self is DisposalType.TRANSFERRED_WITHOUT_COST


@dataclass(frozen=True)
class WasteItem:
    stock_id: UUID
    asset_id: UUID
    item_no: str
    serial_no: str
    type: DisposalType
    remarks: str = ""
    transferred_to: str = ""


@dataclass(frozen=True)
class Waste:
    id: UUID
    waste_no: str
    entity_name: str
    fund_cluster: str
    place_of_storage: str
    status: WasteStatus
    items: tuple[WasteItem, ...]
    created_at: datetime
    certified_by: UUID | None = None
    certified_by_name: str = ""
    disposal_approved_by: UUID | None = None
    disposal_approved_by_name: str = ""
    witnessed_by_name: str = ""
    completed_at: datetime | None = None
