"""
Return Domain Models (``inventory_modules.returns.models``).

A return hands issued SEP/PPE units back, each marked for reissue (back
into the on-hand pool) or for disposal (out of circulation).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from inventory_kernel.domain.conditions import AssetType, StockCondition


class ReturnStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    COMPLETED = "completed"


class StockRemarks(str, Enum):
    """What the returning office asks to happen to a unit."""
    FOR_REISSUE = "for-reissue"
    FOR_DISPOSAL = "for-disposal"

    @property
    def condition(self) -> StockCondition:
        """Ledger condition written when the return completes."""
        if self is StockRemarks.FOR_REISSUE:
            return StockCondition.RETURNED
        return StockCondition.FOR_DISPOSAL


@dataclass(frozen=True)
class ReturnItem:
    stock_id: UUID
    stock_remarks: StockRemarks
    asset_id: UUID
    item_no: str
    serial_no: str = ""


@dataclass(frozen=True)
class Return:
    """A return of issued units (SEP or PPE)."""
    id: UUID
    type: AssetType
    return_no: str
    entity_name: str
    fund_cluster: str
    returned_by: UUID
    returned_by_name: str
    office_id: UUID
    office_name: str
    status: ReturnStatus
    items: tuple[ReturnItem, ...]
    created_at: datetime
    approved_by: UUID | None = None
    approved_by_name: str = ""
    approved_at: datetime | None = None
    received_by: UUID | None = None
    received_by_name: str = ""
    completed_at: datetime | None = None
