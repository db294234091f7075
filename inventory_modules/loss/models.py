"""
Loss Domain Models (``inventory_modules.loss.models``).

A Report of Lost, Stolen, Damaged or Destroyed property (RLSDDSP for SEP,
RLSDDP for PPE).  The unit was already taken out of the on-hand pool when it
was issued, so completing a loss records its final condition without
changing the asset quantity.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from uuid import UUID

from inventory_kernel.domain.conditions import AssetType, StockCondition


class LossReportStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    COMPLETED = "completed"


class LossType(str, Enum):
    RLSDDSP = "RLSDDSP"
    RLSDDP = "RLSDDP"

    @classmethod
    def for_asset_type(cls, asset_type: AssetType) -> "LossType":
        if asset_type is AssetType.PPE:
            return cls.RLSDDP
        return cls.RLSDDSP

    @property
    def asset_type(self) -> AssetType:
        return AssetType.PPE if self is LossType.RLSDDP else AssetType.SEP


class LossStatus(str, Enum):
    """What happened to the units."""
    LOST = "lost"
    STOLEN = "stolen"
    DAMAGED = "damaged"
    DESTROYED = "destroyed"

    @property
    def condition(self) -> StockCondition:
        return StockCondition(self.value)


@dataclass(frozen=True)
class LossItem:
    stock_id: UUID
    asset_id: UUID
    item_no: str
    serial_no: str
    office_id: UUID | None
    remarks: str = ""


@dataclass(frozen=True)
class Loss:
    """A loss report over one or more issued units."""
    id: UUID
    type: LossType
    loss_no: str
    entity_name: str
    fund_cluster: str
    loss_status: LossStatus
    office_name: str
    supervisor_id: UUID
    supervisor_name: str
    status: LossReportStatus
    items: tuple[LossItem, ...]
    created_at: datetime
    description: str = ""
    circumstances: str = ""
    police_notified: bool = False
    police_station: str = ""
    police_report_date: date | None = None
    attachment: str = ""
    government_id: str = ""
    government_id_no: str = ""
    government_id_date: date | None = None
    supervisor_date: datetime | None = None
    completed_at: datetime | None = None
