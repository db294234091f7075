"""
RIS Domain Models (``inventory_modules.ris.models``).

A Requisition and Issue Slip asks for consumables on behalf of an office.
Supply evaluates how much of each request can be issued, a reviewer checks
it, an approver signs it, and issuing moves the stock out in one batch.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class RisStatus(str, Enum):
    FOR_EVALUATION = "for-evaluation"
    EVALUATING = "evaluating"
    FOR_REVIEW = "for-review"
    PENDING = "pending"
    ISSUED = "issued"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class RisItem:
    asset_id: UUID
    asset_name: str
    request_qty: int
    issue_qty: int
    remarks: str = ""


@dataclass(frozen=True)
class Ris:
    id: UUID
    ris_no: str
    entity_name: str
    fund_cluster: str
    rcc: str
    division_id: UUID | None
    office_id: UUID
    purpose: str
    requested_by: UUID
    requested_by_name: str
    status: RisStatus
    items: tuple[RisItem, ...]
    created_at: datetime
    remarks: str = ""
    approved_by: UUID | None = None
    approved_at: datetime | None = None
    issued_by: UUID | None = None
    received_by: UUID | None = None
    completed_at: datetime | None = None

    @property
    def total_issue_qty(self) -> int:
        return sum(item.issue_qty for item in self.items)


@dataclass(frozen=True)
class RisSerialNo:
    """Report serial number allocated to a RIS when it is printed."""
    id: UUID
    ris_id: UUID
    serial_no: str
    created_at: datetime
