"""
Maintenance Domain Models (``inventory_modules.maintenance.models``).

A maintenance request for one unit, assigned to a user.  Requests are
scheduled, rescheduled and completed or cancelled; none of it moves stock.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class MaintenanceStatus(str, Enum):
    PENDING = "pending"
    CANCELLED = "cancelled"
    SCHEDULED = "scheduled"
    RESCHEDULED = "rescheduled"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Maintenance:
    id: UUID
    code: str
    stock_id: UUID
    asset_id: UUID
    name: str
    assignee_id: UUID
    office_name: str
    issue: str
    status: MaintenanceStatus
    created_at: datetime
    type: str = ""
    attachment: str = ""
    remarks: str = ""
    reschedule_reason: str = ""
    scheduled_at: datetime | None = None
    completed_by: UUID | None = None
    completed_at: datetime | None = None
