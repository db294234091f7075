"""Request DTOs for maintenance requests."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from inventory_kernel.domain.dtos import RequestModel


class MaintenanceCreateRequest(RequestModel):
    stock_id: UUID
    assignee_id: UUID
    issue: str = Field(min_length=1)
    type: str = ""
    attachment: str = ""
    remarks: str = ""


class MaintenanceScheduleRequest(RequestModel):
    scheduled_at: datetime


class MaintenanceRescheduleRequest(RequestModel):
    scheduled_at: datetime
    reschedule_reason: str = Field(min_length=1)


class MaintenanceCompleteRequest(RequestModel):
    completed_by: UUID
    remarks: str | None = None


class MaintenanceCancelRequest(RequestModel):
    remarks: str = ""
