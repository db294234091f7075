"""Request DTOs for issue slips."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from inventory_kernel.domain.dtos import RequestModel


class IssueSlipCreateRequest(RequestModel):
    asset_id: UUID
    quantity: int = Field(ge=1)
    received_by: UUID
    estimated_useful_life: int | None = Field(None, ge=0)
    serial_numbers: list[str] = Field(default_factory=list)
    remarks: str = ""


class IssueSlipUpdateRequest(RequestModel):
    """Edits allowed while the slip is still pending."""
    quantity: int | None = Field(None, ge=1)
    received_by: UUID | None = None
    estimated_useful_life: int | None = Field(None, ge=0)
    serial_numbers: list[str] | None = None
    remarks: str | None = None


class IssueSlipIssueRequest(RequestModel):
    issued_by: UUID
    received_at: datetime | None = None
