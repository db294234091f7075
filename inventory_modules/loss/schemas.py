"""Request DTOs for loss reports."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from inventory_kernel.domain.conditions import AssetType
from inventory_kernel.domain.dtos import RequestModel
from inventory_modules.loss.models import LossStatus


class LossItemRequest(RequestModel):
    stock_id: UUID
    remarks: str = ""


class LossCreateRequest(RequestModel):
    type: AssetType
    loss_status: LossStatus
    supervisor_id: UUID
    items: list[LossItemRequest] = Field(min_length=1)
    description: str = ""
    circumstances: str = ""
    police_notified: bool = False
    police_station: str = ""
    police_report_date: date | None = None
    attachment: str = ""
    government_id: str = ""
    government_id_no: str = ""
    government_id_date: date | None = None

    @field_validator("type")
    @classmethod
    def _property_only(cls, value: AssetType) -> AssetType:
        if not value.is_unit_tracked:
            raise ValueError("loss reports are for SEP and PPE only")
        return value

    @model_validator(mode="after")
    def _distinct_stocks(self) -> "LossCreateRequest":
        if len({item.stock_id for item in self.items}) != len(self.items):
            raise ValueError("a unit can only appear once per report")
        return self


class LossApproveRequest(RequestModel):
    supervisor_id: UUID


class LossCompleteRequest(RequestModel):
    remarks: str = ""
