"""Request DTOs for waste materials reports."""

from __future__ import annotations

from uuid import UUID

from pydantic import Field, field_validator, model_validator

from inventory_kernel.domain.dtos import RequestModel
from inventory_modules.waste.models import DisposalType


class WasteItemRequest(RequestModel):
    stock_id: UUID
    type: DisposalType
    remarks: str = ""
    transferred_to: str = ""

    @model_validator(mode="after")
    def _recipient_when_transferred(self) -> "WasteItemRequest":
        if self.type.needs_recipient and not self.transferred_to:
            raise ValueError("transferred_to is required for transferred-without-cost")
        return self


class WasteCreateRequest(RequestModel):
    place_of_storage: str = ""
    certified_by: UUID | None = None
    items: list[WasteItemRequest] = Field(min_length=1)

    @field_validator("items")
    @classmethod
    def _distinct_stocks(cls, items: list[WasteItemRequest]) -> list[WasteItemRequest]:
        if len({item.stock_id for item in items}) != len(items):
            raise ValueError("a unit can only appear once per report")
        return items


class WasteCompleteRequest(RequestModel):
    disposal_approved_by: UUID
    witnessed_by_name: str = ""
