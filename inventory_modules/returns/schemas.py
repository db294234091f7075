"""Request DTOs for returns."""

from __future__ import annotations

from uuid import UUID

from pydantic import Field, field_validator

from inventory_kernel.domain.conditions import AssetType
from inventory_kernel.domain.dtos import RequestModel
from inventory_modules.returns.models import StockRemarks


class ReturnItemRequest(RequestModel):
    stock_id: UUID
    stock_remarks: StockRemarks


class ReturnCreateRequest(RequestModel):
    type: AssetType
    returned_by: UUID
    items: list[ReturnItemRequest] = Field(min_length=1)

    @field_validator("type")
    @classmethod
    def _property_only(cls, value: AssetType) -> AssetType:
        if not value.is_unit_tracked:
            raise ValueError("returns are for SEP and PPE only")
        return value

    @field_validator("items")
    @classmethod
    def _distinct_stocks(cls, items: list[ReturnItemRequest]) -> list[ReturnItemRequest]:
        if len({item.stock_id for item in items}) != len(items):
            raise ValueError("a unit can only be returned once per document")
        return items


class ReturnApproveRequest(RequestModel):
    approved_by: UUID


class ReturnCompleteRequest(RequestModel):
    received_by: UUID
