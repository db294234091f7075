"""Request DTOs for requisition and issue slips."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from inventory_kernel.domain.dtos import RequestModel


def _check_distinct_assets(asset_ids: list[UUID]) -> None:
    if len(set(asset_ids)) != len(asset_ids):
        raise ValueError("an asset can only appear once per RIS")


class RisItemRequest(RequestModel):
    asset_id: UUID
    request_qty: int = Field(1, ge=1)
    remarks: str = ""


class RisCreateRequest(RequestModel):
    purpose: str = ""
    requested_by: UUID
    items: list[RisItemRequest] = Field(min_length=1)

    @field_validator("items")
    @classmethod
    def _distinct_assets(cls, items: list[RisItemRequest]) -> list[RisItemRequest]:
        _check_distinct_assets([item.asset_id for item in items])
        return items


class RisItemUpdate(RequestModel):
    """Changes to an existing line; the requested quantity is never edited."""
    asset_id: UUID
    issue_qty: int | None = Field(None, ge=0)
    remarks: str | None = None


class RisUpdateRequest(RequestModel):
    purpose: str | None = None
    remarks: str | None = None
    items: list[RisItemUpdate] | None = None

    @field_validator("items")
    @classmethod
    def _distinct_assets(cls, items: list[RisItemUpdate] | None) -> list[RisItemUpdate] | None:
        if items is not None:
            _check_distinct_assets([item.asset_id for item in items])
        return items


class RisReviewRequest(RequestModel):
    """Evaluated issue quantities, sent when the RIS goes up for review."""
    items: list[RisItemUpdate] = Field(min_length=1)

    @field_validator("items")
    @classmethod
    def _distinct_assets(cls, items: list[RisItemUpdate]) -> list[RisItemUpdate]:
        _check_distinct_assets([item.asset_id for item in items])
        return items


class RisApproveRequest(RequestModel):
    approved_by: UUID
    approved_at: datetime | None = None


class RisIssueRequest(RequestModel):
    issued_by: UUID
    received_by: UUID


class RisCancelRequest(RequestModel):
    remarks: str = ""
