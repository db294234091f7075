"""Request DTOs for transfer reports."""

from __future__ import annotations

from uuid import UUID

from pydantic import Field

from inventory_kernel.domain.dtos import RequestModel
from inventory_modules.transfer.models import TransferReportType, TransferType


class TransferItemRequest(RequestModel):
    stock_id: UUID


class TransferCreateRequest(RequestModel):
    """
    ``from``/``to`` are free-text labels.  ``to_office_id`` is set when the
    receiving side is an office in the directory; the ledger entries then
    carry it.
    """
    type: TransferReportType
    transfer_from: str = Field("", alias="from")
    transfer_to: str = Field(alias="to", min_length=1)
    to_office_id: UUID | None = None
    division_id: UUID | None = None
    transfer_reason: str = ""
    transfer_type: TransferType
    # Only on-hand pool entries may be listed more than once.
    items: list[TransferItemRequest] = Field(min_length=1)


class TransferApproveRequest(RequestModel):
    approved_by: UUID


class TransferCompleteRequest(RequestModel):
    issued_by: UUID
    received_by_name: str = Field(min_length=1)
    received_by_designation: str = ""
