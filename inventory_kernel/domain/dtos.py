"""
DTOs -- boundary request shapes and read-side records.

Responsibility:
    Request DTOs are pydantic models validated once at the boundary; the
    services below them operate only on these already-validated, typed
    values.  Read-side records are frozen dataclasses converted from ORM
    rows with ``from_model`` so callers never hold live ORM instances.

Architecture position:
    Kernel > Domain.  Free of database access.  ``from_model`` converters
    are only invoked from services and selectors.

Failure modes:
    - ``parse_request`` turns a pydantic ``ValidationError`` into
      ``ValidationFailedError`` (a BadRequest) carrying the field errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Mapping, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from inventory_kernel.domain.conditions import (
    INBOUND_CONDITIONS,
    AssetType,
    ModeOfAcquisition,
    ProcurementType,
    StockCondition,
)
from inventory_kernel.exceptions import ValidationFailedError

if TYPE_CHECKING:
    from inventory_kernel.models.stock import StockEntryModel


class RequestModel(BaseModel):
    """Base for every boundary DTO: immutable, strict keys, camelCase aliases."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


RequestT = TypeVar("RequestT", bound=RequestModel)


def parse_request(model: type[RequestT], data: Mapping[str, Any]) -> RequestT:
    """
    Validate raw request data into ``model``.

    Raises:
        ValidationFailedError: with one dict per field error.
    """
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        field_errors = [
            {
                "loc": ".".join(str(part) for part in err["loc"]),
                "msg": err["msg"],
                "type": err["type"],
            }
            for err in exc.errors()
        ]
        raise ValidationFailedError(model.__name__, field_errors) from exc


# ---------------------------------------------------------------------------
# Stock ledger requests
# ---------------------------------------------------------------------------


class StockMovementRequest(RequestModel):
    """One stock movement, as accepted by ``createStock``."""

    asset_id: UUID
    item_no: str = ""
    ins: int = Field(0, ge=0)
    outs: int = Field(0, ge=0)
    balance: int | None = Field(None, ge=0, description="Transfers only")
    condition: StockCondition = StockCondition.GOOD_CONDITION
    initial_condition: StockCondition | None = None
    office_id: UUID | None = None
    office_name: str = Field("", description="Used when there is no office_id")
    reference: str = Field("", max_length=100)
    serial_no: str = Field("", max_length=100)
    attachment: str = ""
    number_of_days_to_consume: int | None = Field(None, ge=0)
    remarks: str = ""

    @model_validator(mode="after")
    def _one_sided(self) -> "StockMovementRequest":
        if self.condition is not StockCondition.TRANSFERRED and self.ins and self.outs:
            raise ValueError("ins and outs cannot both be non-zero")
        return self


class BatchItem(RequestModel):
    """One line of an issuance/return batch; ins/outs derive from condition."""

    asset_id: UUID
    qty: int = Field(ge=1)
    condition: StockCondition
    reference: str = ""
    serial_no: str = ""
    item_no: str = ""
    initial_condition: StockCondition | None = None
    balance: int | None = Field(None, ge=0)
    remarks: str = ""


class IssueBatchRequest(RequestModel):
    """``issueStockByBatch`` input."""

    office_id: UUID | None = None
    items: list[BatchItem] = Field(min_length=1)


class StockInItem(RequestModel):
    """One stock-in line for ``createStockByBatch``."""

    asset_id: UUID
    qty: int = Field(ge=1)
    condition: StockCondition = StockCondition.GOOD_CONDITION
    reference: str = ""
    attachment: str = ""
    number_of_days_to_consume: int | None = Field(None, ge=0)
    remarks: str = ""

    @model_validator(mode="after")
    def _inbound_only(self) -> "StockInItem":
        if self.condition not in INBOUND_CONDITIONS:
            raise ValueError("stock-in items must be good-condition or returned")
        return self


class StockInBatchRequest(RequestModel):
    """``createStockByBatch`` input; ``reference``/``attachment`` apply to items that leave theirs blank."""

    office_id: UUID | None = None
    reference: str = ""
    attachment: str = ""
    items: list[StockInItem] = Field(min_length=1)


# ---------------------------------------------------------------------------
# Asset registry requests
# ---------------------------------------------------------------------------


class ConsumableCreateRequest(RequestModel):
    """New consumable catalog item; stock arrives later through stock-in."""

    name: str = Field(min_length=1, max_length=200)
    description: str = ""
    unit_of_measurement: str = ""
    article: str = ""
    cost: Decimal | None = Field(None, ge=0)
    reorder_point: str = ""


class PropertyCreateRequest(RequestModel):
    """New SEP/PPE item with its initial receipt of ``quantity`` units."""

    type: AssetType
    name: str = Field(min_length=1, max_length=200)
    description: str = ""
    unit_of_measurement: str = ""
    article: str = ""
    cost: Decimal = Field(ge=0)
    quantity: int = Field(ge=1)
    year: str = ""
    property_code: str = ""
    serial_code: str = ""
    location_code: str = ""
    reference: str = ""
    attachment: str = ""
    mode_of_acquisition: ModeOfAcquisition = ModeOfAcquisition.PROCUREMENT
    procurement_type: ProcurementType | None = None
    supplier: str = ""
    office_id: UUID | None = None

    @model_validator(mode="after")
    def _property_only(self) -> "PropertyCreateRequest":
        if not self.type.is_unit_tracked:
            raise ValueError("property assets must be SEP or PPE")
        return self


class AssetUpdateRequest(RequestModel):
    """Administrative edit; unset fields are left alone."""

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    unit_of_measurement: str | None = None
    article: str | None = None
    cost: Decimal | None = Field(None, ge=0)
    reorder_point: str | None = None


class PropertyUpdateRequest(RequestModel):
    """Edit of a SEP/PPE item; property-number parts re-derive the stock number."""

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    unit_of_measurement: str | None = None
    condition: StockCondition | None = None
    year: str | None = None
    property_code: str | None = None
    serial_code: str | None = None
    location_code: str | None = None

    @property
    def changes_stock_number(self) -> bool:
        return any((self.year, self.property_code, self.serial_code, self.location_code))


# ---------------------------------------------------------------------------
# Read-side records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StockEntryRecord:
    """Immutable view of one stock ledger entry."""

    id: UUID
    seq: int
    asset_id: UUID
    asset_name: str
    item_no: str
    ins: int
    outs: int
    balance: int
    condition: StockCondition
    initial_condition: StockCondition | None
    office_id: UUID | None
    office_name: str
    reference: str
    serial_no: str
    created_at: datetime

    @classmethod
    def from_model(cls, model: "StockEntryModel") -> "StockEntryRecord":
        return cls(
            id=model.id,
            seq=model.seq,
            asset_id=model.asset_id,
            asset_name=model.asset_name,
            item_no=model.item_no,
            ins=model.ins,
            outs=model.outs,
            balance=model.balance,
            condition=StockCondition(model.condition),
            initial_condition=(
                StockCondition(model.initial_condition)
                if model.initial_condition else None
            ),
            office_id=model.office_id,
            office_name=model.office_name,
            reference=model.reference,
            serial_no=model.serial_no,
            created_at=model.created_at,
        )


@dataclass(frozen=True)
class BatchResult:
    """Outcome of one applied batch."""

    office_id: UUID | None
    entries: tuple[StockEntryRecord, ...]

    @property
    def entry_count(self) -> int:
        return len(self.entries)
