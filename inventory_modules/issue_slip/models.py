"""
Issue Slip Domain Models (``inventory_modules.issue_slip.models``).

Responsibility
--------------
Status enum, slip classification and the frozen ``IssueSlip`` DTO returned
by ``IssueSlipService``.

Slip classes
------------
SEP units go out on an Inventory Custodian Slip (ICS), classed SPLV up to
the low-value ceiling and SPHV up to the high-value ceiling.  PPE units go
out on a Property Acknowledgement Receipt (PAR) once the unit cost is above
the high-value ceiling.  Costs outside those bands cannot be issued.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from inventory_config.schema import SlipCeilings
from inventory_kernel.domain.conditions import AssetType
from inventory_kernel.exceptions import BadRequestError


class IssueSlipStatus(str, Enum):
    PENDING = "pending"
    ISSUED = "issued"


class IssueSlipType(str, Enum):
    ICS = "ICS"
    PAR = "PAR"


class SlipClass(str, Enum):
    """Cost class; also the prefix of the slip number."""
    SPLV = "SPLV"  # semi-expendable, low value
    SPHV = "SPHV"  # semi-expendable, high value
    PAR = "PAR"

    @property
    def slip_type(self) -> IssueSlipType:
        return IssueSlipType.PAR if self is SlipClass.PAR else IssueSlipType.ICS


def classify_slip(
    asset_type: AssetType,
    cost: Decimal,
    ceilings: SlipCeilings,
) -> SlipClass:
    """
    Pick the slip class for one unit of ``cost``.

    Raises:
        BadRequestError: consumables, or a cost outside the asset type's band.
    """
    if asset_type is AssetType.SEP:
        if cost <= ceilings.sep_low_value:
            return SlipClass.SPLV
        if cost <= ceilings.sep_high_value:
            return SlipClass.SPHV
        raise BadRequestError(
            f"SEP cost {cost} is above {ceilings.sep_high_value}; issue it as PPE."
        )
    if asset_type is AssetType.PPE:
        if cost > ceilings.sep_high_value:
            return SlipClass.PAR
        raise BadRequestError(
            f"PPE cost {cost} must be above {ceilings.sep_high_value}."
        )
    raise BadRequestError("Issue slips are only for SEP and PPE assets.")


@dataclass(frozen=True)
class IssueSlip:
    """An issue slip (ICS or PAR) for units of one asset."""
    id: UUID
    type: IssueSlipType
    slip_class: SlipClass
    issue_slip_no: str
    entity_name: str
    fund_cluster: str
    asset_id: UUID
    asset_name: str
    quantity: int
    estimated_useful_life: int | None
    serial_numbers: tuple[str, ...]
    remarks: str
    received_by: UUID
    received_by_name: str
    status: IssueSlipStatus
    created_at: datetime
    item_no: str = ""
    issue_item_no: str = ""
    issued_by: UUID | None = None
    issued_by_name: str = ""
    received_at: datetime | None = None
