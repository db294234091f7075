"""
Module: inventory_modules.issue_slip.orm
Responsibility: SQLAlchemy persistence for issue slips.

Architecture position: Modules > Issue Slip > ORM.  Inherits from
    TrackedBase (inventory_kernel.db.base).  References assets and users by
    UUID columns with no foreign key, so directory rows can live elsewhere.

Invariants enforced:
    - issue_slip_no is unique.
    - Serial numbers are stored as a JSON array in ``serial_numbers_json``.
    - Enum fields are stored as their string values.
"""

import json
from datetime import datetime
from uuid import UUID

from sqlalchemy import Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from inventory_kernel.db.base import TrackedBase


class IssueSlipModel(TrackedBase):
    """
    ORM model for issue slips.

    Maps to: inventory_modules.issue_slip.models.IssueSlip.
    """

    __tablename__ = "issue_slips"

    __table_args__ = (
        UniqueConstraint("issue_slip_no", name="uq_issue_slips_no"),
        Index("idx_issue_slips_asset", "asset_id"),
        Index("idx_issue_slips_status", "status"),
    )

    type: Mapped[str] = mapped_column(String(10), nullable=False)
    slip_class: Mapped[str] = mapped_column(String(10), nullable=False)
    issue_slip_no: Mapped[str] = mapped_column(String(100), nullable=False)
    entity_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    fund_cluster: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    asset_id: Mapped[UUID] = mapped_column(nullable=False)
    asset_name: Mapped[str] = mapped_column(String(200), nullable=False)
    quantity: Mapped[int] = mapped_column(nullable=False)
    estimated_useful_life: Mapped[int | None] = mapped_column(nullable=True)
    serial_numbers_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    remarks: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Filled in when the slip is issued
    item_no: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    issue_item_no: Mapped[str] = mapped_column(String(50), nullable=False, default="")

    issued_by: Mapped[UUID | None] = mapped_column(nullable=True)
    issued_by_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    received_by: Mapped[UUID] = mapped_column(nullable=False)
    received_by_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    received_at: Mapped[datetime | None] = mapped_column(nullable=True)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")

    @property
    def serial_numbers(self) -> list[str]:
        return json.loads(self.serial_numbers_json or "[]")

    @serial_numbers.setter
    def serial_numbers(self, values: list[str]) -> None:
        self.serial_numbers_json = json.dumps(list(values))

    def to_dto(self):
        """Convert ORM model to frozen IssueSlip DTO."""
        from inventory_modules.issue_slip.models import (
            IssueSlip,
            IssueSlipStatus,
            IssueSlipType,
            SlipClass,
        )
        return IssueSlip(
            id=self.id,
            type=IssueSlipType(self.type),
            slip_class=SlipClass(self.slip_class),
            issue_slip_no=self.issue_slip_no,
            entity_name=self.entity_name,
            fund_cluster=self.fund_cluster,
            asset_id=self.asset_id,
            asset_name=self.asset_name,
            quantity=self.quantity,
            estimated_useful_life=self.estimated_useful_life,
            serial_numbers=tuple(self.serial_numbers),
            remarks=self.remarks,
            received_by=self.received_by,
            received_by_name=self.received_by_name,
            status=IssueSlipStatus(self.status),
            created_at=self.created_at,
            item_no=self.item_no,
            issue_item_no=self.issue_item_no,
            issued_by=self.issued_by,
            issued_by_name=self.issued_by_name,
            received_at=self.received_at,
        )

    def __repr__(self) -> str:
        return (
            f"<IssueSlipModel {self.issue_slip_no} asset={self.asset_id} "
            f"qty={self.quantity} status={self.status}>"
        )
