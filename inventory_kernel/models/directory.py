"""
Directory tables (offices and users).

Directory management lives outside the inventory core; these tables back
``SqlDirectoryService`` so that office and personnel references can be
validated and display names resolved inside the same database.
"""

from uuid import UUID

from sqlalchemy import Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from inventory_kernel.db.base import TrackedBase


class OfficeModel(TrackedBase):
    __tablename__ = "offices"

    __table_args__ = (
        UniqueConstraint("name", name="uq_offices_name"),
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    division_id: Mapped[UUID | None] = mapped_column(nullable=True)

    def __repr__(self) -> str:
        return f"<OfficeModel(id={self.id!r}, name={self.name!r})>"


class UserModel(TrackedBase):
    __tablename__ = "users"

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        Index("idx_users_office", "office_id"),
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(200), nullable=False)
    designation: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    office_id: Mapped[UUID | None] = mapped_column(nullable=True)
    division_id: Mapped[UUID | None] = mapped_column(nullable=True)

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id!r}, email={self.email!r})>"
