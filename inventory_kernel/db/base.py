"""
Declarative base and shared column sets for the inventory ORM models.

Every table gets a uuid4 primary key stored as text, so the same schema
runs on PostgreSQL in production and SQLite under test.  Quantities are
whole units (``int`` maps to BIGINT); only unit costs are ``Decimal``.

This module sits at the bottom of the kernel and imports nothing from
models, services, selectors or domain.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import ClassVar
from uuid import UUID, uuid4

from sqlalchemy import BigInteger, DateTime, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

__all__ = ["UUID", "UUIDString", "Base", "TrackedBase", "SoftDeleteMixin"]


class UUIDString(TypeDecorator):
    """Text-backed UUID column; Python code only ever sees ``uuid.UUID``."""

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else UUID(value)


class Base(DeclarativeBase):
    type_annotation_map: ClassVar[dict] = {
        int: BigInteger,
        Decimal: Numeric(18, 2),
        UUID: UUIDString(),
        datetime: DateTime(timezone=True),
    }

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)


class TrackedBase(Base):
    """
    Abstract base carrying who touched a row and when.

    ``created_at`` orders the stock ledger ("latest entry per unit"), so
    services stamp it from their injected Clock; the column default is only
    a fallback for rows written outside a service.  The actor columns stay
    nullable since batch receipts and initial property receipts run without
    a signed-in user.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        nullable=False, default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime | None] = mapped_column(nullable=True)
    created_by_id: Mapped[UUID | None] = mapped_column(nullable=True)
    updated_by_id: Mapped[UUID | None] = mapped_column(nullable=True)


class SoftDeleteMixin:
    """Rows that are hidden by stamping ``deleted_at`` instead of removed."""

    deleted_at: Mapped[datetime | None] = mapped_column(nullable=True)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
