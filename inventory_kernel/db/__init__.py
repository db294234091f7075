"""Database layer - engine, base classes, units of work, append-only guards."""

from inventory_kernel.db.base import UUID, Base, SoftDeleteMixin, TrackedBase, UUIDString
from inventory_kernel.db.engine import create_tables, get_engine, get_session
from inventory_kernel.db.unit_of_work import UnitOfWork, current_unit_of_work, unit_of_work

__all__ = [
    "get_engine",
    "get_session",
    "create_tables",
    "Base",
    "TrackedBase",
    "SoftDeleteMixin",
    "UUIDString",
    "UUID",
    "UnitOfWork",
    "current_unit_of_work",
    "unit_of_work",
]
