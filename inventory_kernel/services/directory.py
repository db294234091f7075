"""
Directory Service -- offices and personnel as seen by the inventory core.

Responsibility:
    Validate office and user references before stock moves, and resolve
    their display names.  Directory *management* belongs to another
    system; the core only reads through the ``DirectoryService`` protocol.

Architecture position:
    Kernel > Services.  ``SqlDirectoryService`` is the in-database
    implementation; other backends only need ``get_office_by_id`` and
    ``get_user_by_id``.

Failure modes:
    - ``resolve_office`` / ``resolve_user`` raise ``OfficeNotFoundError`` /
      ``UserNotFoundError`` for unknown ids.
    - Any non-kernel exception from a backend is wrapped in
      ``DirectoryUnavailableError`` (an InternalServerError), so a broken
      directory is never reported as bad caller input.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from sqlalchemy.orm import Session

from inventory_kernel.exceptions import (
    DirectoryUnavailableError,
    InventoryKernelError,
    OfficeNotFoundError,
    UserNotFoundError,
)
from inventory_kernel.logging_config import get_logger
from inventory_kernel.models.directory import OfficeModel, UserModel

logger = get_logger("services.directory")


@dataclass(frozen=True)
class OfficeInfo:
    """Immutable view of an office."""

    id: UUID
    name: str
    division_id: UUID | None = None


@dataclass(frozen=True)
class UserInfo:
    """Immutable view of a user."""

    id: UUID
    name: str
    email: str
    designation: str = ""
    office_id: UUID | None = None
    division_id: UUID | None = None


class DirectoryService(Protocol):
    """Read-only lookups the inventory core needs from the directory."""

    def get_office_by_id(self, office_id: UUID) -> OfficeInfo | None: ...

    def get_user_by_id(self, user_id: UUID) -> UserInfo | None: ...


class SqlDirectoryService:
    """Directory backed by the ``offices`` and ``users`` tables."""

    def __init__(self, session: Session):
        self.session = session

    def get_office_by_id(self, office_id: UUID) -> OfficeInfo | None:
        office = self.session.get(OfficeModel, office_id)
        if office is None:
            return None
        return OfficeInfo(id=office.id, name=office.name, division_id=office.division_id)

    def get_user_by_id(self, user_id: UUID) -> UserInfo | None:
        user = self.session.get(UserModel, user_id)
        if user is None:
            return None
        return UserInfo(
            id=user.id,
            name=user.name,
            email=user.email,
            designation=user.designation,
            office_id=user.office_id,
            division_id=user.division_id,
        )


def resolve_office(directory: DirectoryService, office_id: UUID | None) -> OfficeInfo:
    """
    Look up an office that must exist.

    Raises:
        OfficeNotFoundError: ``office_id`` is None or unknown.
        DirectoryUnavailableError: the backend failed.
    """
    if office_id is None:
        raise OfficeNotFoundError(None)
    try:
        office = directory.get_office_by_id(office_id)
    except InventoryKernelError:
        raise
    except Exception as exc:
        logger.error(
            "directory_lookup_failed",
            extra={"lookup": "get_office_by_id", "key": str(office_id)},
            exc_info=True,
        )
        raise DirectoryUnavailableError("get_office_by_id", str(office_id), str(exc)) from exc
    if office is None:
        raise OfficeNotFoundError(str(office_id))
    return office


def resolve_user(
    directory: DirectoryService,
    user_id: UUID | None,
    role: str = "user",
) -> UserInfo:
    """
    Look up a user that must exist.

    ``role`` only shapes the error message ("Approver not found: ...").

    Raises:
        UserNotFoundError: ``user_id`` is None or unknown.
        DirectoryUnavailableError: the backend failed.
    """
    if user_id is None:
        raise UserNotFoundError(None, role)
    try:
        user = directory.get_user_by_id(user_id)
    except InventoryKernelError:
        raise
    except Exception as exc:
        logger.error(
            "directory_lookup_failed",
            extra={"lookup": "get_user_by_id", "key": str(user_id)},
            exc_info=True,
        )
        raise DirectoryUnavailableError("get_user_by_id", str(user_id), str(exc)) from exc
    if user is None:
        raise UserNotFoundError(str(user_id), role)
    return user
