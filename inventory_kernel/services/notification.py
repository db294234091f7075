"""
Notification dispatch.

Fire-and-forget messages sent after a lifecycle transition has committed
(e.g. asking a supervisor to approve a loss report).  Delivery belongs to
an external mailer; the core only depends on ``NotificationService``.

A failed notification never fails the transition it reports on:
``notify_safely`` logs ``notification_failed`` and returns False.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from inventory_kernel.exceptions import NotificationError
from inventory_kernel.logging_config import get_logger

logger = get_logger("services.notification")


@dataclass(frozen=True)
class Notification:
    """One outgoing message."""

    recipient: str
    subject: str
    template: str
    context: dict[str, Any] = field(default_factory=dict)


class NotificationService(Protocol):
    def send(self, notification: Notification) -> None: ...


class LoggingNotificationService:
    """Records notifications in the structured log instead of sending them."""

    def __init__(self) -> None:
        self.sent: list[Notification] = []

    def send(self, notification: Notification) -> None:
        self.sent.append(notification)
        logger.info(
            "notification_sent",
            extra={
                "recipient": notification.recipient,
                "subject": notification.subject,
                "template": notification.template,
            },
        )


def notify_safely(service: NotificationService, notification: Notification) -> bool:
    """Send ``notification``; log and swallow any failure."""
    try:
        service.send(notification)
    except Exception as exc:
        error = NotificationError(notification.recipient, str(exc))
        logger.error(
            "notification_failed",
            extra={
                "recipient": error.recipient,
                "subject": notification.subject,
                "error_code": error.code,
                "reason": error.reason,
            },
            exc_info=True,
        )
        return False
    return True
