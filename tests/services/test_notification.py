"""Tests for fire-and-forget notifications."""

from inventory_kernel.services.notification import (
    LoggingNotificationService,
    Notification,
    notify_safely,
)


class FailingMailer:
    def send(self, notification):
        raise OSError("smtp unreachable")


def _message():
    return Notification(
        recipient="supervisor@example.org",
        subject="Request for RLSDDSP Approval",
        template="loss-approval",
        context={"document_no": "RLSDDSP-2024-01-01"},
    )


class TestNotifySafely:
    def test_delivered(self, captured_logs):
        notifier = LoggingNotificationService()
        assert notify_safely(notifier, _message()) is True
        assert notifier.sent == [_message()]
        sent = [r for r in captured_logs() if r["message"] == "notification_sent"]
        assert sent[0]["recipient"] == "supervisor@example.org"

    def test_failure_is_logged_not_raised(self, captured_logs):
        assert notify_safely(FailingMailer(), _message()) is False
        failed = [r for r in captured_logs() if r["message"] == "notification_failed"]
        assert failed[0]["error_code"] == "NOTIFICATION_FAILED"
        assert failed[0]["reason"] == "smtp unreachable"
        assert failed[0]["level"] == "ERROR"
