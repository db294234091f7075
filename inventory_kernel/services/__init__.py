"""Services for the inventory kernel (write side)."""

from inventory_kernel.services.asset_service import AssetInfo, AssetService
from inventory_kernel.services.batch_service import BatchService
from inventory_kernel.services.directory import (
    DirectoryService,
    OfficeInfo,
    SqlDirectoryService,
    UserInfo,
)
from inventory_kernel.services.notification import (
    LoggingNotificationService,
    Notification,
    NotificationService,
)
from inventory_kernel.services.sequence_service import CounterType, SequenceService
from inventory_kernel.services.stock_ledger import StockLedgerService

__all__ = [
    "AssetInfo",
    "AssetService",
    "BatchService",
    "CounterType",
    "DirectoryService",
    "LoggingNotificationService",
    "Notification",
    "NotificationService",
    "OfficeInfo",
    "SequenceService",
    "SqlDirectoryService",
    "StockLedgerService",
    "UserInfo",
]
