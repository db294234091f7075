"""Selectors for the inventory kernel (read side)."""

from inventory_kernel.selectors.ledger_selector import LedgerSelector, QuantityCheck
from inventory_kernel.selectors.stock_selector import StockSelector

__all__ = [
    "LedgerSelector",
    "QuantityCheck",
    "StockSelector",
]
