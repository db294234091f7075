"""
Inventory Kernel

The stock-ledger and asset-quantity consistency engine:
- Append-only stock ledger with a global insertion sequence
- Cached asset quantity updated in the same flush as its ledger entry
- Explicit units of work owning commit and rollback
- Closed condition vocabulary with a transition table
- Balance replay and verification
"""

__version__ = "0.1.0"
