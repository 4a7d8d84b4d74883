"""Database utilities for Parley.

- Connection pool management
- Store error hierarchy
"""

from parley.db.errors import ConnectionError, StoreError

__all__ = [
    "StoreError",
    "ConnectionError",
]
