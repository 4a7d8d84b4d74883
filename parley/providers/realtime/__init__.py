"""Realtime AI bridge providers.

A bridge injects a live AI participant into an ongoing call. Providers:
- StreamVideoBridgeProvider: the transport's video API plus an agent bridge
- InMemoryRealtimeBridgeProvider: records calls; for tests and local runs
"""

from parley.providers.realtime.base import (
    RealtimeBridge,
    RealtimeBridgeError,
    RealtimeBridgeProvider,
)
from parley.providers.realtime.inmemory import InMemoryRealtimeBridgeProvider
from parley.providers.realtime.stream import StreamVideoBridgeProvider

__all__ = [
    "RealtimeBridge",
    "RealtimeBridgeError",
    "RealtimeBridgeProvider",
    "StreamVideoBridgeProvider",
    "InMemoryRealtimeBridgeProvider",
]
