"""Live AI participant activation for started calls."""

from parley.live.activator import LiveSessionActivator

__all__ = ["LiveSessionActivator"]
