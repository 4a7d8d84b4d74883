"""Parley: lifecycle and grounded-response service for live AI sessions."""

__version__ = "0.1.0"
