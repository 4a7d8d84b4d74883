"""Session and persona store implementations."""

from parley.sessions.stores.inmemory import InMemoryPersonaStore, InMemorySessionStore

__all__ = ["InMemoryPersonaStore", "InMemorySessionStore"]
