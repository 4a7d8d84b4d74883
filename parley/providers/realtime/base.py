"""Realtime bridge contract."""

from abc import ABC, abstractmethod


class RealtimeBridgeError(Exception):
    """Raised when the bridge service fails."""

    pass


class RealtimeBridge(ABC):
    """Handle to an open bridge for one session."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id

    @abstractmethod
    async def update_instructions(self, instructions: str) -> None:
        """Replace the live model's system instructions."""
        pass


class RealtimeBridgeProvider(ABC):
    """Opens and ends realtime bridges.

    At most one bridge is open per session; opening again for the same
    session returns a handle to the existing bridge.
    """

    @abstractmethod
    async def open_bridge(self, session_id: str, agent_user_id: str) -> RealtimeBridge:
        """Join the AI participant to the session's call."""
        pass

    @abstractmethod
    async def end_bridge(self, session_id: str) -> None:
        """End the session's call and bridge. Ending twice is not an error."""
        pass
