"""In-memory realtime bridge provider for tests and local development."""

from parley.providers.realtime.base import RealtimeBridge, RealtimeBridgeProvider


class InMemoryRealtimeBridge(RealtimeBridge):
    """Bridge handle that remembers every instruction update."""

    def __init__(self, session_id: str, agent_user_id: str) -> None:
        super().__init__(session_id)
        self.agent_user_id = agent_user_id
        self.instructions: list[str] = []

    async def update_instructions(self, instructions: str) -> None:
        self.instructions.append(instructions)


class InMemoryRealtimeBridgeProvider(RealtimeBridgeProvider):
    """Tracks open bridges per session."""

    def __init__(self) -> None:
        self.bridges: dict[str, InMemoryRealtimeBridge] = {}
        self.ended: list[str] = []

    async def open_bridge(self, session_id: str, agent_user_id: str) -> RealtimeBridge:
        bridge = self.bridges.get(session_id)
        if bridge is None:
            bridge = InMemoryRealtimeBridge(session_id, agent_user_id)
            self.bridges[session_id] = bridge
        return bridge

    async def end_bridge(self, session_id: str) -> None:
        self.bridges.pop(session_id, None)
        self.ended.append(session_id)
