"""Joins the persona to a live call through the realtime bridge."""

from parley.api.exceptions import DownstreamError, PersonaNotFoundError
from parley.db.errors import StoreError
from parley.grounding.prompt import build_live_instructions
from parley.observability.logging import get_logger
from parley.observability.metrics import LIVE_ACTIVATION_FAILURES
from parley.providers.realtime.base import RealtimeBridgeProvider
from parley.sessions.models import Session
from parley.sessions.store import PersonaStore

logger = get_logger(__name__)


class LiveSessionActivator:
    """Opens the realtime bridge for a session that has just gone active.

    The session is already active when this runs, so bridge failures are
    logged and counted but not raised; the delivery still succeeds.
    """

    def __init__(
        self,
        persona_store: PersonaStore,
        bridge_provider: RealtimeBridgeProvider,
        policy_wrapper: str,
    ) -> None:
        self._personas = persona_store
        self._bridges = bridge_provider
        self._policy_wrapper = policy_wrapper

    async def activate(self, session: Session) -> None:
        """Open the bridge and push the persona's live instructions.

        Raises:
            PersonaNotFoundError: The session's persona does not exist
        """
        try:
            persona = await self._personas.get(session.persona_id)
        except StoreError as e:
            raise DownstreamError("Failed to load persona") from e

        if persona is None:
            raise PersonaNotFoundError("Persona not found")

        instructions = build_live_instructions(self._policy_wrapper, persona.instructions)

        try:
            bridge = await self._bridges.open_bridge(
                session.session_id, agent_user_id=persona.persona_id
            )
            await bridge.update_instructions(instructions)
        except Exception as e:
            LIVE_ACTIVATION_FAILURES.inc()
            logger.error(
                "live_session_activation_failed",
                session_id=session.session_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return

        logger.info(
            "live_session_activated",
            session_id=session.session_id,
            persona_id=persona.persona_id,
        )
