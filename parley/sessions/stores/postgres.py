"""PostgreSQL implementations of SessionStore and PersonaStore.

Expected tables (schema managed outside this service):

    sessions(session_id text primary key, persona_id text, status text,
             started_at timestamptz, ended_at timestamptz,
             transcript_url text, recording_url text, summary text)
    personas(persona_id text primary key, name text, instructions text)
"""

from collections.abc import Collection
from typing import Any

import asyncpg

from parley.db.errors import ConnectionError, StoreError
from parley.db.pool import PostgresPool
from parley.observability.logging import get_logger
from parley.sessions.models import Persona, Session, SessionStatus
from parley.sessions.store import PersonaStore, SessionStore

logger = get_logger(__name__)

_SESSION_COLUMNS = (
    "session_id",
    "persona_id",
    "status",
    "started_at",
    "ended_at",
    "transcript_url",
    "recording_url",
    "summary",
)
# Columns a caller may set through update_fields / compare_and_set_status
_MUTABLE_COLUMNS = frozenset(_SESSION_COLUMNS) - {"session_id"}


def _row_to_session(row: asyncpg.Record) -> Session:
    data = dict(row)
    data["status"] = SessionStatus(data["status"])
    return Session.model_validate(data)


def _set_clause(fields: dict[str, Any], start: int) -> tuple[str, list[Any]]:
    """Build "col = $n, ..." for whitelisted columns, numbering from start."""
    unknown = set(fields) - _MUTABLE_COLUMNS
    if unknown:
        raise StoreError(f"Unknown session columns: {sorted(unknown)}")

    assignments = []
    values: list[Any] = []
    for offset, (column, value) in enumerate(fields.items()):
        assignments.append(f"{column} = ${start + offset}")
        values.append(value.value if isinstance(value, SessionStatus) else value)
    return ", ".join(assignments), values


class PostgresSessionStore(SessionStore):
    """PostgreSQL SessionStore.

    compare_and_set_status is a single conditional UPDATE ... RETURNING, so
    the status guard and the write happen in one statement.
    """

    def __init__(self, pool: PostgresPool) -> None:
        self._pool = pool

    @property
    def pool(self) -> PostgresPool:
        return self._pool

    async def get(self, session_id: str) -> Session | None:
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    "SELECT * FROM sessions WHERE session_id = $1",
                    session_id,
                )
        except asyncpg.PostgresError as e:
            logger.error("postgres_get_error", session_id=session_id, error=str(e))
            raise ConnectionError(f"Failed to get session: {e}", cause=e) from e

        return _row_to_session(row) if row else None

    async def save(self, session: Session) -> str:
        data = session.model_dump()
        data["status"] = session.status.value
        placeholders = ", ".join(f"${i}" for i in range(1, len(_SESSION_COLUMNS) + 1))
        updates = ", ".join(
            f"{column} = EXCLUDED.{column}" for column in _SESSION_COLUMNS[1:]
        )
        try:
            async with self._pool.acquire() as conn:
                await conn.execute(
                    f"""
                    INSERT INTO sessions ({", ".join(_SESSION_COLUMNS)})
                    VALUES ({placeholders})
                    ON CONFLICT (session_id) DO UPDATE SET {updates}
                    """,
                    *(data[column] for column in _SESSION_COLUMNS),
                )
        except asyncpg.PostgresError as e:
            logger.error(
                "postgres_save_error", session_id=session.session_id, error=str(e)
            )
            raise ConnectionError(f"Failed to save session: {e}", cause=e) from e
        return session.session_id

    async def get_with_status(
        self, session_id: str, status: SessionStatus
    ) -> Session | None:
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    "SELECT * FROM sessions WHERE session_id = $1 AND status = $2",
                    session_id,
                    status.value,
                )
        except asyncpg.PostgresError as e:
            logger.error("postgres_get_error", session_id=session_id, error=str(e))
            raise ConnectionError(f"Failed to get session: {e}", cause=e) from e

        return _row_to_session(row) if row else None

    async def compare_and_set_status(
        self,
        session_id: str,
        expected: Collection[SessionStatus],
        target: SessionStatus,
        **fields: Any,
    ) -> Session | None:
        set_sql, values = _set_clause({**fields, "status": target}, start=3)
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    UPDATE sessions SET {set_sql}
                    WHERE session_id = $1 AND status = ANY($2::text[])
                    RETURNING *
                    """,
                    session_id,
                    [status.value for status in expected],
                    *values,
                )
        except asyncpg.PostgresError as e:
            logger.error(
                "postgres_transition_error", session_id=session_id, error=str(e)
            )
            raise ConnectionError(f"Failed to update session: {e}", cause=e) from e

        return _row_to_session(row) if row else None

    async def update_fields(self, session_id: str, **fields: Any) -> Session | None:
        set_sql, values = _set_clause(fields, start=2)
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"UPDATE sessions SET {set_sql} WHERE session_id = $1 RETURNING *",
                    session_id,
                    *values,
                )
        except asyncpg.PostgresError as e:
            logger.error("postgres_update_error", session_id=session_id, error=str(e))
            raise ConnectionError(f"Failed to update session: {e}", cause=e) from e

        return _row_to_session(row) if row else None


class PostgresPersonaStore(PersonaStore):
    """PostgreSQL PersonaStore."""

    def __init__(self, pool: PostgresPool) -> None:
        self._pool = pool

    @property
    def pool(self) -> PostgresPool:
        return self._pool

    async def get(self, persona_id: str) -> Persona | None:
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    "SELECT persona_id, name, instructions FROM personas WHERE persona_id = $1",
                    persona_id,
                )
        except asyncpg.PostgresError as e:
            logger.error("postgres_get_error", persona_id=persona_id, error=str(e))
            raise ConnectionError(f"Failed to get persona: {e}", cause=e) from e

        if not row:
            return None
        data = dict(row)
        data["instructions"] = data["instructions"] or ""
        return Persona.model_validate(data)

    async def save(self, persona: Persona) -> str:
        try:
            async with self._pool.acquire() as conn:
                await conn.execute(
                    """
                    INSERT INTO personas (persona_id, name, instructions)
                    VALUES ($1, $2, $3)
                    ON CONFLICT (persona_id) DO UPDATE SET
                        name = EXCLUDED.name,
                        instructions = EXCLUDED.instructions
                    """,
                    persona.persona_id,
                    persona.name,
                    persona.instructions,
                )
        except asyncpg.PostgresError as e:
            logger.error("postgres_save_error", persona_id=persona.persona_id, error=str(e))
            raise ConnectionError(f"Failed to save persona: {e}", cause=e) from e
        return persona.persona_id
