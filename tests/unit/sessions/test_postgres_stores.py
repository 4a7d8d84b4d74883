"""Unit tests for PostgreSQL stores with the connection mocked."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock

import asyncpg
import pytest

from parley.db.errors import ConnectionError, StoreError
from parley.sessions.models import SessionStatus
from parley.sessions.stores.postgres import PostgresPersonaStore, PostgresSessionStore

SESSION_ROW = {
    "session_id": "m1",
    "persona_id": "p1",
    "status": "processing",
    "started_at": None,
    "ended_at": None,
    "transcript_url": None,
    "recording_url": None,
    "summary": None,
}


class FakePool:
    def __init__(self) -> None:
        self.conn = AsyncMock()

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[AsyncMock]:
        yield self.conn


@pytest.fixture
def pool() -> FakePool:
    return FakePool()


class TestPostgresSessionStore:
    """Tests for PostgresSessionStore."""

    async def test_compare_and_set_is_single_guarded_update(self, pool) -> None:
        pool.conn.fetchrow.return_value = SESSION_ROW
        store = PostgresSessionStore(pool)  # type: ignore[arg-type]

        session = await store.compare_and_set_status(
            "m1",
            expected={SessionStatus.ACTIVE},
            target=SessionStatus.PROCESSING,
            summary="x",
        )

        assert session is not None and session.status == SessionStatus.PROCESSING
        sql, *args = pool.conn.fetchrow.await_args.args
        assert "WHERE session_id = $1 AND status = ANY($2::text[])" in sql
        assert "RETURNING *" in sql
        assert "summary = $3" in sql and "status = $4" in sql
        assert args == ["m1", ["active"], "x", "processing"]

    async def test_compare_and_set_no_row_is_none(self, pool) -> None:
        pool.conn.fetchrow.return_value = None
        store = PostgresSessionStore(pool)  # type: ignore[arg-type]

        result = await store.compare_and_set_status(
            "m1", expected={SessionStatus.ACTIVE}, target=SessionStatus.PROCESSING
        )

        assert result is None

    async def test_unknown_column_rejected(self, pool) -> None:
        store = PostgresSessionStore(pool)  # type: ignore[arg-type]

        with pytest.raises(StoreError):
            await store.update_fields("m1", persona_id_or_1=1)
        pool.conn.fetchrow.assert_not_awaited()

    async def test_postgres_error_wrapped(self, pool) -> None:
        pool.conn.fetchrow.side_effect = asyncpg.PostgresError("boom")
        store = PostgresSessionStore(pool)  # type: ignore[arg-type]

        with pytest.raises(ConnectionError):
            await store.get("m1")


class TestPostgresPersonaStore:
    """Tests for PostgresPersonaStore."""

    async def test_null_instructions_become_empty(self, pool) -> None:
        pool.conn.fetchrow.return_value = {
            "persona_id": "p1",
            "name": "Sevak",
            "instructions": None,
        }
        store = PostgresPersonaStore(pool)  # type: ignore[arg-type]

        persona = await store.get("p1")

        assert persona is not None
        assert persona.instructions == ""
