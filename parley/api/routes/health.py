"""Health check and metrics endpoints."""

import time
from typing import Literal

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from parley import __version__
from parley.api.dependencies import PersonaStoreDep, SessionStoreDep, SettingsDep
from parley.api.models.health import ComponentHealth, HealthResponse
from parley.observability.logging import get_logger
from parley.sessions.stores.postgres import PostgresPersonaStore, PostgresSessionStore

logger = get_logger(__name__)

router = APIRouter()
metrics_router = APIRouter()


async def _check_store_health(store: object, name: str) -> ComponentHealth:
    """Report a store healthy once it has been constructed.

    Stores backed by a pool also run the pool's health query.
    """
    start = time.perf_counter()
    if not isinstance(store, (PostgresSessionStore, PostgresPersonaStore)):
        return ComponentHealth(
            name=name,
            status="healthy",
            latency_ms=(time.perf_counter() - start) * 1000,
        )

    ok = await store.pool.health_check()
    return ComponentHealth(
        name=name,
        status="healthy" if ok else "unhealthy",
        latency_ms=(time.perf_counter() - start) * 1000,
        message=None if ok else "Database health check failed",
    )


@router.get("/health", response_model=HealthResponse)
async def health_check(
    _settings: SettingsDep,
    session_store: SessionStoreDep,
    persona_store: PersonaStoreDep,
) -> HealthResponse:
    """Overall service health with per-store status."""
    logger.debug("health_check_request")

    components = [
        await _check_store_health(session_store, "session_store"),
        await _check_store_health(persona_store, "persona_store"),
    ]

    unhealthy_count = sum(1 for c in components if c.status == "unhealthy")
    degraded_count = sum(1 for c in components if c.status == "degraded")

    overall_status: Literal["healthy", "degraded", "unhealthy"]
    if unhealthy_count > 0:
        overall_status = "unhealthy"
    elif degraded_count > 0:
        overall_status = "degraded"
    else:
        overall_status = "healthy"

    logger.debug("health_check_completed", status=overall_status)

    return HealthResponse(status=overall_status, version=__version__, components=components)


@metrics_router.get("/metrics")
async def get_metrics() -> Response:
    """Prometheus metrics in text exposition format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
