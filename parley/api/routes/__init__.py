"""API route registration."""

from fastapi import FastAPI

from parley.observability.logging import get_logger

logger = get_logger(__name__)


def register_routes(app: FastAPI, metrics_enabled: bool = True) -> None:
    """Register all routes with the FastAPI application.

    Args:
        app: FastAPI application instance
        metrics_enabled: Whether to expose GET /metrics
    """
    from parley.api.routes.health import metrics_router
    from parley.api.routes.health import router as health_router
    from parley.api.routes.webhook import router as webhook_router

    app.include_router(webhook_router, tags=["Webhook"])
    app.include_router(health_router, tags=["Health"])
    if metrics_enabled:
        app.include_router(metrics_router, tags=["Health"])

    logger.info("routes_registered", metrics=metrics_enabled)
