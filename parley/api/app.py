"""FastAPI application factory.

Creates and configures the FastAPI application with logging, exception
handlers, and route registration.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from parley import __version__
from parley.api.dependencies import reset_dependencies
from parley.api.exceptions import ParleyAPIError
from parley.api.models.errors import ErrorBody, ErrorCode, ErrorResponse
from parley.api.routes import register_routes
from parley.config import get_settings
from parley.observability.logging import get_logger, setup_logging
from parley.observability.metrics import ERRORS

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    yield
    await reset_dependencies()
    logger.info("dependencies_closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    log_config = settings.observability.logging
    setup_logging(
        level=log_config.level,
        format=log_config.format,
        redact_pii=log_config.redact_pii,
    )

    app = FastAPI(
        title="Parley",
        description="Webhook service for live and post-session AI personas",
        version=__version__,
        lifespan=lifespan,
    )

    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    _register_exception_handlers(app)

    register_routes(app, metrics_enabled=settings.observability.metrics.enabled)

    if settings.observability.tracing.enabled:
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

        FastAPIInstrumentor.instrument_app(app)
        logger.info("opentelemetry_instrumentation_enabled")

    logger.info("app_created", debug=settings.debug)

    return app


def _error_response(status_code: int, code: ErrorCode, message: str) -> JSONResponse:
    response = ErrorResponse(error=ErrorBody(code=code, message=message))
    return JSONResponse(status_code=status_code, content=response.model_dump(mode="json"))


def _register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Args:
        app: FastAPI application
    """

    @app.exception_handler(ParleyAPIError)
    async def parley_api_error_handler(
        request: Request, exc: ParleyAPIError
    ) -> JSONResponse:
        """Handle ParleyAPIError and its subclasses."""
        ERRORS.labels(error_type=exc.error_code.value).inc()
        logger.warning(
            "api_error",
            error_code=exc.error_code.value,
            message=exc.message,
            path=request.url.path,
        )
        return _error_response(exc.status_code, exc.error_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError  # noqa: ARG001
    ) -> JSONResponse:
        """Handle FastAPI request validation errors without echoing input."""
        ERRORS.labels(error_type=ErrorCode.INVALID_REQUEST.value).inc()
        logger.warning("validation_error", path=request.url.path)
        return _error_response(400, ErrorCode.INVALID_REQUEST, "Request validation failed")

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        ERRORS.labels(error_type=ErrorCode.INTERNAL_ERROR.value).inc()
        logger.error(
            "unexpected_error",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        return _error_response(500, ErrorCode.INTERNAL_ERROR, "An unexpected error occurred")

    logger.debug("exception_handlers_registered")


# Create the app instance for uvicorn
app = create_app()
