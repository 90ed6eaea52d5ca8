from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from src.portal.api.middlewares import logging_context_middleware, request_context_middleware
from src.portal.api.v1.router import api_router
from src.portal.core.config import get_settings
from src.portal.core.db import dispose_engine, get_session
from src.portal.core.exceptions import setup_exception_handlers
from src.portal.core.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info("startup", app=settings.app_name, env=settings.app_env)

    yield

    logger.info("Closing connections...")
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "users", "description": "Self-service sign-up"},
    {"name": "events", "description": "Published events and registration"},
    {"name": "registrations", "description": "A resident's own registrations"},
    {"name": "admin-events", "description": "Event management, rosters and CSV export"},
    {"name": "admin-users", "description": "Account approval, roles and CSV export"},
    {"name": "audit", "description": "Append-only history of admin actions"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Residential community portal: events, registrations and accounts",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
        lifespan=lifespan,
    )

    setup_exception_handlers(app)

    # Registered innermost first; the correlation ID middleware must run outermost
    app.middleware("http")(request_context_middleware)
    app.middleware("http")(logging_context_middleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["Content-Type", "X-Actor-Id", "X-Actor-Role", "X-Request-ID"],
        expose_headers=["X-Request-ID", "Content-Disposition"],
    )

    app.add_middleware(CorrelationIdMiddleware)

    app.include_router(api_router)

    @app.get("/health", tags=["health"])
    async def health() -> JSONResponse:
        """Liveness plus a database round trip."""
        body: dict[str, Any] = {"status": "healthy", "database": "unknown"}
        try:
            async with get_session() as session:
                await session.execute(text("SELECT 1"))
            body["database"] = "healthy"
        except Exception as e:
            logger.warning("health_check_failed", error=str(e))
            body["database"] = "unhealthy"
            body["status"] = "unhealthy"
        return JSONResponse(content=body, status_code=200 if body["status"] == "healthy" else 503)

    return app


app = create_app()
