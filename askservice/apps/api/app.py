"""FastAPI application wiring for the question-answering API."""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request

from askservice.apps.api.errors import register_exception_handlers
from askservice.apps.api.routers import ask, system
from askservice.core.ai import AnswerProvider, AnswerService, select_provider
from askservice.core.error_handler import install_loop_exception_handler
from askservice.core.logging import configure_logging
from askservice.core.settings import Settings, get_settings

request_logger = logging.getLogger("askservice.requests")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    install_loop_exception_handler(asyncio.get_running_loop(), "api")
    service: AnswerService = app.state.answer_service
    settings: Settings = app.state.settings
    if service.remote_enabled:
        logger.info(
            "Starting askservice %s with GigaChat provider (model=%s)",
            settings.version,
            settings.gigachat.model,
        )
    else:
        logger.info("Starting askservice %s in mock mode (no GigaChat credential)", settings.version)
    try:
        yield
    finally:
        logger.info("askservice shut down")


def create_app(settings: Optional[Settings] = None, provider: Optional[AnswerProvider] = None) -> FastAPI:
    """Build the app; the provider is chosen here, once, and never swapped."""
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(title="askservice", version=settings.version, lifespan=lifespan)
    app.state.settings = settings
    app.state.answer_service = AnswerService(provider if provider is not None else select_provider(settings))

    register_exception_handlers(app)
    app.include_router(system.router)
    app.include_router(ask.router)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            duration = (time.perf_counter() - start) * 1000
            request_logger.exception(
                "HTTP %s %s failed",
                request.method,
                request.url.path,
                extra={"path": request.url.path, "method": request.method, "duration_ms": duration},
            )
            raise
        duration = (time.perf_counter() - start) * 1000
        request_logger.info(
            "HTTP %s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            duration,
            extra={
                "path": request.url.path,
                "method": request.method,
                "status": response.status_code,
                "duration_ms": round(duration, 1),
            },
        )
        return response

    return app


__all__ = ["create_app", "lifespan"]
