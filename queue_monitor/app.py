import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from queue_monitor.application import MonitorService, configure_monitor_service
from queue_monitor.config import Settings, load_settings
from queue_monitor.core.errors import (
    BackendTimeoutError,
    BackendUnavailableError,
    InvalidArgumentError,
    NotFoundError,
    QueueMonitorError,
)
from queue_monitor.infrastructure import create_backend
from queue_monitor.routes import chains, jobs, overview

logger = logging.getLogger(__name__)

_STATUS_CODES: list[tuple[type[QueueMonitorError], int]] = [
    (NotFoundError, 404),
    (InvalidArgumentError, 400),
    (BackendTimeoutError, 504),
    (BackendUnavailableError, 503),
]


def _status_for(exc: QueueMonitorError) -> int:
    for error_type, status_code in _STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return 500


def build_service(settings: Settings) -> MonitorService:
    settings.validate()
    backend = create_backend(settings)
    return MonitorService(backend, default_queue=settings.default_queue, queues=settings.queues)


def create_app(settings: Settings | None = None, service: MonitorService | None = None) -> FastAPI:
    app = FastAPI(title="Task Queue Monitor API", version="0.1.0")

    if settings is None:
        settings = load_settings()
    if service is None:
        service = build_service(settings)
    configure_monitor_service(service)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        client = request.client.host if request.client else "-"
        logger.info(
            "%s %s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            client,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response

    @app.exception_handler(QueueMonitorError)
    async def handle_monitor_error(request: Request, exc: QueueMonitorError) -> JSONResponse:
        return JSONResponse(status_code=_status_for(exc), content={"detail": str(exc)})

    app.include_router(overview.router, prefix="/api")
    app.include_router(jobs.router, prefix="/api")
    app.include_router(chains.router, prefix="/api")

    @app.get("/health", include_in_schema=False)
    async def health() -> JSONResponse:
        return JSONResponse({"status": "healthy"})

    return app
