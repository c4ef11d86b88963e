"""FastAPI application factory (create_app)."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request
from starlette.responses import Response

from magnetarr.infrastructure.config import AppConfig
from magnetarr.interfaces.app_state import AppState
from magnetarr.interfaces.composition import lifespan

log = structlog.get_logger(__name__)


def create_app(config: AppConfig) -> FastAPI:
    """Create the FastAPI app: configuration only, no resource initialization.

    Resources (HTTP client, use case) are created in lifespan().
    """
    app = FastAPI(
        title="Magnetarr",
        description="Stremio stream addon resolving magnets for catalog IDs",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    from magnetarr.interfaces.api.stremio import router as stremio_router

    app.include_router(stremio_router)

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        """Liveness probe, 200 while the process is running."""
        return {"status": "ok"}

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ):
        start = time.perf_counter()
        response: Response | None = None
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            log.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code if response is not None else 500,
                duration_ms=round(duration_ms, 2),
                client_host=(request.client.host if request.client else None),
            )

    return app
