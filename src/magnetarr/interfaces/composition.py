"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from magnetarr.application.use_cases.stremio_stream import StremioStreamUseCase
from magnetarr.infrastructure.config.schema import AppConfig
from magnetarr.infrastructure.fallback.stream_api import StreamApiFallbackClient
from magnetarr.infrastructure.metadata.cinemeta import CinemetaClient
from magnetarr.infrastructure.torrents.search_engine import MagnetSearchEngine
from magnetarr.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


def build_http_client(config: AppConfig) -> httpx.AsyncClient:
    """Shared outbound client (one per process)."""
    return httpx.AsyncClient(
        timeout=config.http_timeout_seconds,
        follow_redirects=config.http_follow_redirects,
        headers={"User-Agent": config.http_user_agent},
    )


def build_stream_use_case(
    config: AppConfig, http_client: httpx.AsyncClient
) -> StremioStreamUseCase:
    """Wire the resolution pipeline from configuration."""
    metadata = CinemetaClient(
        http_client=http_client,
        base_url=config.metadata_base_url,
        timeout=config.http_timeout_seconds,
    )
    search = MagnetSearchEngine(
        http_client=http_client,
        base_url=config.search_base_url,
        proxy_key=config.proxy_key,
        detail_limit=config.detail_page_limit,
        retries=config.search_max_retries,
        retry_base_delay=config.search_retry_base_delay_seconds,
        timeout=config.http_timeout_seconds,
    )
    fallback = (
        StreamApiFallbackClient(
            http_client=http_client,
            base_url=config.fallback_base_url,
            timeout=config.http_timeout_seconds,
        )
        if config.fallback_enabled
        else None
    )
    return StremioStreamUseCase(
        metadata=metadata,
        search=search,
        fallback=fallback,
        config=config,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. HTTP Client (required by every adapter)
        2. Stream use case (metadata + search + fallback adapters)
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) HTTP client
    state.http_client = build_http_client(config)
    log.info(
        "http_client_initialized",
        timeout=config.http_timeout_seconds,
        user_agent=config.http_user_agent,
    )

    # 2) Use case
    state.stremio_stream_uc = build_stream_use_case(config, state.http_client)
    log.info(
        "stremio_stream_uc_initialized",
        search_base_url=config.search_base_url,
        proxy_key_set=config.proxy_key is not None,
        fallback_enabled=config.fallback_enabled,
    )

    try:
        yield
    finally:
        await state.http_client.aclose()
        log.info("app_shutdown")
