"""Stremio addon API endpoints (manifest, stream)."""

from __future__ import annotations

from typing import Any, cast
from urllib.parse import parse_qsl

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from magnetarr.domain.entities.stremio import StremioStreamRequest
from magnetarr.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["stremio"])

_ADDON_ID = "community.magnetarr"
_ADDON_VERSION = "0.1.0"

_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "*",
}


def _build_manifest() -> dict[str, Any]:
    """Build the Stremio addon manifest."""
    return {
        "id": _ADDON_ID,
        "version": _ADDON_VERSION,
        "name": "Magnetarr",
        "description": "Magnet streams scraped from a torrent search surface",
        "types": ["movie", "series"],
        "catalogs": [],
        "resources": ["stream"],
        "idPrefixes": ["tt"],
        "behaviorHints": {
            "adult": False,
            "configurable": False,
        },
    }


def _parse_extra(raw: str | None) -> dict[str, str]:
    """Parse the Stremio ``extra`` path segment (``a=1&b=2``)."""
    if not raw:
        return {}
    return dict(parse_qsl(raw, keep_blank_values=True))


@router.get("/manifest.json")
async def stremio_manifest() -> JSONResponse:
    """Serve the Stremio addon manifest."""
    return JSONResponse(content=_build_manifest(), headers=_CORS_HEADERS)


async def _resolve(
    request: Request, content_type: str, stream_id: str, extra: str | None
) -> JSONResponse:
    state = cast(AppState, request.app.state)
    stream_request = StremioStreamRequest(
        content_type=content_type,
        id=stream_id,
        extra=_parse_extra(extra),
    )
    outcome = await state.stremio_stream_uc.execute(stream_request)

    log.info(
        "stremio_stream_response",
        content_type=content_type,
        stream_id=stream_id,
        streams_returned=len(outcome.streams),
    )
    return JSONResponse(content=outcome.to_payload(), headers=_CORS_HEADERS)


@router.get("/stream/{content_type}/{stream_id}.json")
async def stremio_stream(
    request: Request,
    content_type: str,
    stream_id: str,
) -> JSONResponse:
    """Resolve streams for a movie or episode.

    1. Parse the stream ID (IMDb ID + optional season/episode).
    2. Lookup title + year via the metadata service.
    3. Scrape magnets for the built query (listing, then detail pages).
    4. Fall back to the secondary provider when nothing was found.
    """
    return await _resolve(request, content_type, stream_id, None)


@router.get("/stream/{content_type}/{stream_id}/{extra}.json")
async def stremio_stream_with_extra(
    request: Request,
    content_type: str,
    stream_id: str,
    extra: str,
) -> JSONResponse:
    """Same as :func:`stremio_stream`, with Stremio ``extra`` arguments."""
    return await _resolve(request, content_type, stream_id, extra)
