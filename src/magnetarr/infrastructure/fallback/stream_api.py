"""Fallback stream provider (Torrentio-compatible ``/stream`` JSON API)."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx
import structlog

log = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://torrentio.strem.fun"


class StreamApiFallbackClient:
    """Query a secondary addon that already returns Stremio stream records.

    Implements ``FallbackProviderPort``.  The ``streams`` array is passed
    through untouched; any failure yields an empty list.
    """

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
    ) -> None:
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    def stream_url(self, content_type: str, primary_key: str) -> str:
        return (
            f"{self._base_url}/stream/{quote(content_type, safe='')}"
            f"/{quote(primary_key, safe='')}.json"
        )

    async def fetch(self, content_type: str, primary_key: str) -> list[dict[str, Any]]:
        url = self.stream_url(content_type, primary_key)
        try:
            resp = await self._http.get(
                url,
                headers={"Accept": "application/json"},
                timeout=self._timeout,
            )
        except httpx.HTTPError:
            log.warning("fallback_network_error", url=url, exc_info=True)
            return []

        if not resp.is_success:
            log.warning("fallback_status", url=url, status=resp.status_code)
            return []

        try:
            data = resp.json()
        except ValueError:
            log.warning("fallback_invalid_json", url=url)
            return []

        streams = data.get("streams") if isinstance(data, dict) else None
        if not isinstance(streams, list):
            log.warning("fallback_streams_missing", url=url)
            return []

        log.info("fallback_streams", url=url, count=len(streams))
        return streams
