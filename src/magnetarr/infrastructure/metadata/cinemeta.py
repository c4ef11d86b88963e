"""Cinemeta-compatible metadata client (async httpx)."""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import quote

import httpx
import structlog

from magnetarr.domain.entities.stremio import Found, Metadata, NotFound, StageResult

log = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://v3-cinemeta.strem.io"

_LEADING_INT_RE = re.compile(r"^\s*(\d+)")


def build_lookup_key(
    primary_key: str,
    season: int | None = None,
    episode: int | None = None,
) -> str:
    """Episode-level key (``tt123:1:5``) when both parts exist, else the bare key."""
    if season and episode:
        return f"{primary_key}:{season}:{episode}"
    return primary_key


def _parse_year(value: Any) -> int | None:
    """Parse ``2020``, ``"2020"`` or ``"2010–2015"`` into the leading year."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value or None
    if isinstance(value, str):
        m = _LEADING_INT_RE.match(value)
        if m:
            return int(m.group(1)) or None
    return None


def parse_meta(meta: dict[str, Any]) -> Metadata | None:
    """Convert a Cinemeta ``meta`` object into Metadata (None without title)."""
    title = meta.get("name") or meta.get("title") or ""
    if not isinstance(title, str) or not title.strip():
        return None
    year = _parse_year(meta.get("year")) or _parse_year(meta.get("releaseInfo"))
    return Metadata(title=title.strip(), year=year)


class CinemetaClient:
    """Title + year lookup against a Cinemeta-style ``/meta`` endpoint.

    Implements ``MetadataResolverPort``.  Every failure (status, network,
    timeout, malformed body) degrades to ``NotFound``.
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

    def meta_url(self, content_type: str, key: str) -> str:
        return (
            f"{self._base_url}/meta/{quote(content_type, safe='')}"
            f"/{quote(key, safe='')}.json"
        )

    async def resolve(
        self,
        content_type: str,
        primary_key: str,
        season: int | None = None,
        episode: int | None = None,
    ) -> StageResult[Metadata]:
        key = build_lookup_key(primary_key, season, episode)
        url = self.meta_url(content_type, key)
        try:
            resp = await self._http.get(
                url,
                headers={"Accept": "application/json"},
                timeout=self._timeout,
            )
        except httpx.HTTPError:
            log.warning("cinemeta_network_error", key=key, exc_info=True)
            return NotFound("metadata request failed")

        if not resp.is_success:
            log.warning("cinemeta_status", key=key, status=resp.status_code)
            return NotFound(f"metadata status {resp.status_code}")

        try:
            data = resp.json()
        except ValueError:
            log.warning("cinemeta_invalid_json", key=key)
            return NotFound("metadata body is not JSON")

        meta = data.get("meta") if isinstance(data, dict) else None
        if not isinstance(meta, dict):
            log.debug("cinemeta_meta_missing", key=key)
            return NotFound("no meta object")

        metadata = parse_meta(meta)
        if metadata is None:
            log.debug("cinemeta_title_missing", key=key)
            return NotFound("meta has no title")

        log.debug(
            "cinemeta_resolved",
            key=key,
            title=metadata.title,
            year=metadata.year,
        )
        return Found(metadata)
