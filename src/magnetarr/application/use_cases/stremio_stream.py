"""Stremio stream resolution use case.

Stream ID -> metadata -> search query -> magnet search
-> normalize -> StreamRecord list (fallback provider when empty).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, cast

import structlog

from magnetarr.domain.entities.stremio import (
    Found,
    LabeledLink,
    Metadata,
    NotFound,
    RequestIdentity,
    ResolutionOutcome,
    StageResult,
    StreamRecord,
    StremioContentType,
    StremioStreamRequest,
)
from magnetarr.domain.ports.fallback import FallbackProviderPort
from magnetarr.domain.ports.metadata import MetadataResolverPort
from magnetarr.domain.ports.source_search import SourceSearchPort

log = structlog.get_logger(__name__)

MAX_STREAMS = 20
TITLE_SEPARATOR = " • "

_CONTENT_TYPES = ("movie", "series")


class _StremioConfig(Protocol):
    """Configuration values consumed by StremioStreamUseCase."""

    max_streams: int
    fallback_enabled: bool


def _positive_int(segment: str | None) -> int | None:
    """Strict decimal segment -> positive int; anything else -> None."""
    if not segment or not segment.isdecimal():
        return None
    value = int(segment)
    return value if value > 0 else None


def parse_stream_id(content_type: Any, raw_id: Any) -> StageResult[RequestIdentity]:
    """Parse a composite ``key[:season[:episode]]`` stream ID.

    Non-numeric season/episode segments are treated as absent, not as
    errors.  An empty primary key or unknown content type is malformed
    input.
    """
    if content_type not in _CONTENT_TYPES:
        return NotFound(f"unsupported content type: {content_type!r}")
    if not isinstance(raw_id, str) or not raw_id:
        return NotFound("missing stream id")

    parts = raw_id.split(":")
    primary_key = parts[0]
    if not primary_key:
        return NotFound("empty primary key")

    season = _positive_int(parts[1] if len(parts) > 1 else None)
    episode = _positive_int(parts[2] if len(parts) > 2 else None)
    return Found(
        RequestIdentity(
            content_type=cast(StremioContentType, content_type),
            primary_key=primary_key,
            season=season,
            episode=episode,
        )
    )


def build_search_query(
    content_type: str,
    metadata: Metadata | None,
    season: int | None = None,
    episode: int | None = None,
) -> str:
    """Build the search string for the magnet search surface.

    Series episodes -> ``"Title s03e09"``; everything else ->
    ``"Title 2020"`` (year dropped when unknown).  Season/episode keep
    their natural width above 99 (``s100e07``).
    """
    if metadata is None:
        return ""
    if content_type == "series" and season and episode:
        return f"{metadata.title} s{season:02d}e{episode:02d}"
    year = metadata.year if metadata.year is not None else ""
    return f"{metadata.title} {year}".strip()


def format_stream_title(link: LabeledLink, position: int) -> str:
    """``"1080P • 1.4GB"`` from the labels, else ``"Magnet #<position>"``."""
    parts = [p for p in (link.quality, link.size) if p]
    if parts:
        return TITLE_SEPARATOR.join(parts)
    return f"Magnet #{position}"


def normalize_streams(
    links: Sequence[LabeledLink],
    *,
    limit: int = MAX_STREAMS,
) -> list[StreamRecord]:
    """Convert labeled magnets into stream records, first *limit* only."""
    return [
        StreamRecord(title=format_stream_title(link, i), url=link.url, hints={})
        for i, link in enumerate(links[:limit], start=1)
    ]


class StremioStreamUseCase:
    """Resolve Stremio stream requests into magnet stream records.

    Flow:
        1. Parse the stream ID (malformed -> empty outcome, no I/O).
        2. Resolve title + year from the metadata service.
        3. Build the search query.
        4. Search the magnet source (listing, then detail pages).
        5. Normalize found links; otherwise ask the fallback provider.

    Never raises: every stage adapter degrades to ``NotFound`` / ``[]``.
    """

    def __init__(
        self,
        *,
        metadata: MetadataResolverPort,
        search: SourceSearchPort,
        config: _StremioConfig,
        fallback: FallbackProviderPort | None = None,
    ) -> None:
        self._metadata = metadata
        self._search = search
        self._fallback = fallback
        self._max_streams = config.max_streams
        self._fallback_enabled = config.fallback_enabled

    async def execute(self, request: StremioStreamRequest) -> ResolutionOutcome:
        """Resolve streams for a Stremio request.

        Returns:
            ResolutionOutcome with streams in discovery order.
            Empty when the ID is malformed or no stage found anything.
        """
        parsed = parse_stream_id(request.content_type, request.id)
        if isinstance(parsed, NotFound):
            log.warning(
                "stremio_invalid_id",
                content_type=request.content_type,
                stream_id=request.id,
                reason=parsed.reason,
            )
            return ResolutionOutcome()

        identity = parsed.value
        log.info(
            "stremio_stream_request",
            content_type=identity.content_type,
            primary_key=identity.primary_key,
            season=identity.season,
            episode=identity.episode,
        )

        metadata = await self._resolve_metadata(identity)
        query = build_search_query(
            identity.content_type,
            metadata,
            identity.season,
            identity.episode,
        )
        if not query:
            log.warning(
                "stremio_query_empty",
                content_type=identity.content_type,
                stream_id=request.id,
            )

        links = await self._search.search(query)
        log.info("stremio_search_done", query=query, magnet_count=len(links))

        if links:
            records = normalize_streams(links, limit=self._max_streams)
            return ResolutionOutcome(streams=[r.to_payload() for r in records])

        return ResolutionOutcome(streams=await self._run_fallback(identity))

    async def _resolve_metadata(self, identity: RequestIdentity) -> Metadata | None:
        result = await self._metadata.resolve(
            identity.content_type,
            identity.primary_key,
            identity.season,
            identity.episode,
        )
        if isinstance(result, Found):
            return result.value
        log.info(
            "stremio_metadata_not_found",
            primary_key=identity.primary_key,
            reason=result.reason,
        )
        return None

    async def _run_fallback(self, identity: RequestIdentity) -> list[dict[str, Any]]:
        if not self._fallback_enabled or self._fallback is None:
            log.info("stremio_no_streams", primary_key=identity.primary_key)
            return []

        streams = await self._fallback.fetch(
            identity.content_type, identity.primary_key
        )
        log.info(
            "stremio_fallback_done",
            primary_key=identity.primary_key,
            stream_count=len(streams),
        )
        # Records stay verbatim; only the count is bounded.
        return streams[: self._max_streams]
