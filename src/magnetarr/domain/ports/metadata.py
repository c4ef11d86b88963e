"""Port for title metadata lookups."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from magnetarr.domain.entities.stremio import Metadata, StageResult


@runtime_checkable
class MetadataResolverPort(Protocol):
    """Async interface for resolving title + year for a catalog ID."""

    async def resolve(
        self,
        content_type: str,
        primary_key: str,
        season: int | None = None,
        episode: int | None = None,
    ) -> StageResult[Metadata]:
        """Lookup metadata for *primary_key*.

        Returns ``Found(Metadata)`` or ``NotFound`` on any failure.
        """
        ...
