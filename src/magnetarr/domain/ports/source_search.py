"""Port for magnet source search."""

from __future__ import annotations

from typing import Protocol

from magnetarr.domain.entities.stremio import LabeledLink


class SourceSearchPort(Protocol):
    """Async interface for scraping magnet links for a search query."""

    async def search(self, query: str) -> list[LabeledLink]: ...
