"""Shared test fixtures for Magnetarr test suite."""

from __future__ import annotations

from dataclasses import dataclass
from unittest.mock import AsyncMock

import pytest

from magnetarr.domain.entities.stremio import Found, LabeledLink, Metadata, NotFound

# ---------------------------------------------------------------------------
# Config / port fixtures
# ---------------------------------------------------------------------------


@dataclass
class FakeStremioConfig:
    """Minimal config satisfying the use case's config protocol."""

    max_streams: int = 20
    fallback_enabled: bool = True


@pytest.fixture()
def stremio_config() -> FakeStremioConfig:
    return FakeStremioConfig()


@pytest.fixture()
def sample_metadata() -> Metadata:
    return Metadata(title="Sample", year=2020)


@pytest.fixture()
def mock_metadata(sample_metadata: Metadata) -> AsyncMock:
    """Mock MetadataResolverPort returning Found(Sample, 2020)."""
    resolver = AsyncMock()
    resolver.resolve = AsyncMock(return_value=Found(sample_metadata))
    return resolver


@pytest.fixture()
def missing_metadata() -> AsyncMock:
    resolver = AsyncMock()
    resolver.resolve = AsyncMock(return_value=NotFound("no meta"))
    return resolver


@pytest.fixture()
def mock_search() -> AsyncMock:
    """Mock SourceSearchPort returning one labeled magnet."""
    search = AsyncMock()
    search.search = AsyncMock(
        return_value=[
            LabeledLink(url="magnet:?xt=urn:btih:aaaa", quality="1080P", size="1.4GB")
        ]
    )
    return search


@pytest.fixture()
def empty_search() -> AsyncMock:
    search = AsyncMock()
    search.search = AsyncMock(return_value=[])
    return search


@pytest.fixture()
def mock_fallback() -> AsyncMock:
    """Mock FallbackProviderPort returning two provider records."""
    fallback = AsyncMock()
    fallback.fetch = AsyncMock(
        return_value=[
            {"name": "Torrentio", "title": "Sample 1080p", "infoHash": "aaaa"},
            {"name": "Torrentio", "title": "Sample 720p", "infoHash": "bbbb"},
        ]
    )
    return fallback
