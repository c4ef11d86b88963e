"""Tests for CinemetaClient and its parsing helpers."""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from magnetarr.domain.entities.stremio import Found, Metadata, NotFound
from magnetarr.domain.ports import MetadataResolverPort
from magnetarr.infrastructure.metadata.cinemeta import (
    CinemetaClient,
    build_lookup_key,
    parse_meta,
)

_BASE = "https://v3-cinemeta.strem.io"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_client(
    handler: Callable[[httpx.Request], httpx.Response],
) -> CinemetaClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CinemetaClient(http_client=http, base_url=_BASE, timeout=5.0)


def _json_handler(
    payload: object, status_code: int = 200, seen: list[httpx.Request] | None = None
) -> Callable[[httpx.Request], httpx.Response]:
    def _handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=payload)

    return _handler


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


class TestBuildLookupKey:
    def test_bare_key(self) -> None:
        assert build_lookup_key("tt123") == "tt123"

    def test_episode_key(self) -> None:
        assert build_lookup_key("tt123", 1, 5) == "tt123:1:5"

    def test_season_only_uses_bare_key(self) -> None:
        assert build_lookup_key("tt123", 1, None) == "tt123"


class TestParseMeta:
    def test_name_and_year(self) -> None:
        assert parse_meta({"name": "Sample", "year": 2020}) == Metadata("Sample", 2020)

    def test_title_fallback(self) -> None:
        assert parse_meta({"title": "Sample"}) == Metadata("Sample", None)

    def test_release_info_range(self) -> None:
        meta = parse_meta({"name": "Show", "releaseInfo": "2011–2019"})
        assert meta == Metadata("Show", 2011)

    def test_string_year(self) -> None:
        assert parse_meta({"name": "Show", "year": "2015"}) == Metadata("Show", 2015)

    def test_unparseable_year(self) -> None:
        assert parse_meta({"name": "Show", "releaseInfo": "TBA"}) == Metadata("Show")

    def test_empty_title(self) -> None:
        assert parse_meta({"name": "  ", "year": 2020}) is None

    def test_missing_title(self) -> None:
        assert parse_meta({"year": 2020}) is None


# ---------------------------------------------------------------------------
# CinemetaClient.resolve
# ---------------------------------------------------------------------------


class TestCinemetaClient:
    def test_implements_port(self) -> None:
        assert isinstance(_make_client(_json_handler({})), MetadataResolverPort)

    def test_meta_url_encodes_key(self) -> None:
        client = _make_client(_json_handler({}))
        assert client.meta_url("series", "tt1:2:3") == (
            f"{_BASE}/meta/series/tt1%3A2%3A3.json"
        )

    @pytest.mark.asyncio()
    async def test_movie_lookup(self) -> None:
        seen: list[httpx.Request] = []
        client = _make_client(
            _json_handler({"meta": {"name": "Sample", "year": 2020}}, seen=seen)
        )

        result = await client.resolve("movie", "tt1234567")

        assert result == Found(Metadata(title="Sample", year=2020))
        assert seen[0].url.path == "/meta/movie/tt1234567.json"
        assert seen[0].headers["accept"] == "application/json"

    @pytest.mark.asyncio()
    async def test_episode_lookup_uses_composite_key(self) -> None:
        seen: list[httpx.Request] = []
        client = _make_client(
            _json_handler({"meta": {"name": "Show", "releaseInfo": "2011-"}}, seen=seen)
        )

        result = await client.resolve("series", "tt7654321", 3, 9)

        assert result == Found(Metadata(title="Show", year=2011))
        assert seen[0].url.path == "/meta/series/tt7654321:3:9.json"

    @pytest.mark.asyncio()
    async def test_not_found_status(self) -> None:
        client = _make_client(_json_handler({"err": "x"}, status_code=404))
        result = await client.resolve("movie", "tt0000000")
        assert isinstance(result, NotFound)
        assert "404" in result.reason

    @pytest.mark.asyncio()
    async def test_network_error(self) -> None:
        def _handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        result = await _make_client(_handler).resolve("movie", "tt1")
        assert isinstance(result, NotFound)

    @pytest.mark.asyncio()
    async def test_invalid_json(self) -> None:
        def _handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>oops</html>")

        result = await _make_client(_handler).resolve("movie", "tt1")
        assert isinstance(result, NotFound)

    @pytest.mark.asyncio()
    @pytest.mark.parametrize("payload", [{}, {"meta": None}, [], {"meta": "x"}])
    async def test_missing_meta(self, payload: object) -> None:
        result = await _make_client(_json_handler(payload)).resolve("movie", "tt1")
        assert isinstance(result, NotFound)

    @pytest.mark.asyncio()
    async def test_meta_without_title(self) -> None:
        client = _make_client(_json_handler({"meta": {"name": "", "year": 2020}}))
        assert isinstance(await client.resolve("movie", "tt1"), NotFound)
