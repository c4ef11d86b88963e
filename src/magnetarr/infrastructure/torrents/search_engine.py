"""Magnet search over an HTML search surface (listing -> detail pages)."""

from __future__ import annotations

from urllib.parse import quote

import httpx
import structlog

from magnetarr.domain.entities.stremio import LabeledLink
from magnetarr.infrastructure.common.html_selectors import parse_html
from magnetarr.infrastructure.common.resilience import (
    DEFAULT_BASE_DELAY,
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT,
    RETRYABLE_ERRORS,
    with_resilience,
)
from magnetarr.infrastructure.torrents.magnet_extractors import (
    DEFAULT_DETAIL_LIMIT,
    enrich_links,
    extract_detail_links,
    extract_magnets,
)

log = structlog.get_logger(__name__)

PROXY_KEY_HEADER = "X-Proxy-Key"

# A scraped href can still fail to build a request URL (control characters).
_FETCH_ERRORS: tuple[type[BaseException], ...] = (
    *RETRYABLE_ERRORS,
    httpx.InvalidURL,
)


def build_candidate_urls(base_url: str, query: str) -> list[str]:
    """Listing URLs to try, in order: browse form, then search form."""
    if not query:
        return []
    base = base_url.rstrip("/")
    q = quote(query, safe="")
    return [
        f"{base}/browse/?q={q}",
        f"{base}/search?q={q}",
    ]


def _dedupe_by_url(links: list[LabeledLink]) -> list[LabeledLink]:
    seen: set[str] = set()
    result: list[LabeledLink] = []
    for link in links:
        if link.url in seen:
            continue
        seen.add(link.url)
        result.append(link)
    return result


class MagnetSearchEngine:
    """Scrape magnet links for a query from the search surface.

    Flow per candidate listing URL (first non-empty candidate wins):
        1. Fetch the listing page (timeout + retry).
        2. Magnets on the listing -> enrich and return.
        3. Otherwise visit up to ``detail_limit`` detail pages sequentially,
           enrich their magnets, dedupe, and return when non-empty.

    Implements ``SourceSearchPort``.
    """

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        base_url: str,
        proxy_key: str | None = None,
        detail_limit: int = DEFAULT_DETAIL_LIMIT,
        retries: int = DEFAULT_RETRIES,
        retry_base_delay: float = DEFAULT_BASE_DELAY,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self._detail_limit = detail_limit
        self._retries = retries
        self._retry_base_delay = retry_base_delay
        self._timeout = timeout
        self._headers = {"Accept": "text/html"}
        if proxy_key:
            self._headers[PROXY_KEY_HEADER] = proxy_key

    async def search(self, query: str) -> list[LabeledLink]:
        """Return labeled magnet links for *query* (empty when nothing found)."""
        if not query:
            return []

        for url in build_candidate_urls(self._base_url, query):
            try:
                html = await self._fetch_html(url)
            except _FETCH_ERRORS:
                log.warning("search_listing_failed", url=url, exc_info=True)
                continue

            soup = parse_html(html)
            magnets = extract_magnets(soup)
            if magnets:
                links = enrich_links(soup, magnets)
                log.info(
                    "search_listing_magnets",
                    url=url,
                    query=query,
                    count=len(links),
                )
                return links

            details = extract_detail_links(
                soup, self._base_url, limit=self._detail_limit
            )
            if not details:
                log.debug("search_listing_empty", url=url, query=query)
                continue

            from_details = await self._scrape_details(details)
            if from_details:
                log.info(
                    "search_detail_magnets",
                    url=url,
                    query=query,
                    detail_pages=len(details),
                    count=len(from_details),
                )
                return from_details

        log.info("search_no_magnets", query=query)
        return []

    async def _scrape_details(self, detail_urls: list[str]) -> list[LabeledLink]:
        """Visit detail pages one by one; a failed page is skipped."""
        collected: list[LabeledLink] = []
        for url in detail_urls:
            try:
                html = await self._fetch_html(url)
            except _FETCH_ERRORS:
                log.warning("search_detail_failed", url=url, exc_info=True)
                continue

            soup = parse_html(html)
            magnets = extract_magnets(soup)
            if magnets:
                collected.extend(enrich_links(soup, magnets))

        return _dedupe_by_url(collected)

    async def _fetch_html(self, url: str) -> str:
        """GET *url* through the resilience wrapper; non-2xx raises."""

        async def _get() -> str:
            resp = await self._http.get(url, headers=self._headers)
            resp.raise_for_status()
            return resp.text

        return await with_resilience(
            _get,
            retries=self._retries,
            base_delay=self._retry_base_delay,
            timeout=self._timeout,
            context=url,
        )
