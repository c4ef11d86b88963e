"""Magnet and detail-link extraction from search-surface markup."""

from __future__ import annotations

from collections.abc import Sequence

from bs4 import BeautifulSoup

from magnetarr.domain.entities.stremio import LabeledLink
from magnetarr.infrastructure.common.html_selectors import (
    closest,
    flatten_text,
    select_hrefs,
    unique,
)
from magnetarr.infrastructure.torrents.labels import classify

MAGNET_PREFIX = "magnet:?xt="
DETAIL_PREFIX = "/torrent/"
DEFAULT_DETAIL_LIMIT = 5

# Containers that hold one search result (table row, list item, card, ...)
_ROW_TAGS = frozenset({"tr", "li"})
_ROW_CLASSES = frozenset(
    {"search-result", "result", "row", "card", "table", "torrent"}
)


def extract_magnets(soup: BeautifulSoup) -> list[str]:
    """Return distinct magnet URIs in document order."""
    return unique(href for _, href in select_hrefs(soup, MAGNET_PREFIX))


def extract_detail_links(
    soup: BeautifulSoup,
    base_url: str,
    *,
    limit: int = DEFAULT_DETAIL_LIMIT,
) -> list[str]:
    """Return up to *limit* distinct absolute detail-page URLs.

    Relative hrefs are appended to *base_url* as-is so that a proxy base
    with a path prefix keeps it.
    """
    base = base_url.rstrip("/")
    urls = [f"{base}{href}" for _, href in select_hrefs(soup, DETAIL_PREFIX)]
    return unique(urls)[:limit]


def enrich_links(soup: BeautifulSoup, links: Sequence[str]) -> list[LabeledLink]:
    """Attach quality/size labels to *links* from their surrounding row.

    Every input link is returned, in input order.  A link without a
    discoverable row keeps empty labels.  When a magnet appears in several
    anchors, the last anchor's row wins.
    """
    wanted = set(links)
    labeled: dict[str, LabeledLink] = {}
    for anchor, href in select_hrefs(soup, MAGNET_PREFIX):
        if href not in wanted:
            continue
        row = closest(anchor, tags=_ROW_TAGS, classes=_ROW_CLASSES)
        labels = classify(flatten_text(row)) if row is not None else classify("")
        labeled[href] = LabeledLink(url=href, quality=labels.quality, size=labels.size)

    return [labeled.get(link) or LabeledLink(url=link) for link in links]
