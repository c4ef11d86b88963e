"""Tests for magnet / detail-link extraction and row enrichment."""

from __future__ import annotations

from magnetarr.domain.entities.stremio import LabeledLink
from magnetarr.infrastructure.common.html_selectors import parse_html
from magnetarr.infrastructure.torrents.magnet_extractors import (
    enrich_links,
    extract_detail_links,
    extract_magnets,
)

_M1 = "magnet:?xt=urn:btih:1111"
_M2 = "magnet:?xt=urn:btih:2222"
_M3 = "magnet:?xt=urn:btih:3333"

_LISTING_HTML = f"""\
<html><body>
<table>
  <tr><td>Sample 2020 1080p</td><td>1.4 GB</td><td><a href="{_M1}">dl</a></td></tr>
  <tr><td>Sample 2020 720p</td><td>700 MB</td><td><a href="{_M2}">dl</a></td></tr>
  <tr><td>Sample 2020 mirror</td><td><a href="{_M1}">dl again</a></td></tr>
</table>
<a href="magnet:?dn=not-a-hash">bad</a>
</body></html>
"""


def _detail_listing(n: int, base_path: str = "/torrent/") -> str:
    anchors = "".join(f'<a href="{base_path}{i}-sample">r{i}</a>' for i in range(n))
    return f"<html><body><ul>{anchors}</ul></body></html>"


# ---------------------------------------------------------------------------
# extract_magnets
# ---------------------------------------------------------------------------


class TestExtractMagnets:
    def test_distinct_in_document_order(self) -> None:
        soup = parse_html(_LISTING_HTML)
        assert extract_magnets(soup) == [_M1, _M2]

    def test_requires_xt_prefix(self) -> None:
        soup = parse_html('<a href="magnet:?dn=x">x</a>')
        assert extract_magnets(soup) == []

    def test_no_magnets(self) -> None:
        assert extract_magnets(parse_html(_detail_listing(3))) == []


# ---------------------------------------------------------------------------
# extract_detail_links
# ---------------------------------------------------------------------------


class TestExtractDetailLinks:
    def test_resolves_against_base(self) -> None:
        soup = parse_html(_detail_listing(2))
        assert extract_detail_links(soup, "https://ext.to") == [
            "https://ext.to/torrent/0-sample",
            "https://ext.to/torrent/1-sample",
        ]

    def test_keeps_proxy_path_prefix(self) -> None:
        soup = parse_html(_detail_listing(1))
        assert extract_detail_links(soup, "https://proxy.local/ext/") == [
            "https://proxy.local/ext/torrent/0-sample"
        ]

    def test_capped_at_five(self) -> None:
        soup = parse_html(_detail_listing(9))
        links = extract_detail_links(soup, "https://ext.to")
        assert len(links) == 5
        assert links[-1] == "https://ext.to/torrent/4-sample"

    def test_dedupes_before_capping(self) -> None:
        html = (
            '<a href="/torrent/a">a</a><a href="/torrent/a">a</a>'
            '<a href="/torrent/b">b</a>'
        )
        links = extract_detail_links(parse_html(html), "https://ext.to", limit=2)
        assert links == ["https://ext.to/torrent/a", "https://ext.to/torrent/b"]

    def test_ignores_other_paths(self) -> None:
        html = '<a href="/browse/?q=x">x</a><a href="/user/torrent/1">y</a>'
        assert extract_detail_links(parse_html(html), "https://ext.to") == []


# ---------------------------------------------------------------------------
# enrich_links
# ---------------------------------------------------------------------------


class TestEnrichLinks:
    def test_labels_from_containing_row(self) -> None:
        soup = parse_html(_LISTING_HTML)
        links = enrich_links(soup, [_M2])
        assert links == [LabeledLink(url=_M2, quality="720P", size="700 MB")]

    def test_last_anchor_row_wins(self) -> None:
        soup = parse_html(_LISTING_HTML)
        [link] = enrich_links(soup, [_M1])
        # The third row mentions _M1 again without quality or size.
        assert link == LabeledLink(url=_M1, quality=None, size=None)

    def test_link_without_row_keeps_empty_labels(self) -> None:
        soup = parse_html(f'<div><p>1080p 2 GB <a href="{_M3}">x</a></p></div>')
        assert enrich_links(soup, [_M3]) == [LabeledLink(url=_M3)]

    def test_class_based_row(self) -> None:
        soup = parse_html(
            f'<div class="search-result"><span>2160p</span>'
            f'<span>40.2 GB</span><a href="{_M3}">x</a></div>'
        )
        assert enrich_links(soup, [_M3]) == [
            LabeledLink(url=_M3, quality="2160P", size="40.2 GB")
        ]

    def test_every_input_link_is_returned_in_order(self) -> None:
        soup = parse_html(_LISTING_HTML)
        links = enrich_links(soup, [_M3, _M2, _M1])
        assert [link.url for link in links] == [_M3, _M2, _M1]
        assert links[0] == LabeledLink(url=_M3)

    def test_idempotent(self) -> None:
        soup = parse_html(_LISTING_HTML)
        first = enrich_links(soup, [_M1, _M2])
        second = enrich_links(soup, [link.url for link in first])
        assert first == second
