"""BeautifulSoup helpers for attribute-prefix link scraping.

The scraping code only needs four capabilities from a parsed document:
select anchors by ``href`` prefix, read an attribute, walk up to the
nearest row-like ancestor, and get the flattened text of that ancestor.
"""

from __future__ import annotations

from collections.abc import Iterable

from bs4 import BeautifulSoup, Tag


def parse_html(html: str) -> BeautifulSoup:
    """Parse an HTML string into a BeautifulSoup tree (``lxml`` parser)."""
    return BeautifulSoup(html, "lxml")


def select_hrefs(root: BeautifulSoup | Tag, prefix: str) -> list[tuple[Tag, str]]:
    """Return ``(anchor, href)`` pairs for anchors whose href starts with *prefix*.

    Document order is preserved; anchors with an empty href are skipped.
    """
    pairs: list[tuple[Tag, str]] = []
    for anchor in root.find_all("a", href=True):
        href = anchor.get("href")
        if isinstance(href, str) and href and href.startswith(prefix):
            pairs.append((anchor, href))
    return pairs


def unique(values: Iterable[str]) -> list[str]:
    """Deduplicate preserving first-seen order."""
    return list(dict.fromkeys(values))


def closest(
    element: Tag,
    *,
    tags: frozenset[str] = frozenset(),
    classes: frozenset[str] = frozenset(),
) -> Tag | None:
    """Return *element* or its nearest ancestor matching a tag name or class.

    Mirrors CSS ``closest()``: the element itself is tested first.
    """
    node: Tag | None = element
    while node is not None and isinstance(node, Tag):
        if node.name in tags:
            return node
        node_classes = node.get("class") or []
        if classes.intersection(node_classes):
            return node
        node = node.parent
        if isinstance(node, BeautifulSoup):
            return None
    return None


def flatten_text(element: Tag) -> str:
    """Get the element's text with all whitespace runs collapsed."""
    return " ".join(element.get_text(" ").split())
