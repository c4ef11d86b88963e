"""Quality and size classification for scraped result rows."""

from __future__ import annotations

import re

from magnetarr.domain.entities.stremio import LinkLabels

# --- Pattern tables ---

_QUALITY_RE = re.compile(r"(2160p|4k|1080p|720p|480p)", re.IGNORECASE)
_SIZE_RE = re.compile(r"(\d+(?:\.\d+)?\s?(?:GB|MB))", re.IGNORECASE)


def classify(text: str) -> LinkLabels:
    """Extract quality and size labels from flattened row text.

    Both patterns are independent; the first match of each wins and is
    upper-cased.  Unmatched fields stay ``None``.

    >>> classify("Movie 1080p x264 1.4gb")
    LinkLabels(quality='1080P', size='1.4GB')
    """
    if not text:
        return LinkLabels()

    quality = _QUALITY_RE.search(text)
    size = _SIZE_RE.search(text)
    return LinkLabels(
        quality=quality.group(1).upper() if quality else None,
        size=size.group(1).upper() if size else None,
    )
