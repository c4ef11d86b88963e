"""Domain entities for Stremio stream resolution.

Pure value objects; no framework dependencies, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Literal, TypeVar, Union

StremioContentType = Literal["movie", "series"]

T = TypeVar("T")


@dataclass(frozen=True)
class Found(Generic[T]):
    """A pipeline stage produced a usable value."""

    value: T


@dataclass(frozen=True)
class NotFound:
    """A pipeline stage produced nothing (not an error)."""

    reason: str = ""


StageResult = Union[Found[T], NotFound]


@dataclass(frozen=True)
class StremioStreamRequest:
    """Inbound stream request as received from the addon client."""

    content_type: str
    id: str
    extra: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RequestIdentity:
    """Parsed Stremio stream ID.

    Created from ``tt1234567`` (movie) or ``tt1234567:1:5``
    (series, season 1, episode 5).
    """

    content_type: StremioContentType
    primary_key: str
    season: int | None = None
    episode: int | None = None


@dataclass(frozen=True)
class Metadata:
    """Title and release year from the metadata service."""

    title: str
    year: int | None = None


@dataclass(frozen=True)
class LinkLabels:
    """Quality and size tags scraped from a result row."""

    quality: str | None = None  # "1080P", "4K", ...
    size: str | None = None  # "1.4GB", "700 MB", ...


@dataclass(frozen=True)
class LabeledLink:
    """A magnet URI with optional quality/size labels."""

    url: str
    quality: str | None = None
    size: str | None = None


@dataclass(frozen=True)
class StreamRecord:
    """Stremio protocol Stream object produced by the normalizer."""

    title: str  # "1080P • 1.4GB" or "Magnet #3"
    url: str  # magnet URI
    hints: dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        """Serialize into the Stremio JSON shape."""
        return {
            "title": self.title,
            "url": self.url,
            "behaviorHints": dict(self.hints),
        }


@dataclass(frozen=True)
class ResolutionOutcome:
    """Result of a stream resolution, always present (possibly empty)."""

    streams: list[dict[str, Any]] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        return {"streams": list(self.streams)}
