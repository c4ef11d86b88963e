"""Port for the secondary stream provider."""

from __future__ import annotations

from typing import Any, Protocol


class FallbackProviderPort(Protocol):
    """Async interface for a provider that already speaks the Stremio shape."""

    async def fetch(self, content_type: str, primary_key: str) -> list[dict[str, Any]]:
        """Return the provider's ``streams`` array verbatim (empty on failure)."""
        ...
