"""Shared fixtures for integration tests.

These tests use the real composition (CinemetaClient, MagnetSearchEngine,
StreamApiFallbackClient, StremioStreamUseCase) with mocked HTTP via respx.
"""

from __future__ import annotations

import pytest
import respx

_MAGNETARR_ENV = (
    "MAGNETARR_APP_NAME",
    "MAGNETARR_ENVIRONMENT",
    "MAGNETARR_HTTP_TIMEOUT_SECONDS",
    "MAGNETARR_LOG_LEVEL",
    "MAGNETARR_LOG_FORMAT",
    "MAGNETARR_SEARCH_BASE_URL",
    "MAGNETARR_PROXY_KEY",
    "MAGNETARR_FALLBACK_ENABLED",
    "MAGNETARR_MAX_STREAMS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep MAGNETARR_* variables from the outer shell out of the tests."""
    for name in _MAGNETARR_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def respx_mock() -> respx.MockRouter:
    """Explicit respx mock router for request interception."""
    with respx.mock(assert_all_called=False) as router:
        yield router
