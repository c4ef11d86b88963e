"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "magnetarr",
    "environment": "dev",
    "http": {
        "timeout_seconds": 10.0,
        "follow_redirects": True,
        "user_agent": "Magnetarr/0.1.0",
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "search": {
        "base_url": "https://ext.to",
        "proxy_key": None,
        "detail_page_limit": 5,
        "max_retries": 2,
        "retry_base_delay_seconds": 0.5,
    },
    "metadata": {
        "base_url": "https://v3-cinemeta.strem.io",
    },
    "fallback": {
        "enabled": True,
        "base_url": "https://torrentio.strem.fun",
    },
    "stremio": {
        "max_streams": 20,
    },
}
