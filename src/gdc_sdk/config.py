# GDC Analytics SDK
# File: config.py
# Version: v1

"""Configuration loading for the GDC Analytics SDK."""

from __future__ import annotations

from dataclasses import dataclass
import os

DEFAULT_BASE_URL = "https://secure.gooddata.com"


def _parse_bool_env(name: str, default: bool = False) -> bool:
    """Parse a boolean-like environment variable.

    Accepts 1/0, true/false, yes/no, on/off (case-insensitive).
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "on"}


def _parse_int_env(
    name: str,
    default: int,
    min_value: int | None = None,
    max_value: int | None = None,
) -> int:
    """Parse an int environment variable, clamped, falling back on garbage."""
    raw = os.getenv(name)
    try:
        value = int(str(raw).strip()) if raw is not None and str(raw).strip() else default
    except ValueError:
        value = default

    if min_value is not None:
        value = max(value, min_value)
    if max_value is not None:
        value = min(value, max_value)
    return value


@dataclass
class GdcConfig:
    """Connection settings for a GDC platform host.

    Credentials are only consumed by the MCP tool layer; SDK callers log in
    explicitly with ``GdcClient.login``.
    """

    base_url: str = DEFAULT_BASE_URL
    username: str | None = None
    password: str | None = None
    project_id: str | None = None
    mock_mode: bool = False

    verify_tls: bool = True
    timeout_seconds: int = 30

    # Execution results answer 202 until computed.
    poll_interval_ms: int = 500
    max_polls: int = 60

    log_level: str = "WARNING"

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll_interval_ms / 1000.0

    @classmethod
    def from_env(cls) -> "GdcConfig":
        """Create configuration from ``GDC_*`` environment variables."""
        base_url = (os.getenv("GDC_BASE_URL") or "").strip() or DEFAULT_BASE_URL

        return cls(
            base_url=base_url.rstrip("/"),
            username=os.getenv("GDC_USERNAME") or None,
            password=os.getenv("GDC_PASSWORD") or None,
            project_id=os.getenv("GDC_PROJECT_ID") or None,
            mock_mode=_parse_bool_env("GDC_MOCK_MODE", default=False),
            verify_tls=_parse_bool_env("GDC_VERIFY_TLS", default=True),
            timeout_seconds=_parse_int_env(
                "GDC_TIMEOUT_SECONDS", default=30, min_value=1, max_value=600
            ),
            poll_interval_ms=_parse_int_env(
                "GDC_POLL_INTERVAL_MS", default=500, min_value=0, max_value=60000
            ),
            max_polls=_parse_int_env(
                "GDC_MAX_POLLS", default=60, min_value=1, max_value=10000
            ),
            log_level=(os.getenv("GDC_LOG_LEVEL") or "WARNING").strip().upper(),
        )
