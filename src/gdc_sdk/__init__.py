# GDC Analytics SDK
# File: __init__.py
# Version: v1

"""Async Python SDK for the GDC analytics platform REST API."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from .client import GdcClient
from .config import GdcConfig
from .errors import (
    GdcError,
    InvalidArgumentError,
    NotFoundError,
    TransportError,
    UnexpectedResponseError,
    UnknownObjectError,
)
from .models import DEFAULT_PALETTE

__all__ = [
    "__version__",
    "DEFAULT_PALETTE",
    "GdcClient",
    "GdcConfig",
    "GdcError",
    "InvalidArgumentError",
    "NotFoundError",
    "TransportError",
    "UnexpectedResponseError",
    "UnknownObjectError",
]


def _resolve_version() -> str:
    """Resolve installed distribution version.

    Falls back to a reasonable default when running from source without an
    installed distribution.
    """
    try:
        return version("gdc-analytics-sdk")
    except PackageNotFoundError:
        return "0.1.0"


__version__ = _resolve_version()
