# GDC Analytics SDK
# File: errors.py
# Version: v1

"""Exception hierarchy raised by the SDK."""

from __future__ import annotations

from typing import Any, Iterable, Optional


class GdcError(RuntimeError):
    """Base class for every error raised by the SDK."""


class TransportError(GdcError):
    """The platform answered with a non-2xx status, or could not be reached.

    ``status_code`` is ``None`` for network-level failures. A 2xx status
    means the response body could not be decoded as JSON.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Any = None,
        url: Optional[str] = None,
        method: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.url = url
        self.method = method


class NotFoundError(GdcError):
    """An identifier was missing from the batch identifier resolution."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"identifier not found: {identifier!r}")
        self.identifier = identifier


class UnknownObjectError(GdcError):
    """A metadata payload matched none of the known object shapes."""

    def __init__(self, root_keys: Iterable[str] = ()) -> None:
        self.root_keys = sorted(root_keys)
        super().__init__(f"Unknown object! (root keys: {self.root_keys})")


class InvalidArgumentError(GdcError, ValueError):
    """An unsupported argument value, e.g. a folder type."""


class UnexpectedResponseError(GdcError):
    """A 2xx response decoded fine but lacked the expected envelope."""

    def __init__(self, path: Iterable[str], body: Any = None) -> None:
        self.path = list(path)
        self.body = body
        super().__init__(
            f"Response has no {'.'.join(self.path)!r}. "
            f"Response snippet: {repr(body)[:500]}"
        )
