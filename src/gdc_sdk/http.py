# GDC Analytics SDK
# File: http.py
# Version: v1

"""Thin async JSON transport over ``httpx.AsyncClient``.

Every component of the SDK talks to the platform through :class:`HttpClient`.
The underlying client keeps the session cookies set by ``/gdc/account/login``
so that later calls are authenticated.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import httpx
from httpx import RequestError

from .config import GdcConfig
from .errors import TransportError, UnexpectedResponseError

logger = logging.getLogger(__name__)

_BODY_PREVIEW_CHARS = 500


def unwrap(result: Any, *keys: str) -> Any:
    """Walk nested envelope keys of a decoded body.

    Raises :class:`UnexpectedResponseError` when a level is not a dict or
    lacks the key, so malformed 2xx answers surface as SDK errors.
    """
    value = result
    for key in keys:
        if not isinstance(value, dict) or key not in value:
            raise UnexpectedResponseError(keys, body=result)
        value = value[key]
    return value


class HttpClient:
    """JSON-over-HTTP helper with the platform's error and polling rules."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        verify_tls: bool = True,
        poll_interval: float = 0.5,
        max_polls: int = 60,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.poll_interval = poll_interval
        self.max_polls = max_polls
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            verify=verify_tls,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    @classmethod
    def from_config(
        cls,
        config: GdcConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "HttpClient":
        return cls(
            config.base_url,
            timeout=float(config.timeout_seconds),
            verify_tls=config.verify_tls,
            poll_interval=config.poll_interval_seconds,
            max_polls=config.max_polls,
            transport=transport,
        )

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Verbs
    # ------------------------------------------------------------------

    async def get(self, url: str) -> Any:
        return await self.request("GET", url)

    async def post(self, url: str, body: Any = None) -> Any:
        return await self.request("POST", url, body)

    async def put(self, url: str, body: Any = None) -> Any:
        return await self.request("PUT", url, body)

    async def delete(self, url: str) -> Any:
        return await self.request("DELETE", url)

    async def request(self, method: str, url: str, body: Any = None) -> Any:
        """Issue a request and return the decoded JSON body.

        Returns ``None`` for 204 and for bodiless answers to writes. Raises
        :class:`TransportError` for non-2xx answers, network failures,
        undecodable 2xx bodies and an exhausted 202 polling budget.
        """
        response = await self._send(method, url, body)

        polls = 0
        while response.status_code == 202:
            if polls >= self.max_polls:
                raise TransportError(
                    f"Gave up polling '{url}' after {polls} attempts (HTTP 202).",
                    status_code=202,
                    url=url,
                    method=method,
                )
            polls += 1
            poll_url = response.headers.get("Location") or url
            logger.debug("Polling %s (attempt %d)", poll_url, polls)
            await asyncio.sleep(self.poll_interval)
            response = await self._send("GET", poll_url, None)

        if not response.is_success:
            status = response.status_code
            body_preview = response.text[:_BODY_PREVIEW_CHARS]
            raise TransportError(
                f"{method} '{url}' failed (HTTP {status}). "
                f"Response snippet: {body_preview}",
                status_code=status,
                body=response.text,
                url=url,
                method=method,
            )

        # A GET always expects a document; an empty one is undecodable.
        if response.status_code == 204 or (
            method != "GET" and not response.content.strip()
        ):
            return None

        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(
                f"{method} '{url}' returned a body that is not JSON "
                f"(HTTP {response.status_code}).",
                status_code=response.status_code,
                body=response.text,
                url=url,
                method=method,
            ) from exc

    async def _send(self, method: str, url: str, body: Any) -> httpx.Response:
        try:
            if body is None:
                response = await self._client.request(method, url)
            else:
                response = await self._client.request(method, url, json=body)
        except RequestError as exc:
            raise TransportError(
                f"Error calling {method} '{url}': {exc}",
                url=url,
                method=method,
            ) from exc

        logger.debug("%s %s -> HTTP %d", method, url, response.status_code)
        return response
