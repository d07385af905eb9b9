# GDC Analytics SDK
# File: session.py
# Version: v1

"""Login / logout against the GDC account API."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

from .errors import GdcError, TransportError
from .http import HttpClient, unwrap

logger = logging.getLogger(__name__)

TOKEN_PATH = "/gdc/account/token"
LOGIN_PATH = "/gdc/account/login"
BOOTSTRAP_PATH = "/gdc/app/account/bootstrap"

_LAST_SEGMENT = re.compile(r"([^/]+)/?$")


def _last_path_segment(uri: str) -> str:
    match = _LAST_SEGMENT.search(uri or "")
    if not match:
        raise GdcError(f"Cannot extract an id from URI {uri!r}")
    return match.group(1)


@dataclass
class SessionManager:
    """Session handling. Cookies live in the shared :class:`HttpClient`."""

    http: HttpClient

    async def is_logged_in(self) -> Any:
        """Return the token payload; raises :class:`TransportError` if not logged in."""
        return await self.http.get(TOKEN_PATH)

    async def login(self, username: str, password: str) -> Any:
        payload = {
            "postUserLogin": {
                "login": username,
                "password": password,
                "remember": 1,
                "captcha": "",
                "verifyCaptcha": "",
            }
        }
        result = await self.http.post(LOGIN_PATH, payload)
        logger.info("Logged in as %s", username)
        return result

    async def get_current_profile_id(self) -> str:
        """Account id of the logged-in user, from the bootstrap resource."""
        bootstrap = await self.http.get(BOOTSTRAP_PATH)
        user_uri = unwrap(
            bootstrap, "bootstrapResource", "accountSetting", "links", "self"
        )
        return _last_path_segment(user_uri)

    async def logout(self) -> None:
        """Log out the current user. A no-op when nobody is logged in."""
        try:
            await self.is_logged_in()
        except TransportError:
            logger.debug("Not logged in; nothing to log out")
            return None

        user_id = await self.get_current_profile_id()

        await self.http.delete(f"{LOGIN_PATH}/{user_id}")
        logger.info("Logged out user %s", user_id)
        return None
