# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from itsdangerous import BadData, URLSafeTimedSerializer
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("cookieauth.auth.session")

COOKIE_NAME = "session.id"
DEFAULT_SALT = "cookieauth.session.v1"
DEFAULT_MAX_AGE_SECONDS = 30 * 24 * 3600  # 30 days


@dataclass
class Session:
    name: str
    values: Dict[str, Any] = field(default_factory=dict)
    is_new: bool = True


class CookieSessionStore:
    """Session state kept entirely in a signed cookie.

    The whole ``values`` dict is serialized into the cookie, so nothing is
    stored server-side. A missing, forged, expired or otherwise unreadable
    cookie yields a fresh empty session instead of an error.
    """

    def __init__(
        self,
        secret_key: str,
        *,
        salt: str = DEFAULT_SALT,
        max_age: int = DEFAULT_MAX_AGE_SECONDS,
        cookie_options: Optional[dict] = None,
    ):
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._serializer = URLSafeTimedSerializer(secret_key=secret_key, salt=salt)
        self.max_age = max_age
        self.cookie_options = dict(cookie_options or {"httponly": True, "samesite": "lax", "secure": False})

    def encode(self, values: Dict[str, Any]) -> str:
        return self._serializer.dumps(values)

    def decode(self, token: str) -> Optional[Dict[str, Any]]:
        if not token:
            return None
        try:
            # max_age 0 means a browser-session cookie with no signature age limit.
            data = self._serializer.loads(token, max_age=self.max_age if self.max_age > 0 else None)
        except BadData as e:
            logger.debug("Discarding unreadable session cookie: %s", type(e).__name__)
            return None
        if not isinstance(data, dict):
            logger.debug("Discarding session cookie with non-object payload")
            return None
        return data

    def get(self, request: Request, name: str = COOKIE_NAME) -> Session:
        values = self.decode(request.cookies.get(name, ""))
        if values is None:
            return Session(name=name)
        return Session(name=name, values=values, is_new=False)

    def save(self, response: Response, session: Session) -> None:
        if self.max_age < 0:
            response.delete_cookie(session.name, path="/")
            return
        response.set_cookie(
            session.name,
            self.encode(session.values),
            max_age=self.max_age or None,
            path="/",
            **self.cookie_options,
        )
