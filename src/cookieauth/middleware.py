# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import asyncio
import logging

from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger("cookieauth.middleware")


class WriteTimeoutMiddleware:
    """Bound each HTTP request/response cycle to ``timeout`` seconds.

    If the deadline passes before the response has started, a 503 is sent.
    If it passes mid-response the response is abandoned and the server closes
    the connection.
    """

    def __init__(self, app: ASGIApp, timeout: float = 15.0):
        self.app = app
        self.timeout = timeout

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not self.timeout or self.timeout <= 0:
            await self.app(scope, receive, send)
            return

        started = False

        async def _send(message: Message) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        try:
            await asyncio.wait_for(self.app(scope, receive, _send), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Request %s %s exceeded write timeout of %.1fs",
                scope.get("method", ""),
                scope.get("path", ""),
                self.timeout,
            )
            if not started:
                await PlainTextResponse("Service Unavailable", status_code=503)(scope, receive, send)
