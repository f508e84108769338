# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cookieauth.auth.credentials import CredentialStore, load_credentials
from cookieauth.auth.session import COOKIE_NAME, CookieSessionStore
from cookieauth.config import Settings
from cookieauth.forms import FormParseError, first, parse_form
from cookieauth.middleware import WriteTimeoutMiddleware
from cookieauth.permissions import AUTHENTICATED_KEY, cookie_settings, is_authenticated

logger = logging.getLogger("cookieauth.app")


def create_app(
    *,
    credentials: Optional[CredentialStore] = None,
    store: Optional[CookieSessionStore] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Build the login/logout/healthcheck app.

    ``credentials`` and ``store`` are injected so tests can run with their own
    user tables and signing keys. Whatever is not passed in is built from
    ``settings`` (read from the environment when omitted).
    """
    if settings is None and (credentials is None or store is None):
        settings = Settings.from_env()
    if credentials is None:
        credentials = load_credentials(settings.users_path)
    if store is None:
        store = CookieSessionStore(
            settings.secret_key,
            salt=settings.session_salt,
            max_age=settings.session_max_age,
            cookie_options=cookie_settings(settings.cookie_secure),
        )

    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)
    app.state.credentials = credentials
    app.state.session_store = store

    if settings is not None and settings.write_timeout > 0:
        app.add_middleware(WriteTimeoutMiddleware, timeout=settings.write_timeout)

    @app.exception_handler(StarletteHTTPException)
    async def _plain_http_error(request: Request, exc: StarletteHTTPException):
        # Router errors (404, 405) use the same plain-text bodies as the handlers.
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)

    # ------------------ Routes ------------------

    @app.post("/login")
    async def login(request: Request):
        if request.method != "POST":
            return PlainTextResponse("Method Not Supported", status_code=405)
        try:
            form = await parse_form(request)
        except FormParseError as e:
            logger.info("Rejected login form: %s", e)
            return PlainTextResponse("Please pass the data as URL form encoded", status_code=400)

        username = first(form, "username")
        password = first(form, "password")

        if credentials.lookup(username) is None:
            # Unknown users get an empty 200 with no cookie, matching the
            # behavior existing clients rely on.
            logger.info("Login attempt for unknown user %r", username)
            return PlainTextResponse("")

        if not credentials.check(username, password):
            # Only the 401 is written; no success body follows it.
            logger.info("Invalid password for user %r", username)
            return PlainTextResponse("Invalid Credentials", status_code=401)

        session = store.get(request, COOKIE_NAME)
        session.values[AUTHENTICATED_KEY] = True
        resp = PlainTextResponse("Login successfully!")
        store.save(resp, session)
        logger.info("User %r logged in", username)
        return resp

    @app.get("/logout")
    async def logout(request: Request):
        session = store.get(request, COOKIE_NAME)
        session.values[AUTHENTICATED_KEY] = False
        resp = PlainTextResponse("Logout Successful")
        store.save(resp, session)
        logger.info("Session logged out (new=%s)", session.is_new)
        return resp

    @app.get("/healthcheck")
    async def healthcheck(request: Request):
        session = store.get(request, COOKIE_NAME)
        if is_authenticated(session):
            return PlainTextResponse("Welcome!")
        logger.debug("Healthcheck denied for unauthenticated session")
        return PlainTextResponse("Forbidden", status_code=403)

    return app


def get_app() -> FastAPI:
    """Factory entry point for uvicorn (``--factory``)."""
    return create_app()
