# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from cookieauth.auth.session import Session

AUTHENTICATED_KEY = "authenticated"


def is_authenticated(session: Session) -> bool:
    # Only an absent key, None or False denies access; any other value passes.
    value = session.values.get(AUTHENTICATED_KEY)
    return value is not None and value is not False


def cookie_settings(secure: bool = False) -> dict:
    return {"httponly": True, "samesite": "lax", "secure": secure}
