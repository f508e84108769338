# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import hmac
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional

import yaml

logger = logging.getLogger("cookieauth.auth.credentials")

DEFAULT_CREDENTIALS: Mapping[str, str] = MappingProxyType({"user1": "password", "user2": "password"})


class CredentialStore:
    """Fixed username -> plaintext password table.

    Built once at startup and never mutated afterwards, so handlers can share
    one instance across requests without locking.
    """

    def __init__(self, users: Optional[Mapping[str, str]] = None):
        src = DEFAULT_CREDENTIALS if users is None else users
        self._users: Mapping[str, str] = MappingProxyType(dict(src))

    def __contains__(self, username: object) -> bool:
        return username in self._users

    def __iter__(self) -> Iterator[str]:
        return iter(self._users)

    def __len__(self) -> int:
        return len(self._users)

    @property
    def users(self) -> Mapping[str, str]:
        return self._users

    def lookup(self, username: str) -> Optional[str]:
        return self._users.get(username)

    def check(self, username: str, password: str) -> bool:
        stored = self._users.get(username)
        if stored is None:
            return False
        given = (password or "").encode("utf-8", errors="surrogateescape")
        return hmac.compare_digest(stored.encode("utf-8"), given)


def _parse_users(raw: object) -> Dict[str, str]:
    if not isinstance(raw, dict):
        return {}
    users = raw.get("users", raw)
    if not isinstance(users, dict):
        return {}
    out: Dict[str, str] = {}
    for uname, pw in users.items():
        username = str(uname).strip()
        if not username or not isinstance(pw, str):
            continue
        out[username] = pw
    return out


def load_credentials(path: Path) -> CredentialStore:
    if not path.exists():
        logger.info("No credentials file at %s, using built-in users", path)
        return CredentialStore()
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    users = _parse_users(raw)
    logger.info("Loaded %d users from %s", len(users), path)
    return CredentialStore(users)
