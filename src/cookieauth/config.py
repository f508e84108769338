# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

# Anchor the default users.yml path to the project root, not the working directory.
BASE_DIR = Path(__file__).resolve().parents[2]
DEFAULT_USERS_PATH = BASE_DIR / "data" / "users.yml"

LOG_FORMAT = "%(asctime)s %(levelname)-5s %(name)s %(message)s"

_TRUE = {"1", "true", "yes", "y"}


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in _TRUE


@dataclass(frozen=True)
class Settings:
    secret_key: str
    session_salt: str = "cookieauth.session.v1"
    session_max_age: int = 30 * 24 * 3600
    cookie_secure: bool = False
    users_path: Path = DEFAULT_USERS_PATH
    host: str = "127.0.0.1"
    port: int = 8000
    write_timeout: float = 15.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        secret = os.getenv("COOKIEAUTH_SECRET_KEY") or os.getenv("SECRET_KEY")
        if not secret:
            raise RuntimeError("Missing COOKIEAUTH_SECRET_KEY (or SECRET_KEY) in environment")
        return cls(
            secret_key=secret,
            session_salt=os.getenv("COOKIEAUTH_SESSION_SALT", "cookieauth.session.v1"),
            session_max_age=int(os.getenv("COOKIEAUTH_SESSION_MAX_AGE", str(30 * 24 * 3600))),
            cookie_secure=_env_bool("COOKIEAUTH_COOKIE_SECURE"),
            users_path=Path(os.getenv("COOKIEAUTH_USERS_PATH", str(DEFAULT_USERS_PATH))).resolve(),
            host=os.getenv("COOKIEAUTH_HOST", "127.0.0.1"),
            port=int(os.getenv("COOKIEAUTH_PORT", "8000")),
            write_timeout=float(os.getenv("COOKIEAUTH_WRITE_TIMEOUT", "15")),
            log_level=os.getenv("COOKIEAUTH_LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
