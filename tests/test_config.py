from pathlib import Path

import pytest

from cookieauth.app import create_app
from cookieauth.config import DEFAULT_USERS_PATH, Settings
from cookieauth.middleware import WriteTimeoutMiddleware

_ENV = [
    "COOKIEAUTH_SECRET_KEY",
    "SECRET_KEY",
    "COOKIEAUTH_SESSION_MAX_AGE",
    "COOKIEAUTH_COOKIE_SECURE",
    "COOKIEAUTH_USERS_PATH",
    "COOKIEAUTH_HOST",
    "COOKIEAUTH_PORT",
    "COOKIEAUTH_WRITE_TIMEOUT",
]


@pytest.fixture()
def clean_env(monkeypatch):
    for name in _ENV:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_missing_secret_is_fatal(clean_env):
    with pytest.raises(RuntimeError):
        Settings.from_env()


def test_defaults(clean_env):
    clean_env.setenv("COOKIEAUTH_SECRET_KEY", "abc")
    s = Settings.from_env()
    assert s.secret_key == "abc"
    assert (s.host, s.port) == ("127.0.0.1", 8000)
    assert s.write_timeout == 15.0
    assert s.session_max_age == 2592000
    assert s.cookie_secure is False
    assert s.users_path == DEFAULT_USERS_PATH.resolve()


def test_overrides(clean_env, tmp_path: Path):
    clean_env.setenv("SECRET_KEY", "fallback")
    clean_env.setenv("COOKIEAUTH_PORT", "9001")
    clean_env.setenv("COOKIEAUTH_WRITE_TIMEOUT", "2.5")
    clean_env.setenv("COOKIEAUTH_COOKIE_SECURE", "yes")
    clean_env.setenv("COOKIEAUTH_USERS_PATH", str(tmp_path / "u.yml"))
    s = Settings.from_env()
    assert s.secret_key == "fallback"
    assert s.port == 9001
    assert s.write_timeout == 2.5
    assert s.cookie_secure is True
    assert s.users_path == (tmp_path / "u.yml").resolve()


def test_create_app_from_settings(tmp_path: Path):
    users = tmp_path / "users.yml"
    users.write_text("users:\n  zed: pw\n", encoding="utf-8")
    settings = Settings(secret_key="k", users_path=users, cookie_secure=True)
    app = create_app(settings=settings)

    assert app.state.credentials.users == {"zed": "pw"}
    assert app.state.session_store.cookie_options["secure"] is True
    assert any(m.cls is WriteTimeoutMiddleware for m in app.user_middleware)


def test_create_app_without_settings_skips_timeout(credentials, store):
    app = create_app(credentials=credentials, store=store)
    assert not any(m.cls is WriteTimeoutMiddleware for m in app.user_middleware)
