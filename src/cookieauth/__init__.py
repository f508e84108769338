"""cookieauth: session-cookie login demo (login, logout, healthcheck)."""

__version__ = "0.1.0"
