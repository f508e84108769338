"""cookieauth entrypoint.

Run with:
  python -m cookieauth
"""

import uvicorn

from cookieauth.config import Settings, configure_logging


def main() -> None:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    uvicorn.run(
        "cookieauth.app:get_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
