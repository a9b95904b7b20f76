from __future__ import annotations

import logging

from .config import Settings


logger = logging.getLogger("akin_state")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("asyncpg").setLevel(logging.WARNING)


def main() -> None:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    settings.validate()

    import uvicorn

    from .api.app import create_app

    logger.info(
        "Starting AKIN character state API on %s:%s (backend=%s)",
        settings.api_host,
        settings.api_port,
        settings.backend,
    )
    try:
        uvicorn.run(create_app(settings), host=settings.api_host, port=settings.api_port, log_config=None)
    except KeyboardInterrupt:
        logger.info("Shutdown requested, exiting.")


if __name__ == "__main__":
    main()
