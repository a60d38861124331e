"""Run the gateway: ``python -m certgateway``."""

import logging

import uvicorn

from certgateway.core.config import settings


def main() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger(__name__).info(
        "Server running on http://localhost:%s", settings.PORT
    )
    # uvicorn handles SIGTERM/SIGINT; the app lifespan drains the pool on exit.
    uvicorn.run(
        "certgateway.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        timeout_graceful_shutdown=int(settings.DB_POOL_CLOSE_TIMEOUT) + 5,
    )


if __name__ == "__main__":
    main()
