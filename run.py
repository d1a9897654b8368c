"""Entry point for the exercise tracker service.

Starts the FastAPI application under uvicorn.  Host, port and log
level come from the same environment variables as the rest of the
settings (``HOST``, ``PORT``, ``LOG_LEVEL``); a ``DATABASE_URL``
variable selects the SQLite file.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from exercise_tracker_api.app.core.config import settings
from exercise_tracker_api.app.main import app


async def main() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    logging.getLogger(__name__).info("Listening on %s:%s", settings.host, settings.port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
