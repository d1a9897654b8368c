"""
Main entrypoint for the Exercise Tracker API.

This module assembles the FastAPI application, sets up logging and
includes the API routers.  ``create_app`` builds and configures the
app, including the document store handle it serves from, which is
then instantiated at module import time as ``app``.  Run it with
uvicorn or another ASGI server, e.g.::

    uvicorn exercise_tracker_api.app.main:app --reload
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.router import router as api_router
from .core.config import Settings, settings as default_settings
from .core.db import DocumentStore
from .core.logging_config import setup_logging


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use; defaults to the settings read from the
        environment.  Tests pass their own to point the document store
        at a temporary database.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    # Initialise logging before anything else so that the modules
    # below can safely log messages.
    setup_logging(settings.log_level, settings.log_file or None)

    store = DocumentStore(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Create the database file and tables if needed.
        store.init_db()
        yield

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api")

    @app.get("/health", tags=["health"])
    async def health() -> dict:
        return {"status": "ok"}

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
