"""FastAPI application for the widget sync control API."""

import logging

from fastapi import FastAPI

from .. import __version__
from .routes import api_router

logger = logging.getLogger(__name__)


def create_app(system) -> FastAPI:
    """Create the control API application.

    Args:
        system: Running WidgetSyncSystem the routes operate on

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Journal Widget Sync",
        description="Home-screen widget refresh daemon",
        version=__version__,
        docs_url="/api/docs",
        redoc_url=None,
    )

    app.state.system = system
    app.include_router(api_router)

    return app
