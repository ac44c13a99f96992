"""
FastAPI Application Entry Point for PokerTable.

This module creates and configures the FastAPI application with:
- HTTP routes for a single table
- CORS middleware for rendering clients served elsewhere
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pokertable import __version__
from pokertable.server.routes import router

# Configure logging
logging.basicConfig(
    level=os.environ.get("POKERTABLE_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("PokerTable server starting up...")
    yield
    logger.info("PokerTable server shutting down...")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="PokerTable",
        description="Texas Hold'em Rules Engine HTTP API",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    return app


# Create the application instance
app = create_app()


def main():
    """Run the server (for use as entry point)."""
    import uvicorn
    uvicorn.run(
        "pokertable.server.app:app",
        host=os.environ.get("POKERTABLE_HOST", "0.0.0.0"),
        port=int(os.environ.get("POKERTABLE_PORT", "8000")),
    )


if __name__ == "__main__":
    main()
