import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from .database.session import init_db
from .routers import auth, catches, locations, species, users
from .config import Settings, get_settings
from .logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application with its settings bound."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifecycle events for the application."""
        setup_logging(settings.LOG_LEVEL)
        # Startup: Initialize database
        app.state.database = await init_db(settings)
        logger.info("Database ready")
        yield
        # Shutdown: release pooled connections
        await app.state.database.dispose()

    app = FastAPI(
        title="Anidex",
        description="Wildlife spotting game: catch species, earn points, discover locations",
        version="1.0.0",
        lifespan=lifespan
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(auth.router, prefix="/api")
    app.include_router(species.router, prefix="/api")
    app.include_router(catches.router, prefix="/api")
    app.include_router(locations.router, prefix="/api")
    app.include_router(users.router, prefix="/api")

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": "Welcome to the Anidex API",
            "docs": "/docs",
            "health": "ok"
        }

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
