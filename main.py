"""
InterviewPilot - AI-assisted technical screening interviews

Main application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.dependencies import build_container
from src.api.router import api_router
from src.config.settings import Settings, get_settings
from src.core.provider import TextProvider
from src.core.scheduling import TaskScheduler

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    provider: TextProvider | None = None,
    scheduler: TaskScheduler | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Application settings (defaults to environment)
        provider: Text provider override
        scheduler: Scheduler override for the between-question delay
    """
    settings = settings or get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        # Startup
        logger.info(f"Starting {settings.app_name}...")
        logger.info(f"Running in {'debug' if settings.debug else 'production'} mode")

        container = build_container(settings, provider=provider, scheduler=scheduler)
        if container.orchestrator.restore():
            logger.info("Restored saved interview state")
        if settings.offline_mode:
            logger.warning("Offline mode: all AI features use built-in fallbacks")
        app.state.container = container

        yield

        # Shutdown
        logger.info(f"Shutting down {settings.app_name}...")
        await container.close()

    app = FastAPI(
        title=settings.app_name,
        description="AI-assisted technical screening interviews",
        version=settings.app_version,
        lifespan=lifespan,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount API routes
    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": settings.app_version,
        }

    return app


app = create_app()


# ============================================================================
# RUN SERVER
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
