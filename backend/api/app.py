"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config import get_settings

from .config import get_api_settings
from .dependencies import get_container
from .middleware.errors import register_exception_handlers
from .routes import health, users
from modules.analytics.routes import router as stats_router
from modules.projects.routes import admin_router, router as projects_router
from modules.redirects.routes import router as redirect_router

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs startup and shutdown logic.
    """
    # Startup
    api_settings = get_api_settings()
    settings = get_settings()
    logger.info(
        f"Starting {settings.app_name} on {api_settings.host}:{api_settings.port} "
        f"(storage: {settings.storage_backend})"
    )
    yield
    # Shutdown
    await get_container().aclose()
    logger.info(f"Shutting down {settings.app_name}")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()
    api_settings = get_api_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="Short link management with owner sign-off and admin approval",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if api_settings.debug else None,
        redoc_url="/api/redoc" if api_settings.debug else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=api_settings.cors_origins,
        allow_credentials=api_settings.cors_allow_credentials,
        allow_methods=api_settings.cors_allow_methods,
        allow_headers=api_settings.cors_allow_headers,
    )

    register_exception_handlers(app)

    # Register routes
    app.include_router(health.router, tags=["health"])
    app.include_router(users.router, prefix="/api/auth", tags=["auth"])
    app.include_router(projects_router, prefix="/api/projects", tags=["projects"])
    app.include_router(admin_router, prefix="/api/admin", tags=["admin"])
    app.include_router(stats_router, prefix="/api/stats", tags=["stats"])
    # Catch-all short link redirect; must stay last
    app.include_router(redirect_router, tags=["redirect"])

    return app


# Application instance for uvicorn
app = create_app()
