"""FastAPI application factory."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shortlinks import __version__

from .api import api_router
from .web import web_router
from .errors import register_exception_handlers
from .middleware.logging import LoggingMiddleware


def create_app(
    db_instance,
    cache_instance,
    service_instance,
    config,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        db_instance: Link store instance
        cache_instance: Redirect cache instance (or None)
        service_instance: Link service instance
        config: Configuration instance

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="URL Shortener",
        description="Short links with visit counting and soft delete",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Handlers reach these through request.app.state
    app.state.db = db_instance
    app.state.cache = cache_instance
    app.state.service = service_instance
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    register_exception_handlers(app)

    app.include_router(api_router, tags=["API"])
    app.include_router(web_router, tags=["Redirect"])

    return app
