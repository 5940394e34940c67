#!/usr/bin/env python3
"""
Main entry point for the shortlinks service.

Concurrency: requests are served by async handlers (FastAPI + asyncpg pool +
redis.asyncio). With WORKERS > 1 uvicorn forks that many processes, each
building its app through create_server_app() with its own connection pool.
Slug uniqueness and visit counting rely on the database, not on in-process
state. The memory:// store is per process.

Usage:
    python app.py

Environment variables:
    DATABASE_URL - Storage connection string (postgresql://... or memory://)
    DATABASE_NAME - Database name overriding the one in DATABASE_URL
    COLLECTION_NAME - Table holding link records
    REDIS_URL - Redis connection URL (optional)
    APP_DOMAIN - Public base domain for short links
    ADMIN_KEY - Shared secret for /linksdata
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    ENVIRONMENT - 'development' exposes error details
    LOG_LEVEL - Logging level
"""

import logging
import signal
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from config import Config, load_config
from shortlinks.database import RedisCache, create_link_store
from shortlinks.errors import StorageFailureError
from shortlinks.service import LinkService
from shortlinks.slug import SlugGenerator
from shortlinks.common.logging_config import setup_logging
from web_app import create_app


def build_service(config: Config, logger: logging.Logger) -> LinkService:
    """Wire store, cache and generator from configuration. Nothing is connected yet."""
    store = create_link_store(
        config.database_url,
        database_name=config.database_name,
        table=config.collection_name,
        create_tables=config.create_tables,
        logger=logger,
    )

    cache = None
    if config.redis_url:
        cache = RedisCache(
            redis_url=config.redis_url,
            ttl_seconds=config.cache_ttl_seconds,
            logger=logger,
        )

    generator = SlugGenerator(
        min_length=config.slug_min_length,
        max_length=config.slug_max_length,
    )
    return LinkService(
        store=store,
        cache=cache,
        slug_generator=generator,
        logger=logger,
        max_collision_retries=config.max_collision_retries,
    )


async def start_service(service: LinkService, logger: logging.Logger) -> None:
    """Connect storage and cache. Storage failure propagates; the cache is optional."""
    logger.info(f"Connecting to storage ({type(service.store).__name__})")
    await service.store.connect()

    if service.cache:
        logger.info(f"Connecting to Redis at {service.cache.redis_url}")
        await service.cache.connect()
    else:
        logger.info("Redis caching disabled")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting URL shortener service...")

    service = build_service(config, logger)
    try:
        await start_service(service, logger)
    except StorageFailureError as e:
        logger.critical(f"Cannot reach storage, refusing to start: {e}")
        raise

    app.state.db = service.store
    app.state.cache = service.cache
    app.state.service = service

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down URL shortener service...")
    await service.close()
    logger.info("Service stopped")


def create_server_app(
    config: Optional[Config] = None,
    logger: Optional[logging.Logger] = None,
) -> FastAPI:
    """Build the app whose lifespan creates store, cache and service.

    Called without arguments by each uvicorn worker process when WORKERS > 1.
    """
    if config is None:
        config = load_config()
    if logger is None:
        logger = setup_logging(
            level=config.log_level,
            log_file=config.log_file,
            json_format=config.log_json,
        )

    app = create_app(
        db_instance=None,
        cache_instance=None,
        service_instance=None,
        config=config,
    )
    app.state.logger = logger
    app.router.lifespan_context = lifespan
    return app


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("URL Shortener Service")
    logger.info(f"Configuration: {config.safe_dump()}")
    if not config.admin_key:
        logger.warning("ADMIN_KEY is not set; /linksdata will reject every request")

    if config.workers > 1:
        # uvicorn only forks workers for an import string; each builds its own app
        logger.info(f"Starting {config.workers} workers on {config.host}:{config.port}")
        uvicorn.run(
            "app:create_server_app",
            factory=True,
            host=config.host,
            port=config.port,
            workers=config.workers,
            log_level=config.log_level.lower(),
            access_log=True,
        )
        return

    app = create_server_app(config, logger)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=True,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)

    # Lifespan startup failure (e.g. storage unreachable) leaves the server unstarted
    if not server.started:
        logger.error("Server did not start")
        sys.exit(1)


if __name__ == "__main__":
    main()
