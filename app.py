#!/usr/bin/env python3
"""
Main entry point for URL shortener service.

Concurrency: requests are served concurrently on one event loop (FastAPI +
redis.asyncio connection pools). Mappings and the visit counter live in
two logical Redis databases on the same server.

Usage:
    python app.py

Environment variables:
    REDIS_URL - Redis connection URL
    REDIS_PASSWORD - Redis password (optional)
    MAPPING_DB / COUNTER_DB - Logical databases (default 0 and 1)
    APP_PORT - Port to listen on (PORT is accepted too)
    BASE_URL - Base URL for short links
    CORS_ORIGIN - Browser origin allowed to call the API
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import load_config
from lib.counter import VisitCounter
from lib.database.redis_store import URLShortenerRedisStore
from lib.service import URLShortenerService
from lib.shortcode import ShortCodeGenerator
from lib.common.logging_config import setup_logging
from web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting URL shortener service...")

    store = URLShortenerRedisStore(
        redis_url=config.redis_url,
        mapping_db=config.mapping_db,
        counter_db=config.counter_db,
        password=config.redis_password,
        socket_timeout=config.redis_socket_timeout,
        logger=logger.getChild("store"),
    )
    await store.connect()

    counter = VisitCounter(store, default_key=config.counter_key, logger=logger.getChild("counter"))
    generator = ShortCodeGenerator(default_length=config.short_code_length)
    service = URLShortenerService(
        store=store,
        counter=counter,
        short_code_generator=generator,
        logger=logger.getChild("service"),
        base_url=config.base_url,
        enable_custom_codes=config.enable_custom_codes,
        max_collision_retries=config.max_collision_retries,
        default_expiry_hours=config.default_expiry_hours,
    )

    health = await service.health_check()
    if not health["overall"]:
        # Keep serving; requests answer 500 until Redis is back
        logger.warning(f"Redis not reachable at startup: {health}")

    app.state.store = store
    app.state.counter = counter
    app.state.service = service

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down URL shortener service...")

    await service.close()

    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("URL Shortener Service")
    logger.info(f"Configuration: {config.model_dump(exclude={'redis_password'})}")

    app = create_app(config=config)
    app.state.logger = logger
    app.router.lifespan_context = lifespan

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


if __name__ == "__main__":
    main()
