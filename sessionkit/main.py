#!/usr/bin/env python3
"""
SessionKit - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Registers session providers and builds the session manager
3. Runs the demo API with a background session sweeper

All session logic is in the modules, following black box principles.
"""

import logging
import logging.config as log_config
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Request, Response

from sessionkit.config.provider import ConfigProvider, EnvConfigProvider
from sessionkit.errors import StorageError
from sessionkit.interfaces import ABSENT
from sessionkit.logging_config import get_logging_config
from sessionkit.modules.api import CountResponse, HealthResponse, LogoutResponse
from sessionkit.modules.registry import ProviderRegistry
from sessionkit.modules.session import SessionManager, SessionSweeper
from sessionkit.modules.storage import MemoryProvider, RedisProvider, StorageModule
from sessionkit.modules.transport import rewrite_url

logger = logging.getLogger(__name__)


def build_registry(redis_client, key_prefix: str) -> ProviderRegistry:
    """Register the built-in providers and freeze the table."""
    registry = ProviderRegistry()
    registry.register("memory", MemoryProvider())
    if redis_client is not None:
        registry.register("redis", RedisProvider(redis_client, prefix=key_prefix))
    registry.freeze()
    return registry


def create_app(config_provider: Optional[ConfigProvider] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config_provider: Configuration source (defaults to environment variables)
    """
    config_provider = config_provider or EnvConfigProvider()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        session_config = config_provider.get_session_config()
        redis_config = config_provider.get_redis_config()

        logger.info(f"Starting SessionKit API with provider {session_config.provider_name!r}...")

        storage = StorageModule(redis_config.url)
        redis_client = None
        if session_config.provider_name == "redis":
            redis_client = await storage.connect()

        registry = build_registry(redis_client, redis_config.key_prefix)
        manager = SessionManager(session_config, registry=registry)
        sweeper = SessionSweeper(manager)
        sweeper.start()

        app.state.session_manager = manager
        app.state.session_sweeper = sweeper
        logger.info("SessionKit API started successfully")

        yield

        logger.info("Shutting down SessionKit API...")
        await sweeper.stop()
        await storage.disconnect()
        logger.info("SessionKit API shutdown complete")

    app = FastAPI(
        title="SessionKit API",
        description="SessionKit - server-side sessions over cookies or URL tokens",
        version="1.0.0",
        lifespan=lifespan,
    )

    async def get_manager(request: Request) -> SessionManager:
        return request.app.state.session_manager

    @app.get("/count", response_model=CountResponse)
    async def count(
        request: Request,
        response: Response,
        manager: SessionManager = Depends(get_manager),
    ) -> CountResponse:
        """Increment the visit counter held in the caller's session."""
        session = await manager.start(request, response)
        current = await session.get("countnum")
        current = 1 if current is ABSENT else current + 1
        await session.set("countnum", current)

        next_url = rewrite_url(
            str(request.url_for("count")), manager.config.cookie_name, session.session_id
        )
        return CountResponse(count=current, next_url=next_url)

    @app.post("/logout", response_model=LogoutResponse)
    async def logout(
        request: Request,
        response: Response,
        manager: SessionManager = Depends(get_manager),
    ) -> LogoutResponse:
        """End the caller's session."""
        ended = await manager.destroy(request, response)
        return LogoutResponse(ended=ended)

    @app.get("/health", response_model=HealthResponse)
    async def health(manager: SessionManager = Depends(get_manager)) -> HealthResponse:
        """Health check endpoint."""
        try:
            active = await manager.session_count()
        except StorageError as e:
            logger.warning(f"Session provider unreachable during health check: {e}")
            active = None
        return HealthResponse(provider=manager.config.provider_name, active_sessions=active)

    return app


app = create_app()


def run() -> None:
    """Run the API with uvicorn."""
    api_config = EnvConfigProvider().get_api_config()
    level = "DEBUG" if api_config.debug else "INFO"
    log_config.dictConfig(get_logging_config(level))
    uvicorn.run(
        app,
        host=api_config.host,
        port=api_config.port,
        log_config=get_logging_config(level),
    )


if __name__ == "__main__":
    run()
