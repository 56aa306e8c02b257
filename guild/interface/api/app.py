"""FastAPI application."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from guild.config import Settings
from guild.domain.service import OAuthClient
from guild.domain.value import AuthProvider
from guild.interface.api.routes import auth, health
from guild.util.di.container import create_container, setup_di
from guild.util.logging import get_logger
from guild.util.observability import instrument_fastapi, instrument_httpx

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler.

    Builds the OAuth clients before serving so that missing provider
    credentials stop the process at startup.

    Raises:
        ConfigurationError: If a provider is not configured
    """
    container: AsyncContainer = app.state.dishka_container
    oauth_clients = await container.get(dict[AuthProvider, OAuthClient])
    logger.info(f"OAuth providers ready: {sorted(p.value for p in oauth_clients)}")
    yield
    await container.close()


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Logfire should be configured before calling this function; start_app.py
    does so in production.

    Args:
        container: DI container to use instead of the production one
    """
    settings = Settings()

    instrument_httpx()

    app_instance = FastAPI(
        title="Guild API",
        description="Sign-in and session API for the Guild community",
        version="0.1.0",
        lifespan=lifespan,
    )

    instrument_fastapi(app_instance)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=[
            settings.api.base_url,
            "http://localhost:3000",  # Local frontend
        ],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Origin", "X-Requested-With"],
        max_age=600,
    )

    setup_di(app_instance, container or create_container())

    app_instance.include_router(health.router)
    app_instance.include_router(auth.router)

    return app_instance


# Logfire must be configured before this module is imported (see start_app.py)
app = create_app()
