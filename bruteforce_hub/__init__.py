# Uvicorn application factory <https://www.uvicorn.org/#application-factories>
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from bruteforce_hub.logging import logger
from bruteforce_hub.routing import collect_subrouters
from bruteforce_hub.settings import app_settings

__version__ = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application startup and shutdown.

    Startup publishes the app_info metric. Shutdown stops the outbox
    writers without draining them; open connections are dropped along with
    the in-memory registry.
    """
    from bruteforce_hub.managers.connection_registry import (
        connection_registry,
    )
    from bruteforce_hub.managers.coordinator import coordinator
    from bruteforce_hub.utils.metrics import app_info

    logger.info("Application startup initiated")
    app_info.labels(
        version=__version__,
        python_version=f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
        environment=app_settings.ENVIRONMENT,
    ).set(1)
    logger.info("Initialized Prometheus metrics")

    yield

    logger.info(
        f"Application shutdown, dropping {connection_registry.watching_count()} "
        f"open connection(s)"
    )
    coordinator.close()


def application() -> FastAPI:
    """
    Initializes and configures the FastAPI application.

    Routers are collected from `bruteforce_hub.routing.collect_subrouters()`:
    the HTTP endpoints (/health, /metrics, /config.json) and the WebSocket
    endpoint mounted at WS_PATH.
    """
    app = FastAPI(
        title="Bruteforce hub",
        description="Real-time presence and discovery relay for bruteforce clients",
        version=__version__,
        lifespan=lifespan,
    )

    app.include_router(collect_subrouters())

    return app


app = application()  # Need for fastapi cli
