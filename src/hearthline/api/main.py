"""FastAPI application entry point for Hearthline."""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from hearthline import __version__
from hearthline.api.dependencies.messaging import set_http_client
from hearthline.api.middleware.logging_middleware import LoggingMiddleware
from hearthline.api.middleware.metrics_middleware import MetricsMiddleware
from hearthline.api.routes import (
    health_router,
    mediation_router,
    messages_router,
    metrics_router,
    verification_router,
)
from hearthline.infrastructure.monitoring.metrics import get_metrics_collector
from hearthline.infrastructure.observability.logging import configure_structlog


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_structlog(environment=os.environ.get("ENVIRONMENT", "production"))
    get_metrics_collector().record_startup("api")
    http_client = httpx.AsyncClient()
    set_http_client(http_client)
    try:
        yield
    finally:
        set_http_client(None)
        await http_client.aclose()


app = FastAPI(
    title="Hearthline API",
    description="Moderated co-parenting messaging",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(MetricsMiddleware)
app.add_middleware(LoggingMiddleware)

app.include_router(health_router)
app.include_router(metrics_router)
app.include_router(messages_router)
app.include_router(mediation_router)
app.include_router(verification_router)
