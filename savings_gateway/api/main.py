"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from savings_gateway.api.dependencies import registry_holder
from savings_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from savings_gateway.api.v1 import banks, calculate, summary
from savings_gateway.domain.exceptions import SnapshotFormatError
from savings_gateway.infrastructure.observability.logging import setup_logging
from savings_gateway.infrastructure.observability.metrics import usable_banks_gauge
from savings_gateway.infrastructure.snapshot.store import load_snapshot
from savings_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)

logger = logging.getLogger(__name__)


def load_registry(path: str | None = None) -> None:
    """Install the snapshot at path; an unreadable snapshot leaves the current one"""
    path = path or settings.snapshot_path
    try:
        registry = registry_holder.install(load_snapshot(path))
    except SnapshotFormatError as e:
        logger.warning(f"Serving without rates: {e}")
        return

    usable_banks_gauge.set(len(registry.usable_banks()))
    logger.info(f"Loaded {len(registry.usable_banks())}/{len(registry.banks)} banks from {path}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    load_registry()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Savings Rate Gateway",
        description="Tiered savings rate comparison and return calculation service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        registry = registry_holder.current
        return {
            "status": "ok",
            "service": settings.service_name,
            "banks": len(registry.banks),
            "last_updated": registry.last_updated,
        }

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(banks.router, prefix="/v1", tags=["banks"])
    app.include_router(summary.router, prefix="/v1", tags=["summary"])
    app.include_router(calculate.router, prefix="/v1", tags=["calculations"])

    return app


app = create_app()
