"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from timebank_engine.api.middleware import RequestIDMiddleware, MetricsMiddleware
from timebank_engine.api.v1 import categories, exchange, loops, scoring
from timebank_engine.domain.categories import CategoryRateRegistry
from timebank_engine.infrastructure.observability.logging import setup_logging
from timebank_engine.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app(rate_registry: CategoryRateRegistry | None = None) -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Time Bank Matching Engine",
        description="Trade loop matching, compatibility scoring and time-credit exchange rates",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Rate table is read-only to requests; admin updates swap it atomically
    app.state.rate_registry = rate_registry or CategoryRateRegistry(
        floor=settings.market_multiplier_floor,
        ceiling=settings.market_multiplier_ceiling,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(categories.router, prefix="/v1", tags=["categories"])
    app.include_router(exchange.router, prefix="/v1", tags=["exchange"])
    app.include_router(scoring.router, prefix="/v1", tags=["scoring"])
    app.include_router(loops.router, prefix="/v1", tags=["loops"])

    return app


app = create_app()
