"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from stripe_reports.api.middleware import RequestIDMiddleware, MetricsMiddleware
from stripe_reports.api.v1 import accounts, reports
from stripe_reports.infrastructure.observability.logging import setup_logging
from stripe_reports.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Stripe Reports",
        description="Multi-account payment summaries and transaction detail",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(reports.router, prefix="/v1", tags=["reports"])
    app.include_router(accounts.router, prefix="/v1", tags=["accounts"])

    return app


app = create_app()
