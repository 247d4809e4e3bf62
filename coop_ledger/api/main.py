"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from coop_ledger.api.errors import register_error_handlers
from coop_ledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from coop_ledger.api.v1 import contributions, periods, reports
from coop_ledger.infrastructure.database.session import create_tables
from coop_ledger.infrastructure.observability.logging import setup_logging
from coop_ledger.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Cooperative Contribution Ledger",
        description="Contribution periods, payment registration and completion reports",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    if settings.create_tables_on_startup:
        create_tables()

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_error_handlers(app)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers; the report route must precede /contributions/{member_id}
    app.include_router(periods.router, prefix="/v1", tags=["periods"])
    app.include_router(reports.router, prefix="/v1", tags=["reports"])
    app.include_router(contributions.router, prefix="/v1", tags=["contributions"])

    return app


app = create_app()
