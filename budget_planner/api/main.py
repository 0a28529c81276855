"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from budget_planner.api.middleware import RequestIDMiddleware, MetricsMiddleware
from budget_planner.api.v1 import bills, income, report, savings, schedule
from budget_planner.infrastructure.observability.logging import setup_logging
from budget_planner.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Budget Planner",
        description="Paycheck allocation and bill scheduling service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
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
    app.include_router(income.router, prefix="/v1", tags=["income"])
    app.include_router(bills.router, prefix="/v1", tags=["bills"])
    app.include_router(schedule.router, prefix="/v1", tags=["schedule"])
    app.include_router(savings.router, prefix="/v1", tags=["savings"])
    app.include_router(report.router, prefix="/v1", tags=["reports"])

    return app


app = create_app()
