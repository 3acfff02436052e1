"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from cashflow_compass.api.middleware import MetricsMiddleware, RequestIDMiddleware
from cashflow_compass.api.v1 import analysis, goals, profile, timeline
from cashflow_compass.config import settings
from cashflow_compass.infrastructure.observability.logging import setup_logging

setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Cashflow Compass",
        description="Cash-flow projection and purchase / goal decision engine",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Last added = first executed
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(timeline.router, prefix="/v1", tags=["timeline"])
    app.include_router(analysis.router, prefix="/v1", tags=["purchases"])
    app.include_router(goals.router, prefix="/v1", tags=["goals"])
    app.include_router(profile.router, prefix="/v1", tags=["profile"])

    return app


app = create_app()
