"""Health Monitor API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map HealthMonitorError → structured JSON responses
    - CORS configured from settings (all origins by default)
    - MongoDB connected and pinged on startup via lifespan; failure aborts startup

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Repository built in lifespan and kept on app.state: injected into routes
      through get_patient_repository, overridable in tests
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from health_monitor.api.error_handlers import register_error_handlers
from health_monitor.api.routes import health, patients, prescriptions
from health_monitor.config import Settings, get_settings
from health_monitor.infrastructure.database import (
    MongoPatientRepository, connect_mongo,
)
from health_monitor.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    # StorageConnectionError propagates: uvicorn aborts startup, no retry
    client = connect_mongo(settings)
    collection = client[settings.mongodb_database][settings.mongodb_collection]
    app.state.patient_repository = MongoPatientRepository(collection)
    logger.info(f"Health Monitor API started on port {settings.port}")
    yield
    logger.info("Health Monitor API shutting down")
    client.close()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application."""
    settings = settings or get_settings()
    app = FastAPI(
        title="Health Monitor API", version="1.0.0", lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routes, registered explicitly
    app.include_router(health.router)
    app.include_router(patients.router)
    app.include_router(prescriptions.router)

    register_error_handlers(app)
    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "health_monitor.main:app", host=settings.host, port=settings.port,
    )
