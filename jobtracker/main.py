"""Job Tracker API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map JobTrackerError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py; main only wires them
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import jobtracker.infrastructure.database as database
from jobtracker.api.error_handlers import register_error_handlers
from jobtracker.api.routes import applications, auth, dashboard, health, tasks
from jobtracker.config import get_settings
from jobtracker.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    if database.db_manager is None:
        database.init_db(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
    logger.info("Job tracker API started")
    yield
    logger.info("Job tracker API shutting down")
    if database.db_manager is not None:
        await database.db_manager.dispose()


app = FastAPI(
    title="Job Tracker API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(applications.router)
app.include_router(tasks.router)
app.include_router(dashboard.router)

register_error_handlers(app)
