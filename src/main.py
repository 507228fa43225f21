"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from src.admin.router import router as admin_router
from src.admin.views.dashboard import router as dashboard_router
from src.api.v1.members import router as members_router
from src.api.v1.vendors import router as vendors_router
from src.api.websockets import router as live_router
from src.config import settings
from src.core.exceptions import register_exception_handlers
from src.database import create_engine, create_session_factory
from src.landing.router import router as landing_router
from src.redis_client import create_redis

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.dev.ConsoleRenderer() if settings.environment == "development"
        else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        getattr(logging, settings.log_level.upper(), logging.INFO)
    ),
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the store and session handles; dispose them on shutdown."""
    engine = create_engine(settings.database_url)
    app.state.session_factory = create_session_factory(engine)
    app.state.redis = create_redis(settings.redis_url)
    logger.info("app_starting", environment=settings.environment)
    yield
    logger.info("app_shutting_down")
    await app.state.redis.aclose()
    await engine.dispose()


app = FastAPI(
    title="Elate Chem",
    description="Chemical vendor directory with an admin dashboard",
    version="0.1.0",
    lifespan=lifespan,
)

register_exception_handlers(app)

app.include_router(landing_router)
app.include_router(vendors_router)
app.include_router(members_router)
app.include_router(admin_router)
app.include_router(dashboard_router)
app.include_router(live_router)


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "version": "0.1.0"}
