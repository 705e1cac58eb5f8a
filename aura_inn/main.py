"""Aura Inn booking API — FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aura_inn.api.v1.admin import router as admin_router
from aura_inn.api.v1.analytics import router as analytics_router
from aura_inn.api.v1.auth import router as auth_router
from aura_inn.api.v1.bookings import router as bookings_router
from aura_inn.api.v1.room_types import router as room_types_router
from aura_inn.config import settings

# Configure root logger so all aura_inn.* loggers output to stderr.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info(
        "Starting %s (booking store: %s, outbound mail: %s)",
        settings.app_name,
        settings.booking_store,
        "enabled" if settings.smtp_host else "disabled",
    )
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    yield
    # Shutdown: dispose engine connections
    from aura_inn.database import engine

    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Booking intake, pricing and guest notifications for The Aura Inn.",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(auth_router)
app.include_router(bookings_router)
app.include_router(room_types_router)
app.include_router(admin_router)
app.include_router(analytics_router)


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.app_name}
