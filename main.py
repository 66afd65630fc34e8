"""
CapTrack - FastAPI Application Entry Point

This is the main entry point for the FastAPI application.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from captrack.config import settings
from captrack.database import Database
from captrack.utils.error_handling import (
    setup_exception_handlers,
    ErrorTrackingMiddleware,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO if not settings.debug else logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI.
    Builds the database handle on startup and disposes it on shutdown.
    """
    # Startup
    logger.info(f"Starting {settings.app_name}...")
    logger.info(f"Environment: {settings.app_env}")

    database = Database.from_settings(settings)
    app.state.database = database

    # Initialize database (dev only - use migrations in production)
    if settings.is_development and settings.db_create_tables:
        await database.create_all()
        logger.info("Database tables initialized")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name}...")
    await database.dispose()
    app.state.database = None
    logger.info("Database connections closed")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="Capitalizable development time: entry lifecycle, audit trail and period locks",
    version="0.1.0",
    docs_url="/api/docs" if settings.is_development else None,
    redoc_url="/api/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(ErrorTrackingMiddleware)

setup_exception_handlers(app)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/api/v1")
async def api_root():
    """API v1 root endpoint."""
    return {
        "message": f"Welcome to {settings.app_name} API v1",
        "endpoints": {
            "entries": "/api/v1/entries",
            "manual_entries": "/api/v1/manual-entries",
            "approvals": "/api/v1/approvals/pending",
            "periods": "/api/v1/periods",
        }
    }


# ===========================================
# INCLUDE ROUTERS
# ===========================================

from captrack.routers import approvals, entries, manual_entries, periods

# Approvals (bulk approve is registered ahead of the per-entry routes)
app.include_router(approvals.router, prefix="/api/v1")

# Daily Entries
app.include_router(entries.router, prefix="/api/v1")

# Manual Entries
app.include_router(manual_entries.router, prefix="/api/v1")

# Accounting Periods (read-only)
app.include_router(periods.router, prefix="/api/v1")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
    )
