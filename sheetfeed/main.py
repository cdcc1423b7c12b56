"""
FastAPI application entry point.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sheetfeed import __version__
from sheetfeed.api.v1.router import router as v1_router
from sheetfeed.config import get_settings, get_all_feeds
from sheetfeed.schemas.common import HealthResponse


logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Sheets YML Feed API",
    description="Builds YML product feeds from Google Sheets",
    version=__version__
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify allowed origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(v1_router, prefix="/api/v1")


@app.get("/api/v1/health", response_model=HealthResponse, tags=["health"])
def health_check():
    """Health check endpoint, also reports how many feeds are configured."""
    try:
        feeds_configured = len(get_all_feeds())
    except (FileNotFoundError, ValueError) as e:
        logger.warning(f"Feeds config unreadable: {e}")
        feeds_configured = None
    return HealthResponse(ok=True, version=__version__, feeds_configured=feeds_configured)


@app.get("/", tags=["root"])
async def root():
    """Root endpoint."""
    return {
        "message": "Sheets YML Feed API",
        "version": __version__,
        "docs": "/docs"
    }
