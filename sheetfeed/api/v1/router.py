"""
Main API router for v1.
"""

from fastapi import APIRouter
from sheetfeed.api.v1 import feeds

router = APIRouter()

router.include_router(feeds.router, prefix="/feeds", tags=["feeds"])
