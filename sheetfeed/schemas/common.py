"""
Schemas shared by every router.
"""

from typing import Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Service liveness and whether a feeds config is readable."""
    ok: bool = True
    version: str
    feeds_configured: Optional[int] = None


class ErrorResponse(BaseModel):
    detail: str
