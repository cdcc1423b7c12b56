"""
Feed API key utilities.
"""

import secrets
from typing import Dict, Optional
from fastapi import HTTPException, status, Header
from sheetfeed.deps import get_feed_by_id


def generate_token(length: int = 32) -> str:
    """
    Generate a secure random token.

    Args:
        length: Token length in bytes (will be hex-encoded, so final length is 2x)

    Returns:
        Hex-encoded random token string
    """
    return secrets.token_hex(length)


def verify_feed_key(feed_id: str, feed_key: Optional[str] = None) -> Dict:
    """
    Verify the X-Feed-Key header against the feed profile.

    Profiles without an ``api_key`` are open.

    Returns:
        Feed profile dict

    Raises:
        HTTPException: If the feed is unknown, or the key is missing or wrong
    """
    feed = get_feed_by_id(feed_id)

    feed_api_key = feed.get("api_key")
    if not feed_api_key:
        return feed

    if not feed_key:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Missing X-Feed-Key header",
            headers={"X-Error-Code": "missing_feed_key"}
        )

    # Constant-time comparison to prevent timing attacks
    if not secrets.compare_digest(feed_key, feed_api_key):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid X-Feed-Key",
            headers={"X-Error-Code": "invalid_feed_key"}
        )

    return feed


def get_verified_feed(
    feed_id: str,
    x_feed_key: Optional[str] = Header(None, alias="X-Feed-Key")
) -> Dict:
    """
    FastAPI dependency to verify feed authentication.

    Usage:
        @router.post("/{feed_id}/build")
        def build(feed: Dict = Depends(get_verified_feed)):
            ...
    """
    return verify_feed_key(feed_id, x_feed_key)
