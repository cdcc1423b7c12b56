"""
Dependency injection for FastAPI.
"""

from pathlib import Path
from typing import Dict

from fastapi import HTTPException, status

from sheetfeed.config import get_settings, get_all_feeds, generate_feed_id, validate_feed_config
from sheetfeed.core.feed.models import FeedConfig
from sheetfeed.core.feed.sheets_reader import GoogleSheetSource, SheetSource, SheetSourceError, load_service_account_info


def get_feed_by_id(feed_id: str) -> Dict:
    """
    Get feed profile by feed_id.

    Args:
        feed_id: Feed ID (slug of the profile name).

    Returns:
        Profile dict with 'name' and 'id' added.

    Raises:
        HTTPException: If feed not found.
    """
    feeds = get_all_feeds()

    for feed_name, feed_config in feeds.items():
        if generate_feed_id(feed_name) == feed_id:
            return {
                "name": feed_name,
                "id": feed_id,
                **feed_config
            }

    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Feed '{feed_id}' not found"
    )


def get_feed_config_for_id(feed_id: str) -> FeedConfig:
    """
    Build the validated FeedConfig of a profile.

    Raises:
        HTTPException: If feed not found or its profile is invalid.
    """
    feed = get_feed_by_id(feed_id)

    is_valid, error = validate_feed_config(feed)
    if not is_valid:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Feed '{feed_id}' is misconfigured: {error}"
        )

    try:
        return FeedConfig.from_dict(feed, name=feed["name"])
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


def get_sheet_source_for_feed(config: FeedConfig) -> SheetSource:
    """
    Create the Google Sheets source for a feed.

    Raises:
        HTTPException: If service account credentials are missing or unreadable.
    """
    try:
        credentials_info = load_service_account_info(get_settings().gcp_service_account_key)
    except SheetSourceError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e)
        )
    return GoogleSheetSource(config.spreadsheet_id, credentials_info=credentials_info)


def get_output_path(feed_id: str, config: FeedConfig) -> Path:
    """Where the built XML of a feed is kept."""
    return Path(get_settings().output_dir) / feed_id / config.output_filename
