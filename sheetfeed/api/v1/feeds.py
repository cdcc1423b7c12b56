"""
Feed generation API endpoints.
"""

import logging
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse

from sheetfeed.config import get_all_feeds, get_active_feed, generate_feed_id
from sheetfeed.core.auth import get_verified_feed
from sheetfeed.core.feed.service import generate_feed
from sheetfeed.core.feed.sheets_reader import SheetSourceError
from sheetfeed.deps import get_feed_config_for_id, get_output_path, get_sheet_source_for_feed
from sheetfeed.schemas.common import ErrorResponse
from sheetfeed.schemas.feed import FeedBuildResponse, FeedListResponse, FeedSummary

router = APIRouter()

logger = logging.getLogger(__name__)


@router.get("", response_model=FeedListResponse)
def list_feeds():
    """List configured feed profiles."""
    try:
        feeds = get_all_feeds()
        active = get_active_feed()
    except (FileNotFoundError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Feeds config error: {str(e)}"
        )

    items = []
    for name, feed in feeds.items():
        sheet_names = feed.get("sheet_names") or []
        if isinstance(sheet_names, str):
            sheet_names = [sheet_names]
        items.append(FeedSummary(
            feed_id=generate_feed_id(name),
            name=name,
            spreadsheet_id=feed.get("spreadsheet_id", ""),
            sheet_names=sheet_names,
            category_sheet=feed.get("category_sheet", ""),
            only_available=bool(feed.get("only_available", False)),
            output_filename=feed.get("output_filename") or "feed.xml",
            protected=bool(feed.get("api_key"))
        ))
    return FeedListResponse(active=active, items=items)


@router.post(
    "/{feed_id}/build",
    response_model=FeedBuildResponse,
    responses={502: {"model": ErrorResponse}}
)
def build_feed(feed_id: str, feed: Dict = Depends(get_verified_feed)):
    """
    Build the feed from its spreadsheet and store the XML.

    Requires X-Feed-Key header when the profile has an api_key.
    """
    config = get_feed_config_for_id(feed_id)
    source = get_sheet_source_for_feed(config)
    output_path = get_output_path(feed_id, config)

    logger.info(f"Building feed {feed_id} -> {output_path}")
    try:
        result = generate_feed(source, config, output_path=output_path)
    except SheetSourceError as e:
        logger.error(f"Feed {feed_id} failed, source unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Spreadsheet unavailable: {str(e)}"
        )

    document = result.document
    return FeedBuildResponse(
        feed_id=feed_id,
        filename=output_path.name,
        offers_count=document.offers_count,
        categories_count=document.categories_count,
        rows_count=result.rows_count,
        dropped_bindings=result.dropped_bindings,
        filtered_out=result.filtered_out,
        written=result.written,
        corrections=document.corrections,
        download_url=f"/api/v1/feeds/{feed_id}/download"
    )


@router.get("/{feed_id}/download")
def download_feed(feed_id: str):
    """Download the last built XML of a feed."""
    config = get_feed_config_for_id(feed_id)
    output_path = get_output_path(feed_id, config)

    if not output_path.exists():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Feed {feed_id} has not been built yet"
        )

    return FileResponse(
        path=str(output_path),
        filename=output_path.name,
        media_type="application/xml"
    )
