"""
Feed generation schemas.
"""

from pydantic import BaseModel
from typing import Optional, List


class FeedSummary(BaseModel):
    """Configured feed profile, without credentials."""
    feed_id: str
    name: str
    spreadsheet_id: str
    sheet_names: List[str]
    category_sheet: str
    only_available: bool = False
    output_filename: str = "feed.xml"
    protected: bool = False


class FeedListResponse(BaseModel):
    """Response for list feeds."""
    active: Optional[str] = None
    items: List[FeedSummary]


class FeedBuildResponse(BaseModel):
    """Result of a feed build."""
    feed_id: str
    filename: str
    offers_count: int
    categories_count: int
    rows_count: int
    dropped_bindings: int = 0
    filtered_out: int = 0
    written: bool = True
    corrections: List[str] = []
    download_url: str
