"""
Feed generation service - orchestrates the entire feed generation process.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from sheetfeed.core.utils import iso_timestamp, write_text_atomic
from .guard import guard
from .mapper import map_binding, map_row
from .models import Catalog, CategoryBinding, FeedConfig, FeedDocument, FeedResult, Offer
from .sheets_reader import SheetSource
from .xml_writer import write_catalog_xml


logger = logging.getLogger(__name__)


def collect_rows(source: SheetSource, sheet_names: Sequence[str]) -> List[list]:
    """
    Fetch data rows of every sheet, in sheet order, without header rows.

    Raises:
        SheetSourceError: If any sheet cannot be read.
    """
    rows: List[list] = []
    for name in sheet_names:
        data = source.fetch(name)
        if len(data) <= 1:
            logger.info(f"Sheet '{name}' has no data rows, skipping")
            continue
        logger.info(f"Sheet '{name}': {len(data) - 1} rows")
        rows.extend(data[1:])
    return rows


def map_bindings(rows: Sequence[list], config: FeedConfig) -> Tuple[List[CategoryBinding], int]:
    """Map category rows, returning the bindings and how many rows were dropped."""
    bindings = []
    dropped = 0
    for row in rows:
        binding = map_binding(row, config.binding_columns)
        if binding is None:
            dropped += 1
            continue
        bindings.append(binding)
    if dropped:
        logger.info(f"Dropped {dropped} category rows without id or name")
    return bindings, dropped


def map_offers(rows: Sequence[list], config: FeedConfig) -> Tuple[List[Offer], int]:
    """Map product rows, applying the availability filter when configured."""
    offers = [map_row(row, config.columns) for row in rows]
    if not config.only_available:
        return offers, 0
    kept = [offer for offer in offers if offer.available]
    filtered_out = len(offers) - len(kept)
    if filtered_out:
        logger.info(f"Filtered out {filtered_out} unavailable offers")
    return kept, filtered_out


def render_feed(catalog: Catalog, timestamp: Optional[str] = None, pretty: bool = True) -> FeedDocument:
    """
    Serialize a catalog and run the guard pass over the result.
    """
    xml_string = write_catalog_xml(
        catalog,
        timestamp or iso_timestamp(),
        pretty=pretty,
        log_callback=logger.debug
    )
    guarded = guard(xml_string)
    if guarded.corrected:
        logger.warning(
            f"Escape fallback applied to {len(guarded.corrections)} fragment(s): "
            f"{', '.join(guarded.corrections[:10])}"
        )
    return FeedDocument(
        xml=guarded.text,
        offers_count=len(catalog.offers),
        categories_count=len(catalog.categories),
        corrections=guarded.corrections
    )


def generate_feed(
    source: SheetSource,
    config: FeedConfig,
    output_path: Optional[Union[str, Path]] = None,
    timestamp: Optional[str] = None
) -> FeedResult:
    """
    Generate the feed document and write it.

    Args:
        source: Sheet data provider
        config: FeedConfig with sheet names, filter and layout
        output_path: Where to write the XML; nothing is written when None
        timestamp: Build time, defaults to now

    Returns:
        FeedResult with the document and run counts.

    Raises:
        SheetSourceError: If sheet data cannot be obtained. Nothing is written then.
    """
    logger.info(f"Generating feed '{config.name or config.spreadsheet_id}' from {len(config.sheet_names)} sheets")

    offer_rows = collect_rows(source, config.sheet_names)
    category_data = source.fetch(config.category_sheet)
    binding_rows = category_data[1:]

    offers, filtered_out = map_offers(offer_rows, config)
    bindings, dropped = map_bindings(binding_rows, config)
    catalog = Catalog(offers=tuple(offers), categories=tuple(bindings))

    document = render_feed(catalog, timestamp=timestamp, pretty=config.pretty)
    result = FeedResult(
        document=document,
        rows_count=len(offer_rows),
        dropped_bindings=dropped,
        filtered_out=filtered_out
    )

    if output_path is not None:
        result.output_path = str(output_path)
        result.written = write_text_atomic(output_path, document.xml)
        if result.written:
            logger.info(f"Wrote {output_path} ({document.offers_count} offers)")
        else:
            logger.info(f"{output_path} unchanged")

    return result
