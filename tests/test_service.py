import logging
import xml.etree.ElementTree as ET

import pytest

from sheetfeed.core.feed.mapper import map_row
from sheetfeed.core.feed.models import Catalog, FeedConfig, Offer
from sheetfeed.core.feed.service import collect_rows, generate_feed, render_feed
from sheetfeed.core.feed.sheets_reader import SheetSourceError, StaticSheetSource

from conftest import CHAIR_ROW, PRODUCT_HEADER

TIMESTAMP = "2024-05-01T09:30:00.000Z"


def _config(**kwargs) -> FeedConfig:
    return FeedConfig(
        spreadsheet_id="sheet-123",
        sheet_names=kwargs.pop("sheet_names", ["Products"]),
        category_sheet="Categories",
        **kwargs,
    )


def test_generate_feed_end_to_end(source, tmp_path):
    output = tmp_path / "out" / "feed.xml"
    result = generate_feed(source, _config(), output_path=output, timestamp=TIMESTAMP)

    assert result.written is True
    assert result.output_path == str(output)
    assert result.rows_count == 1
    assert result.document.offers_count == 1
    assert result.document.categories_count == 1
    assert result.document.corrections == []

    text = output.read_text(encoding="utf-8")
    assert text == result.document.xml
    root = ET.fromstring(text.encode("utf-8"))
    assert root.get("date") == TIMESTAMP
    assert root.find("shop/offers/offer").get("id") == "101"


def test_second_identical_build_leaves_file_unchanged(source, tmp_path):
    output = tmp_path / "feed.xml"
    generate_feed(source, _config(), output_path=output, timestamp=TIMESTAMP)
    again = generate_feed(source, _config(), output_path=output, timestamp=TIMESTAMP)
    assert again.written is False


def test_sheets_concatenate_in_order_without_headers():
    source = StaticSheetSource({
        "A": [PRODUCT_HEADER, ["1", "y"], ["2", ""]],
        "Empty": [PRODUCT_HEADER],
        "Blank": [],
        "B": [PRODUCT_HEADER, ["1", "y"], ["3", "y"]],
    })
    rows = collect_rows(source, ["A", "Empty", "Blank", "B"])
    assert [row[0] for row in rows] == ["1", "2", "1", "3"]


def test_only_available_filter(tmp_path):
    source = StaticSheetSource({
        "Products": [PRODUCT_HEADER, ["1", "y"], ["2", ""], ["3", "5"]],
        "Categories": [["id", "name"]],
    })
    result = generate_feed(source, _config(only_available=True), timestamp=TIMESTAMP)
    root = ET.fromstring(result.document.xml.encode("utf-8"))
    assert [o.get("id") for o in root.findall("shop/offers/offer")] == ["1", "3"]
    assert result.filtered_out == 1
    assert result.output_path is None
    assert result.written is False


def test_incomplete_bindings_are_dropped(caplog):
    source = StaticSheetSource({
        "Products": [PRODUCT_HEADER],
        "Categories": [["id", "name"], ["1", "A"], ["", "B"], ["3"], ["4", "D"]],
    })
    with caplog.at_level(logging.INFO):
        result = generate_feed(source, _config(), timestamp=TIMESTAMP)
    assert result.dropped_bindings == 2
    assert result.document.categories_count == 2
    assert "Dropped 2 category rows" in caplog.text


def test_source_failure_writes_nothing(tmp_path):
    source = StaticSheetSource({"Products": [PRODUCT_HEADER, list(CHAIR_ROW)]})
    output = tmp_path / "feed.xml"
    with pytest.raises(SheetSourceError):
        generate_feed(source, _config(), output_path=output)
    assert not output.exists()


def test_guard_fallback_is_reported(caplog):
    catalog = Catalog(offers=(Offer(id="A&laquo;B", available=True, stock_quantity=30),))
    with caplog.at_level(logging.WARNING):
        document = render_feed(catalog, timestamp=TIMESTAMP)
    assert document.corrections == ["&laquo;"]
    assert 'id="A&amp;laquo;B"' in document.xml
    assert "Escape fallback" in caplog.text
    ET.fromstring(document.xml.encode("utf-8"))


def test_raw_ampersand_in_offer_id_survives_parsing():
    catalog = Catalog(offers=(map_row(["AT&T", "1"]),))
    document = render_feed(catalog, timestamp=TIMESTAMP)
    assert document.corrections == ["&T"]
    root = ET.fromstring(document.xml.encode("utf-8"))
    assert root.find("shop/offers/offer").get("id") == "AT&T"


def test_literal_entity_text_in_description_is_not_a_fallback():
    catalog = Catalog(offers=(map_row(["1", "1", "", "", "", "", "", "", "5 &lt 6"]),))
    document = render_feed(catalog, timestamp=TIMESTAMP)
    assert document.corrections == []
    root = ET.fromstring(document.xml.encode("utf-8"))
    assert root.find("shop/offers/offer/description").text == "5 &lt 6"
