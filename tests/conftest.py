"""Test configuration helpers."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sheetfeed.core.feed.sheets_reader import StaticSheetSource  # noqa: E402

PRODUCT_HEADER = [
    "id", "stock", "name", "name_ua", "price", "category", "pictures",
    "vendor", "description", "description_ua", "params",
]
CHAIR_ROW = [
    "101", "yes", "Chair", "Крісло", "500", "12", "img1.jpg,img2.jpg",
    "AcmeCo", "Desc &reg; text", "Опис", "Color - Black",
]


@pytest.fixture
def sheets() -> dict[str, list[list[str]]]:
    return {
        "Products": [PRODUCT_HEADER, list(CHAIR_ROW)],
        "Categories": [["id", "name"], ["12", "Furniture"]],
    }


@pytest.fixture
def source(sheets) -> StaticSheetSource:
    return StaticSheetSource(sheets)


@pytest.fixture
def feeds_config_file(tmp_path: Path) -> Path:
    path = tmp_path / "feeds_config.json"
    path.write_text(
        json.dumps(
            {
                "active": "Main Feed",
                "feeds": {
                    "Main Feed": {
                        "spreadsheet_id": "sheet-123",
                        "sheet_names": ["Products"],
                        "category_sheet": "Categories",
                    },
                    "Private Feed": {
                        "spreadsheet_id": "sheet-456",
                        "sheet_names": ["Products"],
                        "category_sheet": "Categories",
                        "only_available": True,
                        "api_key": "secret-key",
                    },
                },
            },
            ensure_ascii=False,
        ),
        encoding="utf-8",
    )
    return path
