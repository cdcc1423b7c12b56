from datetime import datetime, timezone
from pathlib import Path

import pytest

from sheetfeed.core.utils import iso_timestamp, sanitize_slug, write_text_atomic


def test_sanitize_slug():
    assert sanitize_slug("Main Feed") == "main-feed"
    assert sanitize_slug("  Rozetka / UA!  ") == "rozetka-ua"
    assert sanitize_slug("") == ""


def test_iso_timestamp_has_milliseconds_and_z():
    now = datetime(2024, 5, 1, 9, 30, 0, 123456, tzinfo=timezone.utc)
    assert iso_timestamp(now) == "2024-05-01T09:30:00.123Z"


def test_write_text_atomic_skips_unchanged(tmp_path):
    path = tmp_path / "out" / "feed.xml"
    assert write_text_atomic(path, "<a/>") is True
    assert write_text_atomic(path, "<a/>") is False
    assert path.read_text(encoding="utf-8") == "<a/>"


def test_write_text_atomic_removes_temp_file_on_failure(tmp_path, monkeypatch):
    path = tmp_path / "feed.xml"
    path.write_text("old", encoding="utf-8")

    def _fail(self, target):
        raise OSError("disk full")

    monkeypatch.setattr(Path, "replace", _fail)
    with pytest.raises(OSError):
        write_text_atomic(path, "new")

    assert path.read_text(encoding="utf-8") == "old"
    assert not (tmp_path / "feed.xml.tmp").exists()
