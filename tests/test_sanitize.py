import xml.etree.ElementTree as ET

import pytest

from sheetfeed.core.feed.sanitize import (
    CANONICAL_ENTITIES,
    sanitize_cdata,
    sanitize_text,
)


@pytest.mark.parametrize("value", [None, ""])
def test_sanitize_text_empty(value):
    assert sanitize_text(value) == ""


@pytest.mark.parametrize("text", ["Chair", "Крісло <b>", "a]]>b", "100% cotton; 2 > 1"])
def test_text_without_ampersand_is_unchanged(text):
    assert sanitize_text(text) == text


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Brand&reg;", "Brand®"),
        ("Brand&REG", "Brand®"),
        ("&copy; 2024", "© 2024"),
        ("Name&trade;", "Name™"),
        ("a&nbsp;b", "a b"),
        ("a&NBSP;b&nbsp;c", "a b c"),
    ],
)
def test_legacy_entities_are_replaced(raw, expected):
    assert sanitize_text(raw) == expected


def test_raw_ampersand_is_escaped_once():
    assert sanitize_text("Tom & Jerry") == "Tom &amp; Jerry"
    assert sanitize_text("AT&T") == "AT&amp;T"


@pytest.mark.parametrize("name", CANONICAL_ENTITIES)
def test_canonical_entities_are_kept(name):
    text = f"x &{name}; y"
    assert sanitize_text(text) == text


def test_non_canonical_entity_is_escaped():
    assert sanitize_text("&laquo;quoted&raquo;") == "&amp;laquo;quoted&amp;raquo;"


def test_sanitize_text_is_idempotent():
    once = sanitize_text("Fish & Chips &reg; &laquo;x&raquo; &amp; more")
    assert sanitize_text(once) == once
    assert "&amp;amp;" not in once


def test_cdata_terminator_is_split():
    assert sanitize_cdata("a]]>b") == "a]]]]><![CDATA[>b"


@pytest.mark.parametrize(
    "text",
    [
        "plain description",
        "a]]>b",
        "]]>]]>",
        "x]]]]>y",
        "start]]>middle]]>end &reg; & more",
        "]]><![CDATA[",
        "",
    ],
)
def test_cdata_round_trip_through_parser(text):
    wrapped = f"<d><![CDATA[{sanitize_cdata(text)}]]></d>"
    parsed = ET.fromstring(wrapped).text or ""
    assert parsed == sanitize_text(text)
