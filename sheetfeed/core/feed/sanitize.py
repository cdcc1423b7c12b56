"""
Text sanitizing for feed fields.

Spreadsheet text arrives with raw ampersands, legacy HTML entities and the odd
literal ``]]>``. Field values are normalized here before they reach the XML
writer, which relies on every ``&`` already starting a canonical entity.
"""

import re


# Entity names that XML itself defines. Shared by sanitize_text, sanitize_cdata
# and the post-serialization guard.
CANONICAL_ENTITIES = ("amp", "lt", "gt", "quot", "apos")

CANONICAL_ENTITY_PATTERN = "|".join(CANONICAL_ENTITIES)

# Legacy named entities that spreadsheets copied from web pages tend to carry
LEGACY_ENTITIES = {
    "reg": "®",
    "copy": "©",
    "trade": "™",
    "nbsp": " ",
}

_LEGACY_ENTITY_RE = re.compile(
    r"&(" + "|".join(LEGACY_ENTITIES) + r");?",
    re.IGNORECASE
)
_RAW_AMPERSAND_RE = re.compile(r"&(?!(?:" + CANONICAL_ENTITY_PATTERN + r");?)")

CDATA_TERMINATOR = "]]>"
# Closes the open section after "]]", then reopens one for the ">"
CDATA_SPLIT = "]]]]><![CDATA[>"


def _replace_legacy_entity(match: "re.Match") -> str:
    return LEGACY_ENTITIES[match.group(1).lower()]


def sanitize_text(text: str) -> str:
    """
    Normalize legacy entities and escape stray ampersands.

    Args:
        text: Raw cell text

    Returns:
        Text where every ``&`` starts one of the canonical XML entities.
    """
    if not text:
        return ""
    text = _LEGACY_ENTITY_RE.sub(_replace_legacy_entity, text)
    return _RAW_AMPERSAND_RE.sub("&amp;", text)


def sanitize_cdata(text: str) -> str:
    """
    Sanitize text destined for a CDATA section.

    Applies sanitize_text, then splits every ``]]>`` across two sections so
    the literal bytes survive a parse.
    """
    return sanitize_text(text).replace(CDATA_TERMINATOR, CDATA_SPLIT)
