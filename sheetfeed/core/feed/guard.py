"""
Whole-document entity check run after serialization.

CDATA sections are copied through untouched: their content is literal text
and never needs entity escaping.
"""

import re
from dataclasses import dataclass, field
from typing import List

from .sanitize import CANONICAL_ENTITY_PATTERN


# A whole CDATA section, or an ampersand that starts neither a canonical entity
# nor a character reference. The optional group captures an entity-like name
# that followed the ampersand.
_UNSAFE_AMPERSAND_RE = re.compile(
    r"(?P<cdata><!\[CDATA\[.*?\]\]>)"
    r"|&(?!(?:" + CANONICAL_ENTITY_PATTERN + r");|#[0-9]+;|#x[0-9A-Fa-f]+;)"
    r"(?P<name>[A-Za-z][A-Za-z0-9]*;?)?",
    re.DOTALL
)


@dataclass
class GuardResult:
    """Guarded document text and the fragments that had to be rewritten."""
    text: str
    corrections: List[str] = field(default_factory=list)

    @property
    def corrected(self) -> bool:
        return bool(self.corrections)


def guard(serialized: str) -> GuardResult:
    """
    Escape any entity-like text that slipped past field sanitizing.

    ``&name;`` with a non-canonical name becomes ``&amp;name;``, ``&name``
    becomes ``&amp;name`` and a bare ``&`` becomes ``&amp;``, so the parsed
    text equals the original. Running it on its own output changes nothing.

    Args:
        serialized: Complete serialized document

    Returns:
        GuardResult with the corrected text and the rewritten fragments.
    """
    corrections: List[str] = []

    def _escape(match: "re.Match") -> str:
        if match.group("cdata"):
            return match.group("cdata")
        corrections.append(match.group(0))
        return "&amp;" + (match.group("name") or "")

    text = _UNSAFE_AMPERSAND_RE.sub(_escape, serialized or "")
    return GuardResult(text=text, corrections=corrections)
