"""
Utility functions.
"""

import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union


def sanitize_slug(text: str) -> str:
    """Convert text to URL-safe slug."""
    if not text:
        return ""
    slug = re.sub(r'[^\w\s-]', '', text.lower())
    slug = re.sub(r'[-\s]+', '-', slug)
    return slug.strip('-_')


def iso_timestamp(now: Optional[datetime] = None) -> str:
    """
    UTC timestamp in ISO-8601 with milliseconds, e.g. 2024-05-01T09:30:00.000Z.
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def write_text_atomic(path: Union[str, Path], data: str, encoding: str = 'utf-8') -> bool:
    """
    Write a file whole via a temporary sibling and rename.

    Returns:
        False when the file already holds exactly this content, True otherwise.
    """
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    new_bytes = data.encode(encoding)

    if p.exists() and p.read_bytes() == new_bytes:
        return False

    tmp = p.with_suffix(p.suffix + '.tmp')
    try:
        tmp.write_bytes(new_bytes)
        tmp.replace(p)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise
    return True
