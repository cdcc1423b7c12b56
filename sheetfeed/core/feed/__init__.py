"""
Feed generation core module.
"""

from .models import FeedConfig, Offer, CategoryBinding, Catalog
from .sanitize import sanitize_text, sanitize_cdata, CANONICAL_ENTITIES
from .mapper import map_row, map_binding
from .xml_writer import assemble, serialize_catalog
from .guard import guard
from .sheets_reader import GoogleSheetSource, SheetSourceError
from .service import generate_feed

__all__ = [
    'FeedConfig',
    'Offer',
    'CategoryBinding',
    'Catalog',
    'sanitize_text',
    'sanitize_cdata',
    'CANONICAL_ENTITIES',
    'map_row',
    'map_binding',
    'assemble',
    'serialize_catalog',
    'guard',
    'GoogleSheetSource',
    'SheetSourceError',
    'generate_feed'
]
