"""
Feed data models.
"""

from dataclasses import dataclass, field, fields
from typing import Optional, List, Tuple, Dict, Any


CURRENCY_ID = 'UAH'
CURRENCY_RATE = '1'

# Placeholder for "in stock"; the sheets do not carry real inventory counts
AVAILABLE_STOCK_QUANTITY = 30


@dataclass(frozen=True)
class OfferColumns:
    """Zero-based positions of offer fields in a product sheet row."""
    id: int = 0
    stock: int = 1
    name: int = 2
    name_ua: int = 3
    price: int = 4
    category_id: int = 5
    pictures: int = 6
    vendor: int = 7
    description: int = 8
    description_ua: int = 9
    params: int = 10

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, int]]) -> 'OfferColumns':
        """Build a layout from partial overrides, unknown keys are rejected."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown offer columns: {', '.join(sorted(unknown))}")
        return cls(**{k: int(v) for k, v in data.items()})


@dataclass(frozen=True)
class BindingColumns:
    """Zero-based positions in the category bindings sheet."""
    id: int = 0
    name: int = 1


@dataclass(frozen=True)
class Param:
    name: str
    value: str


@dataclass(frozen=True)
class Offer:
    """One sellable product entry, fields already sanitized."""
    id: str
    available: bool
    stock_quantity: int
    name: str = ''
    name_ua: str = ''
    price: str = ''
    category_id: str = ''
    pictures: Tuple[str, ...] = ()
    vendor: Optional[str] = None  # Omitted from output when None
    description: str = ''  # CDATA-safe
    description_ua: str = ''  # CDATA-safe
    params: Tuple[Param, ...] = ()


@dataclass(frozen=True)
class CategoryBinding:
    id: str
    name: str


@dataclass(frozen=True)
class Currency:
    id: str = CURRENCY_ID
    rate: str = CURRENCY_RATE


@dataclass(frozen=True)
class Catalog:
    """Everything one feed document is built from, in collection order."""
    offers: Tuple[Offer, ...] = ()
    categories: Tuple[CategoryBinding, ...] = ()
    currency: Currency = field(default_factory=Currency)


@dataclass
class FeedConfig:
    """Feed generation configuration."""
    # Source
    spreadsheet_id: str
    sheet_names: List[str]
    category_sheet: str
    name: str = ''

    # Filters
    only_available: bool = False

    # Layout
    columns: OfferColumns = field(default_factory=OfferColumns)
    binding_columns: BindingColumns = field(default_factory=BindingColumns)

    # Output settings
    output_filename: str = 'feed.xml'
    pretty: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any], name: str = '') -> 'FeedConfig':
        """
        Build a FeedConfig from a feed profile dict.

        Args:
            data: Profile from the feeds config file
            name: Profile name

        Raises:
            ValueError: If a required key is missing or the column overrides are invalid.
        """
        for key in ('spreadsheet_id', 'sheet_names', 'category_sheet'):
            if not data.get(key):
                raise ValueError(f"Feed '{name}' is missing '{key}'")

        sheet_names = data['sheet_names']
        if isinstance(sheet_names, str):
            sheet_names = [sheet_names]

        return cls(
            spreadsheet_id=data['spreadsheet_id'],
            sheet_names=list(sheet_names),
            category_sheet=data['category_sheet'],
            name=name,
            only_available=bool(data.get('only_available', False)),
            columns=OfferColumns.from_dict(data.get('columns')),
            output_filename=data.get('output_filename') or 'feed.xml',
            pretty=bool(data.get('pretty', True)),
        )


@dataclass
class FeedDocument:
    """Serialized feed and what went into it."""
    xml: str
    offers_count: int
    categories_count: int
    corrections: List[str] = field(default_factory=list)


@dataclass
class FeedResult:
    """Outcome of one generation run."""
    document: FeedDocument
    output_path: Optional[str] = None
    written: bool = False
    rows_count: int = 0
    dropped_bindings: int = 0
    filtered_out: int = 0
