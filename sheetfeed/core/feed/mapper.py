"""
Map spreadsheet rows to offers and category bindings.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional, Sequence, Union

from .models import (
    AVAILABLE_STOCK_QUANTITY,
    BindingColumns,
    CategoryBinding,
    Offer,
    OfferColumns,
    Param,
)
from .sanitize import sanitize_cdata, sanitize_text


PARAM_SEPARATOR = ' - '


@dataclass(frozen=True)
class Present:
    """A string cell, possibly empty."""
    value: str


@dataclass(frozen=True)
class Defaulted:
    """A cell that was absent ('missing') or not a string ('invalid')."""
    reason: str
    value: str = ''


Cell = Union[Present, Defaulted]


def read_cell(row: Sequence[Any], index: int) -> Cell:
    if index < 0 or index >= len(row):
        return Defaulted('missing')
    raw = row[index]
    if raw is None:
        return Defaulted('missing')
    if not isinstance(raw, str):
        return Defaulted('invalid')
    return Present(raw)


@dataclass(frozen=True)
class ParsedRow:
    """Row cells keyed by field name."""
    cells: Dict[str, Cell]

    def text(self, name: str) -> str:
        return self.cells[name].value

    def defaulted(self) -> List[str]:
        """Names of the fields that fell back to a default."""
        return [name for name, cell in self.cells.items() if isinstance(cell, Defaulted)]


def _as_row(row: Any) -> Sequence[Any]:
    if isinstance(row, (list, tuple)):
        return row
    return ()


def parse_row(row: Any, columns: OfferColumns = OfferColumns()) -> ParsedRow:
    """Read every offer column of a row. Never raises."""
    cells = _as_row(row)
    return ParsedRow({
        f.name: read_cell(cells, getattr(columns, f.name))
        for f in fields(columns)
    })


def split_pictures(cell: str) -> List[str]:
    """Split a comma separated pictures cell into sanitized URLs."""
    if not cell:
        return []
    parts = cell.split(',') if ',' in cell else [cell]
    return [sanitize_text(p.strip()) for p in parts if p.strip()]


def parse_params(cell: str) -> List[Param]:
    """
    Parse a parameters cell, one ``Name - Value`` pair per line.

    Lines without the separator, or with an empty side, are dropped.
    Anything after a second separator is ignored.
    """
    if not cell:
        return []
    params = []
    for line in cell.split('\n'):
        if PARAM_SEPARATOR not in line:
            continue
        parts = line.split(PARAM_SEPARATOR)
        name, value = parts[0].strip(), parts[1].strip()
        if name and value:
            params.append(Param(sanitize_text(name), sanitize_text(value)))
    return params


def offer_from_parsed(parsed: ParsedRow) -> Offer:
    available = bool(parsed.text('stock'))
    vendor = parsed.text('vendor')

    return Offer(
        id=parsed.text('id'),
        available=available,
        stock_quantity=AVAILABLE_STOCK_QUANTITY if available else 0,
        name=sanitize_text(parsed.text('name')),
        name_ua=sanitize_text(parsed.text('name_ua')),
        price=sanitize_text(parsed.text('price')),
        category_id=sanitize_text(parsed.text('category_id')),
        pictures=tuple(split_pictures(parsed.text('pictures'))),
        vendor=sanitize_text(vendor) if vendor else None,
        description=sanitize_cdata(parsed.text('description')).strip(),
        description_ua=sanitize_cdata(parsed.text('description_ua')).strip(),
        params=tuple(parse_params(parsed.text('params'))),
    )


def map_row(row: Any, columns: OfferColumns = OfferColumns()) -> Offer:
    """
    Convert one product sheet row into an Offer.

    Short rows and non-string cells degrade to empty values, so any row
    yields an Offer.
    """
    return offer_from_parsed(parse_row(row, columns))


def map_binding(row: Any, columns: BindingColumns = BindingColumns()) -> Optional[CategoryBinding]:
    """Convert a category bindings row, None when the id or name is empty."""
    cells = _as_row(row)
    category_id = read_cell(cells, columns.id).value
    name = read_cell(cells, columns.name).value
    if not category_id or not name:
        return None
    return CategoryBinding(id=sanitize_text(category_id), name=sanitize_text(name))
