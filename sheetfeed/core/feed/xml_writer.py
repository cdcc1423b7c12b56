"""
XML Writer for the YML product catalog.
"""

import re
import xml.etree.ElementTree as ET
from typing import Callable, List, Optional, Sequence

from .models import Catalog, CategoryBinding, Currency, Offer


XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
INDENT = '  '

# Control characters XML 1.0 does not allow (tab, LF and CR are fine)
_ILLEGAL_XML_CHARS_RE = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f]')


class CData(str):
    """Element text written verbatim inside a CDATA section."""


def escape_text(text: str) -> str:
    """
    Escape element text that has been through sanitize_text.

    Ampersands are left alone, sanitize_text already guarantees each one
    starts a canonical entity.
    """
    text = _ILLEGAL_XML_CHARS_RE.sub('', text or '')
    return text.replace('<', '&lt;').replace('>', '&gt;')


def escape_attr(text: str) -> str:
    return escape_text(text).replace('"', '&quot;')


def _text_element(parent: ET.Element, tag: str, text: str, attrib: Optional[dict] = None) -> ET.Element:
    elem = ET.SubElement(parent, tag, attrib or {})
    elem.text = text
    return elem


def _offer_element(parent: ET.Element, offer: Offer, currency_id: str) -> ET.Element:
    elem = ET.SubElement(parent, 'offer', {
        'id': offer.id,
        'available': 'true' if offer.available else 'false',
    })
    _text_element(elem, 'name', offer.name)
    _text_element(elem, 'name_ua', offer.name_ua)
    _text_element(elem, 'price', offer.price)
    _text_element(elem, 'currencyId', currency_id)
    _text_element(elem, 'categoryId', offer.category_id)

    for picture in offer.pictures:
        _text_element(elem, 'picture', picture)

    # Vendor and pictures are the only fields left out when empty
    if offer.vendor:
        _text_element(elem, 'vendor', offer.vendor)

    _text_element(elem, 'stock_quantity', str(offer.stock_quantity))
    _text_element(elem, 'description', CData(offer.description))
    _text_element(elem, 'description_ua', CData(offer.description_ua))

    for param in offer.params:
        _text_element(elem, 'param', param.value, {'name': param.name})
    return elem


def assemble(
    offers: Sequence[Offer],
    bindings: Sequence[CategoryBinding],
    timestamp: str,
    currency: Currency = Currency()
) -> ET.Element:
    """
    Build the yml_catalog tree.

    Args:
        offers: Offers in feed order
        bindings: Category bindings in feed order
        timestamp: ISO-8601 build time for the ``date`` attribute
        currency: The single currency record

    Returns:
        Root ``yml_catalog`` element.
    """
    root = ET.Element('yml_catalog', {'date': timestamp})
    shop = ET.SubElement(root, 'shop')

    currencies = ET.SubElement(shop, 'currencies')
    ET.SubElement(currencies, 'currency', {'id': currency.id, 'rate': currency.rate})

    categories = ET.SubElement(shop, 'categories')
    for binding in bindings:
        _text_element(categories, 'category', binding.name, {'id': binding.id, 'rz_id': binding.id})

    offers_elem = ET.SubElement(shop, 'offers')
    for offer in offers:
        _offer_element(offers_elem, offer, currency.id)

    return root


def assemble_catalog(catalog: Catalog, timestamp: str) -> ET.Element:
    return assemble(catalog.offers, catalog.categories, timestamp, catalog.currency)


def _write_element(elem: ET.Element, lines: List[str], level: int, indent: str) -> None:
    pad = indent * level
    attrs = ''.join(f' {key}="{escape_attr(str(value))}"' for key, value in elem.attrib.items())
    children = list(elem)
    text = elem.text

    if children:
        lines.append(f'{pad}<{elem.tag}{attrs}>')
        for child in children:
            _write_element(child, lines, level + 1, indent)
        lines.append(f'{pad}</{elem.tag}>')
    elif isinstance(text, CData):
        content = _ILLEGAL_XML_CHARS_RE.sub('', text)
        lines.append(f'{pad}<{elem.tag}{attrs}><![CDATA[{content}]]></{elem.tag}>')
    elif text:
        lines.append(f'{pad}<{elem.tag}{attrs}>{escape_text(str(text))}</{elem.tag}>')
    else:
        lines.append(f'{pad}<{elem.tag}{attrs}/>')


def serialize_catalog(root: ET.Element, pretty: bool = True) -> str:
    """
    Serialize an assembled catalog to a UTF-8 XML document string.

    ElementTree's own serializer would escape the ampersands sanitize_text
    already produced and has no CDATA support, so the tree is written here.
    """
    lines: List[str] = []
    _write_element(root, lines, 0, INDENT if pretty else '')
    separator = '\n' if pretty else ''
    return XML_DECLARATION + '\n' + separator.join(lines) + '\n'


def write_catalog_xml(
    catalog: Catalog,
    timestamp: str,
    pretty: bool = True,
    log_callback: Optional[Callable[[str], None]] = None
) -> str:
    """
    Assemble and serialize a catalog.

    Args:
        catalog: Offers, categories and currency
        timestamp: ISO-8601 build time
        pretty: Indent the output
        log_callback: Optional callback for logging (receives message string)

    Returns:
        XML string
    """
    def log(msg: str):
        if log_callback:
            log_callback(msg)

    log(f"Building XML: {len(catalog.categories)} categories, {len(catalog.offers)} offers")
    root = assemble_catalog(catalog, timestamp)
    xml_string = serialize_catalog(root, pretty=pretty)
    log(f"XML ready ({len(xml_string)} chars)")
    return xml_string
