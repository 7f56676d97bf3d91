"""Tolerant field resolution over heterogeneous feed records.

A record is a plain mapping: a CSV or spreadsheet row, or an XML item converted
by :func:`catalogpress.core.importers.common.element_to_node`. Every canonical
field is looked up through an ordered list of candidate keys; the first
non-blank value wins and a missing field resolves to an empty string.
"""

import math
import re
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from ..canonical import Product

_BASE_FIELD_KEYS: dict[str, tuple[str, ...]] = {
    "id": ("id", "product_id", "ID"),
    "index": ("Index", "sku", "symbol", "kod"),
    "name": ("nazwa", "name", "title"),
    "description": ("Info", "description", "opis"),
    "category": ("category", "kategoria"),
    "price": ("price", "cena", "cena_brutto", "price_gross"),
    "price_net": ("priceNet", "price_net", "cena_netto", "netto"),
    "image_url": ("foto", "image", "image_url", "imageUrl", "zdjecie", "img", "photo"),
    "b2b_link": ("B2B_Link", "b2bLink", "b2b_url"),
    "availability_count": (
        "availabilityCount",
        "availability_count",
        "availability",
        "stock",
        "stan",
        "ilosc",
        "quantity",
        "qty",
    ),
    "color": ("kolor", "color"),
    "composition": ("sklad", "skład", "composition", "material"),
    "grammage": ("Gramatura", "grammage"),
    "pieces_in_carton": ("W_kartonie", "ilosc_w_kartonie", "piecesInCarton", "pieces_in_carton"),
    "package_width": ("szerokosc_opakowania", "packageWidth", "package_width"),
    "package_height": ("wysokosc_opakowania", "packageHeight", "package_height"),
    "package_depth": ("glebokosc_opakowania", "packageDepth", "package_depth"),
    "package_weight": ("waga_opakowania", "packageWeight", "package_weight"),
}

FLAT_FIELD_KEYS: dict[str, tuple[str, ...]] = {
    **_BASE_FIELD_KEYS,
    "category": ("category/__cdata", *_BASE_FIELD_KEYS["category"]),
}

XML_FIELD_KEYS: dict[str, tuple[str, ...]] = {
    **_BASE_FIELD_KEYS,
    "b2b_link": (*_BASE_FIELD_KEYS["b2b_link"], "link"),
}

# Attribute codes (eid) used by abstore feeds, matched case-insensitively.
ABSTORE_ATTRIBUTE_CODES: dict[str, tuple[str, ...]] = {
    "ean": ("ean", "ean13", "gtin", "kod_ean"),
    "grammage": ("gramatura", "grammage"),
    "color": ("kolor", "color"),
    "composition": ("sklad", "skład", "composition"),
    "pieces_in_carton": ("ilosc_w_kartonie", "szt_w_kartonie", "pieces_in_carton"),
    "package_width": ("szerokosc_opakowania", "package_width"),
    "package_height": ("wysokosc_opakowania", "package_height"),
    "package_depth": ("glebokosc_opakowania", "dlugosc_opakowania", "package_depth"),
    "package_weight": ("waga_opakowania", "package_weight"),
}

EAN_KEYS: tuple[str, ...] = ("EAN", "ean", "Ean", "kod_kreskowy", "barcode", "GTIN", "gtin")
EAN_PREFIX = "590"
_MIN_EAN_LENGTH = 8
_MAX_EAN_LENGTH = 14

_GRAMMAGE_RE = re.compile(
    r"(?:Grammage|Gramatura)[:\s]+(\d+)\s*(g/m2|g/m²|gsm|g)?",
    re.IGNORECASE,
)
_DEFAULT_GRAMMAGE_UNIT = "g/m²"
_DESCRIPTION_FIELDS = ("description", "name")

# Fields resolved by dedicated functions below.
_SPECIAL_FIELDS = {"ean", "grammage", "category"}


def unwrap(value: Any) -> str:
    while isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, Mapping):
        return unwrap(value.get("_"))
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    if isinstance(value, Decimal) and value == value.to_integral_value():
        return str(value.quantize(Decimal("1")))
    return str(value).strip()


def _lookup(record: Mapping[str, Any], key: str) -> Any:
    if key in record:
        return record[key]
    lowered = key.lower()
    for candidate, value in record.items():
        if str(candidate).lower() == lowered:
            return value
    return None


def resolve(record: Mapping[str, Any], candidate_keys: tuple[str, ...] | list[str]) -> str:
    for key in candidate_keys:
        value = unwrap(_lookup(record, key))
        if value:
            return value
    return ""


def attribute_map(record: Mapping[str, Any]) -> dict[str, str]:
    container = _lookup(record, "attributes")
    while isinstance(container, list):
        container = container[0] if container else None
    entries = container.get("attribute") if isinstance(container, Mapping) else None
    if entries is None:
        entries = _lookup(record, "attribute")
    if isinstance(entries, Mapping):
        entries = [entries]
    if not isinstance(entries, list):
        return {}

    attributes: dict[str, str] = {}
    for entry in entries:
        if not isinstance(entry, Mapping):
            continue
        own_attributes = entry.get("$") if isinstance(entry.get("$"), Mapping) else {}
        code = unwrap(entry.get("eid")) or unwrap(own_attributes.get("eid"))
        if not code:
            continue
        value = unwrap(entry.get("value")) or unwrap(entry.get("_"))
        attributes.setdefault(code.lower(), value)
    return attributes


def resolve_attribute(
    record: Mapping[str, Any],
    field: str,
    *,
    attributes: dict[str, str] | None = None,
) -> str:
    found = attribute_map(record) if attributes is None else attributes
    for code in ABSTORE_ATTRIBUTE_CODES.get(field, ()):
        value = found.get(code.lower(), "")
        if value:
            return value
    return ""


def _looks_like_polish_ean(value: str, *, max_length: int | None = None) -> bool:
    if not value.startswith(EAN_PREFIX) or len(value) < _MIN_EAN_LENGTH:
        return False
    return max_length is None or len(value) <= max_length


def resolve_ean(
    record: Mapping[str, Any],
    *,
    flat: bool,
    attributes: dict[str, str] | None = None,
) -> str:
    """Find the barcode number for a record.

    The "590" prefix checks for flat rows are a GS1 Poland heuristic and only
    apply to CSV/spreadsheet feeds.
    """
    attribute_ean = resolve_attribute(record, "ean", attributes=attributes)
    if len(attribute_ean) >= _MIN_EAN_LENGTH:
        return attribute_ean

    if flat:
        for key in EAN_KEYS:
            value = unwrap(record.get(key))
            if _looks_like_polish_ean(value):
                return value
        for raw in record.values():
            value = unwrap(raw)
            if _looks_like_polish_ean(value, max_length=_MAX_EAN_LENGTH):
                return value
    else:
        for key in EAN_KEYS:
            value = unwrap(_lookup(record, key))
            if len(value) >= _MIN_EAN_LENGTH:
                return value

    keys = FLAT_FIELD_KEYS if flat else XML_FIELD_KEYS
    return resolve(record, keys["index"]) or resolve(record, keys["id"])


def grammage_from_text(text: str) -> str:
    match = _GRAMMAGE_RE.search(text or "")
    if not match:
        return ""
    digits, unit = match.groups()
    return f"{digits} {unit or _DEFAULT_GRAMMAGE_UNIT}"


def resolve_grammage(
    record: Mapping[str, Any],
    *,
    flat: bool,
    attributes: dict[str, str] | None = None,
) -> str:
    keys = FLAT_FIELD_KEYS if flat else XML_FIELD_KEYS
    value = resolve_attribute(record, "grammage", attributes=attributes) or resolve(record, keys["grammage"])
    if value:
        return value
    for field in _DESCRIPTION_FIELDS:
        found = grammage_from_text(resolve(record, keys[field]))
        if found:
            return found
    return ""


def resolve_category(record: Mapping[str, Any], *, flat: bool) -> str:
    raw = _lookup(record, "category")
    while isinstance(raw, list) and len(raw) == 1:
        raw = raw[0]
    if isinstance(raw, Mapping):
        value = unwrap(raw)
        if value:
            return value
    keys = FLAT_FIELD_KEYS if flat else XML_FIELD_KEYS
    return resolve(record, keys["category"])


def resolve_product(record: Mapping[str, Any], *, flat: bool) -> Product:
    if not isinstance(record, Mapping):
        record = {}
    keys = FLAT_FIELD_KEYS if flat else XML_FIELD_KEYS
    attributes = attribute_map(record)

    values: dict[str, str] = {}
    for field, candidates in keys.items():
        if field in _SPECIAL_FIELDS:
            continue
        values[field] = resolve_attribute(record, field, attributes=attributes) or resolve(record, candidates)

    return Product(
        **values,
        category=resolve_category(record, flat=flat),
        grammage=resolve_grammage(record, flat=flat, attributes=attributes),
        ean=resolve_ean(record, flat=flat, attributes=attributes),
    )


__all__ = [
    "ABSTORE_ATTRIBUTE_CODES",
    "EAN_KEYS",
    "EAN_PREFIX",
    "FLAT_FIELD_KEYS",
    "XML_FIELD_KEYS",
    "attribute_map",
    "grammage_from_text",
    "resolve",
    "resolve_attribute",
    "resolve_category",
    "resolve_ean",
    "resolve_grammage",
    "resolve_product",
    "unwrap",
]
