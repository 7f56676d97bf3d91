"""Feed normalization: raw bytes plus a format hint in, products out."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import PurePath
from typing import Any

from ..canonical import Product
from ..config import CoreConfig
from ..errors import UnsupportedFormat
from .common import csv_rows, decode_feed_bytes, find_xml_items, spreadsheet_rows, xml_tree
from .resolver import resolve_product

logger = logging.getLogger(__name__)

RecordParser = Callable[[bytes], list[Any]]


@dataclass(frozen=True)
class FeedDialect:
    name: str
    parse: RecordParser
    flat: bool


def _parse_csv(data: bytes) -> list[Any]:
    return csv_rows(decode_feed_bytes(data))


def _parse_xlsx(data: bytes) -> list[Any]:
    return spreadsheet_rows(data, engine="openpyxl")


def _parse_xls(data: bytes) -> list[Any]:
    return spreadsheet_rows(data, engine="xlrd")


def _parse_xml(data: bytes) -> list[Any]:
    path, items = find_xml_items(xml_tree(data))
    if path is None:
        logger.warning("No product list found in XML feed; check the feed structure.")
        return []
    logger.debug("XML products found under %s", path)
    return items


DIALECTS: dict[str, FeedDialect] = {
    "csv": FeedDialect(name="csv", parse=_parse_csv, flat=True),
    "xlsx": FeedDialect(name="xlsx", parse=_parse_xlsx, flat=True),
    "xls": FeedDialect(name="xls", parse=_parse_xls, flat=True),
    "xml": FeedDialect(name="xml", parse=_parse_xml, flat=False),
}

_HINT_ALIASES = {
    "abstore": "xml",
    "spreadsheet": "xlsx",
    "excel": "xlsx",
    "txt": "csv",
}

SUPPORTED_EXTENSIONS = (".csv", ".xml", ".xlsx", ".xls")


def resolve_dialect(format_hint: str | None) -> FeedDialect:
    """Pick the dialect from a file name, an extension or a dialect tag."""
    hint = str(format_hint or "").strip().lower()
    suffix = PurePath(hint).suffix if "." in hint else ""
    token = (suffix or hint).lstrip(".")
    token = _HINT_ALIASES.get(token, token)
    dialect = DIALECTS.get(token)
    if dialect is None:
        raise UnsupportedFormat(
            f"Unsupported feed format {format_hint!r}. Use XML, CSV or XLSX."
        )
    return dialect


def normalize(
    file_bytes: bytes,
    format_hint: str | None,
    *,
    max_products: int | None = None,
) -> list[Product]:
    dialect = resolve_dialect(format_hint)
    limit = CoreConfig().max_products if max_products is None else max_products

    records = dialect.parse(file_bytes)
    logger.info("Parsed %d %s record(s) from feed", len(records), dialect.name)
    if len(records) > limit:
        logger.info("Feed truncated to the first %d record(s)", limit)
    return [resolve_product(record, flat=dialect.flat) for record in records[:limit]]


__all__ = [
    "DIALECTS",
    "FeedDialect",
    "SUPPORTED_EXTENSIONS",
    "normalize",
    "resolve_dialect",
]
