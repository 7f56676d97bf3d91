import csv
import io
from typing import Any

import pandas as pd
from lxml import etree

from ..errors import FeedParseError

CSV_DELIMITER = ";"

# Ordered container paths for the repeating product element in XML feeds.
XML_CONTAINER_PATHS: tuple[str, ...] = (
    "list.product",
    "products.product",
    "items.item",
    "catalog.product",
    "feed.product",
    "root.product",
    "dane.produkt",
)


def decode_feed_bytes(data: bytes) -> str:
    for encoding in ("utf-8-sig", "utf-8", "cp1250"):
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise FeedParseError("Feed must be UTF-8 or Windows-1250 encoded.")


def csv_rows(csv_text: str, *, delimiter: str = CSV_DELIMITER) -> list[dict[str, str]]:
    reader = csv.DictReader(io.StringIO(csv_text), delimiter=delimiter)
    headers = [str(header or "").strip() for header in reader.fieldnames or []]
    if not any(headers):
        raise FeedParseError("CSV header row is required.")
    reader.fieldnames = headers
    rows: list[dict[str, str]] = []
    for row in reader:
        rows.append(
            {
                str(key or ""): str(value or "").strip()
                for key, value in row.items()
                if key is not None
            }
        )
    return rows


def spreadsheet_rows(data: bytes, *, engine: str | None = None) -> list[dict[str, Any]]:
    try:
        frame = pd.read_excel(io.BytesIO(data), sheet_name=0, dtype=object, engine=engine)
    except Exception as exc:
        raise FeedParseError(f"Cannot read spreadsheet: {exc}") from exc

    frame = frame.dropna(how="all")
    frame.columns = [str(column).strip() for column in frame.columns]
    frame = frame.astype(object).where(pd.notna(frame), None)
    return frame.to_dict(orient="records")


def _local_name(element: etree._Element) -> str:
    return etree.QName(element).localname


def element_to_node(element: etree._Element) -> Any:
    """Convert an XML element into plain Python data.

    Leaf elements without attributes become their stripped text. Anything else
    becomes a dict: child elements are grouped by tag into lists, attributes
    live under ``"$"`` and the element's own text under ``"_"``.
    """
    children = [child for child in element if isinstance(child.tag, str)]
    text = (element.text or "").strip()
    attributes = {str(key): str(value) for key, value in element.attrib.items()}
    if not children and not attributes:
        return text

    node: dict[str, Any] = {}
    if attributes:
        node["$"] = attributes
    if text:
        node["_"] = text
    for child in children:
        node.setdefault(_local_name(child), []).append(element_to_node(child))
    return node


def xml_tree(data: bytes) -> dict[str, Any]:
    parser = etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        huge_tree=True,
        remove_comments=True,
    )
    try:
        root = etree.fromstring(data, parser=parser)
    except etree.XMLSyntaxError as exc:
        raise FeedParseError(f"Malformed XML feed: {exc}") from exc
    return {_local_name(root): element_to_node(root)}


def walk_path(tree: Any, path: str) -> Any:
    node = tree
    for part in path.split("."):
        if isinstance(node, list):
            node = node[0] if node else None
        if not isinstance(node, dict):
            return None
        node = node.get(part)
    return node


def find_xml_items(tree: dict[str, Any]) -> tuple[str | None, list[Any]]:
    for path in XML_CONTAINER_PATHS:
        items = walk_path(tree, path)
        if isinstance(items, list) and items:
            return path, items
    return None, []


__all__ = [
    "CSV_DELIMITER",
    "XML_CONTAINER_PATHS",
    "csv_rows",
    "decode_feed_bytes",
    "element_to_node",
    "find_xml_items",
    "spreadsheet_rows",
    "walk_path",
    "xml_tree",
]
