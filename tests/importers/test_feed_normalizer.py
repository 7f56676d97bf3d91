import logging
from decimal import Decimal

import pytest

from catalogpress.core.errors import FeedParseError, UnsupportedFormat
from catalogpress.core.importers.feed import normalize, resolve_dialect
from tests.helpers._feed_builders import (
    ABSTORE_XML_FEED,
    GENERIC_XML_FEED,
    csv_feed_bytes,
    xlsx_feed_bytes,
)


def test_csv_feed_maps_polish_columns() -> None:
    products = normalize(csv_feed_bytes(), "feed.csv")

    assert [p.id for p in products] == ["1", "2", "3"]
    first = products[0]
    assert first.index == "IDX-001"
    assert first.name == "Ręcznik łazienkowy"
    assert first.category == "Ręczniki"
    assert first.price == Decimal("49.99")
    assert first.price_net == Decimal("40.64")
    assert first.image_url == "https://img.example.com/1.jpg"
    assert first.b2b_link == "https://b2b.example.com/p/1"
    assert first.ean == "5901234123457"
    assert first.availability_count == 12
    assert first.color == "biały"
    assert first.composition == "100% bawełna"
    assert first.grammage == "500 g/m2"
    assert first.pieces_in_carton == "10"


def test_csv_feed_coerces_bad_numbers_to_zero_and_falls_back_to_index_for_ean() -> None:
    products = normalize(csv_feed_bytes(), "csv")

    assert products[1].ean == "IDX-002"
    assert products[2].price == Decimal("0")
    assert products[2].availability_count == 0


def test_csv_feed_accepts_bom_and_windows_1250() -> None:
    with_bom = b"\xef\xbb\xbf" + csv_feed_bytes()
    legacy = csv_feed_bytes("cp1250")

    assert normalize(with_bom, "csv")[0].id == "1"
    assert normalize(legacy, "csv")[0].name == "Ręcznik łazienkowy"


def test_csv_without_header_is_a_parse_error() -> None:
    with pytest.raises(FeedParseError, match="header"):
        normalize(b"", "csv")


def test_generic_xml_feed() -> None:
    products = normalize(GENERIC_XML_FEED, "products.xml")

    assert len(products) == 2
    obrus, serwetka = products
    assert obrus.index == "SKU-10"
    assert obrus.name == "Obrus lniany"
    assert obrus.category == "Obrusy"
    assert obrus.price == Decimal("89.90")
    assert obrus.b2b_link == "https://b2b.example.com/p/10"
    assert obrus.ean == "5907777000011"
    assert obrus.availability_count == 7
    assert obrus.grammage == "180 gsm"
    assert serwetka.price == Decimal("0")
    assert serwetka.ean == "11"


def test_abstore_feed_reads_attribute_codes() -> None:
    (product,) = normalize(ABSTORE_XML_FEED, "abstore")

    assert product.index == "AB-501"
    assert product.name == "Fartuch kuchenny"
    assert product.category == "Kuchnia"
    assert product.price == Decimal("35.50")
    assert product.price_net == Decimal("28.86")
    assert product.ean == "5909990000015"
    assert product.grammage == "220 g/m²"
    assert product.color == "czerwony"
    assert product.composition == "bawełna 100%"
    assert product.availability_count == 3


def test_xml_without_known_container_returns_empty_list(caplog) -> None:
    caplog.set_level(logging.WARNING)

    products = normalize(b"<shop><thing><id>1</id></thing></shop>", "xml")

    assert products == []
    assert "No product list found" in caplog.text


def test_xml_container_order_prefers_earlier_paths() -> None:
    feed = b"<root><product><id>r1</id></product><product><id>r2</id></product></root>"

    assert [p.id for p in normalize(feed, "xml")] == ["r1", "r2"]


def test_malformed_xml_is_a_parse_error() -> None:
    with pytest.raises(FeedParseError, match="Malformed XML"):
        normalize(b"<products><product>", "xml")


def test_spreadsheet_feed_keeps_ean_digits() -> None:
    data = xlsx_feed_bytes(
        [
            {"Index": "X-1", "nazwa": "Koc", "price": 12.5, "EAN": 5901234123457, "stan": 4},
            {"Index": None, "nazwa": None, "price": None, "EAN": None, "stan": None},
            {"Index": "X-2", "nazwa": "Pled", "price": "7,20", "EAN": None, "stan": 0},
        ]
    )

    products = normalize(data, "catalog.xlsx")

    assert [p.index for p in products] == ["X-1", "X-2"]
    assert products[0].ean == "5901234123457"
    assert products[0].price == Decimal("12.5")
    assert products[0].availability_count == 4
    assert products[1].price == Decimal("7.20")
    assert products[1].ean == "X-2"


def test_unreadable_spreadsheet_is_a_parse_error() -> None:
    with pytest.raises(FeedParseError, match="spreadsheet"):
        normalize(b"definitely not a workbook", "xlsx")


def test_truncation_keeps_first_records_in_order() -> None:
    products = normalize(csv_feed_bytes(), "csv", max_products=2)

    assert [p.id for p in products] == ["1", "2"]


@pytest.mark.parametrize(
    ("hint", "dialect"),
    [
        ("feed.CSV", "csv"),
        ("export.xlsx", "xlsx"),
        ("legacy.xls", "xls"),
        ("abstore", "xml"),
        ("spreadsheet", "xlsx"),
        (".xml", "xml"),
    ],
)
def test_resolve_dialect(hint: str, dialect: str) -> None:
    assert resolve_dialect(hint).name == dialect


def test_unknown_format_is_rejected() -> None:
    with pytest.raises(UnsupportedFormat, match="Unsupported feed format"):
        normalize(b"{}", "feed.json")
    with pytest.raises(UnsupportedFormat):
        resolve_dialect(None)
