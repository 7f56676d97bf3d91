from decimal import Decimal

from catalogpress.core.summary import summarize_products
from tests.helpers._feed_builders import make_product


def test_summary_counts_and_ranges() -> None:
    products = [
        make_product(id="1", price="0", availability_count=0, category="Koce", color="szary"),
        make_product(id="2", price="19.90", availability_count=4, category="Ręczniki", color="biały"),
        make_product(id="3", price="7.50", availability_count=10, category="Koce", composition="len"),
    ]

    summary = summarize_products(products)

    assert summary.total_products == 3
    assert summary.available_products == 2
    assert summary.estimated_pages == 2
    assert summary.categories == ["Koce", "Ręczniki"]
    assert summary.colors == ["biały", "szary"]
    assert summary.compositions == ["len"]
    assert summary.price_min == Decimal("7.50")
    assert summary.price_max == Decimal("19.90")
    assert summary.stock_min == 0
    assert summary.stock_max == 10


def test_summary_price_min_is_zero_without_positive_prices() -> None:
    summary = summarize_products([make_product(price="0"), make_product(price="-3")])

    assert summary.price_min == Decimal("0")
    assert summary.price_max == Decimal("0")


def test_empty_summary() -> None:
    payload = summarize_products([]).to_dict()

    assert payload["total_products"] == 0
    assert payload["estimated_pages"] == 0
    assert payload["price_range"] == {"min": "0.00", "max": "0.00"}
    assert payload["categories"] == []


def test_summary_to_dict_formats_prices() -> None:
    payload = summarize_products([make_product(price="12.5", availability_count=3)]).to_dict()

    assert payload["price_range"] == {"min": "12.50", "max": "12.50"}
    assert payload["stock_range"] == {"min": 3.0, "max": 3.0}
    assert payload["available_products"] == 1
