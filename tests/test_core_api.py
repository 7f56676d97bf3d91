from pathlib import Path

import pytest

from catalogpress.core import generate_catalog, load_feed
from catalogpress.core.api import catalog_filename, summarize_feed
from catalogpress.core.assets import AssetFetcher
from catalogpress.core.config import CoreConfig, config_from_env
from catalogpress.core.errors import EmptyFeed
from catalogpress.core.filters import CatalogFilters
from tests.helpers._feed_builders import GENERIC_XML_FEED, StubSession, csv_feed_bytes, make_product


def _offline_assets() -> AssetFetcher:
    return AssetFetcher(CoreConfig(fetch_workers=1), session=StubSession())


def test_load_feed_uses_file_name_as_format_hint(tmp_path: Path) -> None:
    path = tmp_path / "produkty.xml"
    path.write_bytes(GENERIC_XML_FEED)

    products = load_feed(path)

    assert [p.id for p in products] == ["10", "11"]
    assert load_feed(str(path))[0].name == "Obrus lniany"


def test_load_feed_bytes_need_explicit_hint() -> None:
    assert len(load_feed(csv_feed_bytes(), format_hint="csv")) == 3


def test_load_feed_honours_max_products() -> None:
    products = load_feed(csv_feed_bytes(), format_hint="csv", config=CoreConfig(max_products=1))

    assert [p.id for p in products] == ["1"]


def test_load_feed_without_records_is_empty_feed() -> None:
    with pytest.raises(EmptyFeed):
        load_feed(b"id;nazwa\n", format_hint="csv")


def test_summarize_feed() -> None:
    summary = summarize_feed(csv_feed_bytes(), format_hint="csv")

    assert summary.total_products == 3
    assert summary.available_products == 1


def test_generate_catalog_returns_pdf_and_metadata() -> None:
    products = [make_product(id=str(i)) for i in range(3)]

    result = generate_catalog(products, config=CoreConfig(), assets=_offline_assets())

    assert result.pdf_bytes.startswith(b"%PDF")
    assert result.filename == "katalog_spod-igly-i-nitki.pdf"
    assert result.page_count == 3
    assert result.product_count == 3


def test_generate_catalog_accepts_plain_filter_mapping() -> None:
    products = [make_product(id="a", price="5"), make_product(id="b", price="50")]

    result = generate_catalog(products, {"minPrice": "10"}, config=CoreConfig(), assets=_offline_assets())

    assert result.product_count == 1
    assert result.page_count == 2


def test_generate_catalog_rejects_filters_that_leave_nothing() -> None:
    products = [make_product(price="5")]

    with pytest.raises(EmptyFeed, match="No products match"):
        generate_catalog(products, CatalogFilters(min_price=100), config=CoreConfig(), assets=_offline_assets())


def test_catalog_filename_follows_config() -> None:
    assert catalog_filename(CoreConfig(catalog_name="demo")) == "katalog_demo.pdf"


def test_config_from_env(monkeypatch) -> None:
    monkeypatch.setenv("CATALOG_MAX_PRODUCTS", "25")
    monkeypatch.setenv("CATALOG_FETCH_WORKERS", "nope")
    monkeypatch.setenv("CATALOG_NAME", "hurt")

    config = config_from_env()

    assert config.max_products == 25
    assert config.fetch_workers == CoreConfig().fetch_workers
    assert config.catalog_name == "hurt"
