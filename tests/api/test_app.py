from fastapi.testclient import TestClient

from catalogpress.server.helpers.fetching import FeedDownloadError
from catalogpress.server.main import app
from tests.helpers._feed_builders import GENERIC_XML_FEED, csv_feed_bytes

client = TestClient(app)


def _upload(content: bytes, filename: str = "feed.csv") -> dict:
    return {"file": (filename, content, "application/octet-stream")}


def test_health() -> None:
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"


def test_feed_summary_from_upload() -> None:
    response = client.post("/api/v1/feed/summary", files=_upload(csv_feed_bytes()))

    assert response.status_code == 200
    body = response.json()
    assert body["source"] == "upload"
    assert body["filename"] == "feed.csv"
    assert body["total_products"] == 3
    assert body["available_products"] == 1
    assert body["estimated_pages"] == 2
    assert body["categories"] == ["Koce", "Pościel", "Ręczniki"]
    assert body["price_range"] == {"min": "49.99", "max": "129.00"}


def test_feed_summary_format_field_overrides_file_name() -> None:
    response = client.post(
        "/api/v1/feed/summary",
        files=_upload(GENERIC_XML_FEED, filename="download.bin"),
        data={"format": "xml"},
    )

    assert response.status_code == 200
    assert response.json()["total_products"] == 2


def test_unsupported_upload_is_422() -> None:
    response = client.post("/api/v1/feed/summary", files=_upload(b"{}", filename="feed.json"))

    assert response.status_code == 422
    assert "Unsupported feed format" in response.json()["detail"]


def test_empty_feed_is_422() -> None:
    response = client.post("/api/v1/feed/summary", files=_upload(b"id;nazwa\n"))

    assert response.status_code == 422


def test_oversized_upload_is_413(monkeypatch) -> None:
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "64")

    response = client.post("/api/v1/feed/summary", files=_upload(csv_feed_bytes()))

    assert response.status_code == 413
    assert "exceeds" in response.json()["detail"]


def test_catalog_from_upload_returns_pdf_attachment(offline_images) -> None:
    response = client.post(
        "/api/v1/catalog",
        files=_upload(csv_feed_bytes()),
        data={"only_available": "true", "sort_by": "price"},
    )

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["content-disposition"] == 'attachment; filename="katalog_spod-igly-i-nitki.pdf"'
    assert response.content.startswith(b"%PDF")
    assert offline_images == ["https://img.example.com/1.jpg"]


def test_catalog_with_filters_matching_nothing_is_422(offline_images) -> None:
    response = client.post(
        "/api/v1/catalog",
        files=_upload(csv_feed_bytes()),
        data={"search_phrase": "nie istnieje"},
    )

    assert response.status_code == 422
    assert "No products match" in response.json()["detail"]


def test_url_summary_uses_downloaded_feed(monkeypatch) -> None:
    captured: dict = {}

    def fake_download_feed(url: str, **kwargs) -> bytes:
        captured["url"] = url
        captured.update(kwargs)
        return csv_feed_bytes()

    monkeypatch.setattr("catalogpress.server.routers.api.download_feed", fake_download_feed)

    response = client.post(
        "/api/v1/feed/url/summary",
        json={"url": "https://feeds.example.com/export.csv", "login": "shop", "password": "secret"},
    )

    assert response.status_code == 200
    assert response.json()["source"] == "url"
    assert response.json()["total_products"] == 3
    assert captured["url"] == "https://feeds.example.com/export.csv"
    assert captured["login"] == "shop"
    assert captured["password"] == "secret"


def test_catalog_from_url_accepts_camel_case_filters(monkeypatch, offline_images) -> None:
    monkeypatch.setattr("catalogpress.server.routers.api.download_feed", lambda url, **kwargs: GENERIC_XML_FEED)

    response = client.post(
        "/api/v1/catalog/url",
        json={
            "url": "https://feeds.example.com/feed",
            "searchPhrase": "obrus",
            "sortBy": "name",
            "discountPercent": 10,
            "discountLabel": "-10%",
        },
    )

    assert response.status_code == 200
    assert response.content.startswith(b"%PDF")
    assert offline_images == ["https://img.example.com/10.png"]


def test_upstream_failure_is_502(monkeypatch) -> None:
    def failing_download(url: str, **kwargs) -> bytes:
        raise FeedDownloadError("HTTP 401: Unauthorized", status_code=401)

    monkeypatch.setattr("catalogpress.server.routers.api.download_feed", failing_download)

    response = client.post("/api/v1/feed/url/summary", json={"url": "https://feeds.example.com/feed.xml"})

    assert response.status_code == 502
    assert response.json()["detail"] == "HTTP 401: Unauthorized"


def test_url_request_requires_url() -> None:
    response = client.post("/api/v1/feed/url/summary", json={"login": "shop"})

    assert response.status_code == 422
