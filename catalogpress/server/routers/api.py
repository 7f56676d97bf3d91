"""JSON and PDF routes: /health, /api/v1/*."""

import json
import logging
from pathlib import Path
from typing import Any

from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from fastapi.responses import Response

from ...config import get_settings
from ...core.api import generate_catalog, load_feed
from ...core.canonical.entities import Product
from ...core.config import config_from_env
from ...core.filters import CatalogFilters
from ...core.summary import summarize_products
from ..helpers.fetching import FeedDownloadError, download_feed, format_hint_from_url
from ..logging.product_payloads import products_to_loggable
from ..schemas import FeedUrlRequest

logger = logging.getLogger("uvicorn.error")
router = APIRouter()


@router.get("/health")
def health() -> dict:
    settings = get_settings()
    return {"status": "ok", "app": settings.app_name}


def _read_upload(file: UploadFile) -> bytes:
    limit = get_settings().max_upload_bytes
    data = file.file.read(limit + 1)
    if len(data) > limit:
        raise HTTPException(
            status_code=413,
            detail=f"Uploaded feed exceeds {limit // (1024 * 1024)} MB.",
        )
    if not data:
        raise HTTPException(status_code=400, detail="Uploaded feed is empty.")
    return data


def _load_products(data: bytes, format_hint: str | None) -> list[Product]:
    try:
        products = load_feed(data, format_hint=format_hint, config=config_from_env())
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    logger.info("Feed parsed: %d product(s)", len(products))
    payload = products_to_loggable(products)
    if payload is not None:
        logger.debug("Feed products: %s", json.dumps(payload, ensure_ascii=False))
    return products


def _download(payload: FeedUrlRequest) -> bytes:
    settings = get_settings()
    try:
        return download_feed(
            payload.url,
            login=payload.login,
            password=payload.password,
            timeout=settings.feed_fetch_timeout,
        )
    except FeedDownloadError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _load_logo() -> bytes | None:
    logo_path = get_settings().logo_path
    if not logo_path:
        return None
    path = Path(logo_path)
    if not path.is_file():
        logger.warning("Catalog logo not found at %s", path)
        return None
    return path.read_bytes()


def _summary_response(products: list[Product], **extra: Any) -> dict:
    return {"success": True, **extra, **summarize_products(products).to_dict()}


def _catalog_response(products: list[Product], filters: CatalogFilters) -> Response:
    logger.info("Catalog requested with filters %s", filters.to_dict())
    try:
        result = generate_catalog(products, filters, config=config_from_env(), logo=_load_logo())
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    logger.info("Catalog ready: %d page(s), %d product(s)", result.page_count, result.product_count)
    return Response(
        content=result.pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{result.filename}"'},
    )


@router.post("/api/v1/feed/summary")
def feed_summary(
    file: UploadFile = File(...),
    format: str | None = Form(None),
) -> dict:
    data = _read_upload(file)
    products = _load_products(data, format or file.filename)
    return _summary_response(products, source="upload", filename=file.filename or "")


@router.post("/api/v1/catalog")
def catalog_from_upload(
    file: UploadFile = File(...),
    format: str | None = Form(None),
    search_phrase: str = Form(""),
    category: str = Form(""),
    min_price: str = Form(""),
    max_price: str = Form(""),
    min_stock: str = Form(""),
    only_available: str = Form(""),
    color: str = Form(""),
    composition: str = Form(""),
    sort_by: str = Form(""),
    discount_percent: str = Form(""),
    discount_label: str = Form(""),
) -> Response:
    data = _read_upload(file)
    products = _load_products(data, format or file.filename)
    if discount_percent or discount_label:
        logger.debug("Discount fields received and ignored: %r %r", discount_percent, discount_label)
    filters = CatalogFilters.from_params(
        {
            "search_phrase": search_phrase,
            "category": category,
            "min_price": min_price,
            "max_price": max_price,
            "min_stock": min_stock,
            "only_available": only_available,
            "color": color,
            "composition": composition,
            "sort_by": sort_by,
        }
    )
    return _catalog_response(products, filters)


@router.post("/api/v1/feed/url/summary")
def feed_url_summary(payload: FeedUrlRequest) -> dict:
    data = _download(payload)
    products = _load_products(data, payload.format or format_hint_from_url(payload.url))
    return _summary_response(products, source="url")


@router.post("/api/v1/catalog/url")
def catalog_from_url(payload: FeedUrlRequest) -> Response:
    data = _download(payload)
    products = _load_products(data, payload.format or format_hint_from_url(payload.url))
    if payload.discount_percent is not None or payload.discount_label:
        logger.debug(
            "Discount fields received and ignored: %r %r",
            payload.discount_percent,
            payload.discount_label,
        )
    return _catalog_response(products, CatalogFilters.from_params(payload.filter_params()))
