"""Per-product raster assets: remote photos, barcodes and QR codes.

Nothing here raises across the module boundary. Every failure becomes an
absent :class:`AssetResult` and the layout engine simply skips the region.
"""

import io
import logging
import re
from collections.abc import Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

import barcode
import qrcode
import requests
from barcode.errors import BarcodeError
from barcode.writer import ImageWriter
from PIL import Image

from .canonical import Product
from .config import CoreConfig
from .errors import AssetUnavailable, EmptyCode

logger = logging.getLogger(__name__)

_NON_DIGIT_RE = re.compile(r"\D")

_SYMBOLOGY_BY_LENGTH = {13: "ean13", 8: "ean8", 12: "upca"}
_FALLBACK_SYMBOLOGY = "code128"

_BARCODE_OPTIONS = {
    "write_text": False,
    "module_width": 0.3,
    "module_height": 10.0,
    "quiet_zone": 1.0,
    "dpi": 300,
}

_ACCEPTED_IMAGE_FORMATS = ("JPEG", "PNG")
_USER_AGENT = "catalogpress/1.0 (+image fetcher)"


@dataclass(frozen=True)
class AssetResult:
    data: bytes | None = None
    error: str | None = None

    @property
    def available(self) -> bool:
        return bool(self.data)

    @classmethod
    def absent(cls, error: str) -> "AssetResult":
        return cls(data=None, error=error)


@dataclass(frozen=True)
class ProductAssets:
    image: AssetResult = field(default_factory=lambda: AssetResult.absent("no image url"))
    barcode: AssetResult = field(default_factory=lambda: AssetResult.absent("no ean"))
    qr: AssetResult = field(default_factory=lambda: AssetResult.absent("no b2b link"))


def clean_digits(code: str) -> str:
    return _NON_DIGIT_RE.sub("", str(code or ""))


def barcode_symbology(code: str) -> str:
    return _SYMBOLOGY_BY_LENGTH.get(len(clean_digits(code)), _FALLBACK_SYMBOLOGY)


def _render_barcode(symbology: str, digits: str) -> bytes:
    barcode_class = barcode.get_barcode_class(symbology)
    code = barcode_class(digits, writer=ImageWriter())
    # EAN and UPC classes recompute the check digit instead of rejecting it.
    if code.get_fullcode() != digits:
        raise AssetUnavailable(f"Check digit mismatch for {digits!r} as {symbology}")
    buffer = io.BytesIO()
    code.write(buffer, options=dict(_BARCODE_OPTIONS))
    return buffer.getvalue()


def make_barcode(code: str) -> bytes:
    """PNG barcode for ``code``, symbology picked by digit count."""
    digits = clean_digits(code)
    if not digits:
        raise EmptyCode(f"No digits in barcode value {code!r}")

    symbology = barcode_symbology(digits)
    try:
        return _render_barcode(symbology, digits)
    except BarcodeError as exc:
        if symbology == _FALLBACK_SYMBOLOGY:
            raise AssetUnavailable(f"Cannot encode {digits!r}: {exc}") from exc
        logger.debug("Barcode %s rejected as %s (%s); using %s", digits, symbology, exc, _FALLBACK_SYMBOLOGY)
    try:
        return _render_barcode(_FALLBACK_SYMBOLOGY, digits)
    except BarcodeError as exc:
        raise AssetUnavailable(f"Cannot encode {digits!r}: {exc}") from exc


def make_qr(url: str) -> bytes:
    text = str(url or "").strip()
    if not text:
        raise AssetUnavailable("QR payload is empty")
    qr = qrcode.QRCode(box_size=10, border=0)
    qr.add_data(text)
    qr.make(fit=True)
    image = qr.make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    image.save(buffer)
    return buffer.getvalue()


def is_supported_image(data: bytes) -> bool:
    try:
        with Image.open(io.BytesIO(data), formats=_ACCEPTED_IMAGE_FORMATS) as image:
            image.verify()
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError):
        return False
    return True


def fetch_image(
    url: str,
    *,
    session: requests.Session | None = None,
    timeout: float = 10.0,
) -> AssetResult:
    target = str(url or "").strip()
    if not target:
        return AssetResult.absent("no image url")

    client = session or requests
    try:
        response = client.get(target, timeout=timeout, headers={"User-Agent": _USER_AGENT})
    except requests.RequestException as exc:
        logger.debug("Image fetch failed for %s: %s", target, exc)
        return AssetResult.absent(f"request failed: {exc}")

    if not 200 <= response.status_code < 300:
        logger.debug("Image fetch for %s returned HTTP %s", target, response.status_code)
        return AssetResult.absent(f"http {response.status_code}")

    data = response.content or b""
    if not is_supported_image(data):
        logger.debug("Image at %s is neither JPEG nor PNG", target)
        return AssetResult.absent("unsupported image data")
    return AssetResult(data=data)


class AssetFetcher:
    """Collects the three raster assets of each product.

    Work for a window of products runs on a bounded thread pool; results come
    back in product order so the caller can draw sequentially.
    """

    def __init__(
        self,
        config: CoreConfig | None = None,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config or CoreConfig()
        self.session = session

    def image(self, url: str) -> AssetResult:
        return fetch_image(url, session=self.session, timeout=self.config.image_timeout)

    def barcode(self, code: str) -> AssetResult:
        if not str(code or "").strip():
            return AssetResult.absent("no ean")
        try:
            return AssetResult(data=make_barcode(code))
        except AssetUnavailable as exc:
            logger.debug("Barcode unavailable for %r: %s", code, exc)
            return AssetResult.absent(str(exc))

    def qr(self, url: str) -> AssetResult:
        if not str(url or "").strip():
            return AssetResult.absent("no b2b link")
        try:
            return AssetResult(data=make_qr(url))
        except (AssetUnavailable, ValueError) as exc:
            logger.debug("QR code unavailable for %r: %s", url, exc)
            return AssetResult.absent(str(exc))

    def for_product(self, product: Product) -> ProductAssets:
        return ProductAssets(
            image=self.image(product.image_url),
            barcode=self.barcode(product.ean),
            qr=self.qr(product.b2b_link),
        )

    def iter_assets(self, products: Iterable[Product]) -> Iterator[ProductAssets]:
        items = list(products)
        window = max(1, self.config.prefetch_window)
        workers = max(1, self.config.fetch_workers)

        if workers == 1:
            for product in items:
                yield self.for_product(product)
            return

        with ThreadPoolExecutor(max_workers=workers) as executor:
            for start in range(0, len(items), window):
                yield from executor.map(self.for_product, items[start : start + window])


__all__ = [
    "AssetFetcher",
    "AssetResult",
    "ProductAssets",
    "barcode_symbology",
    "clean_digits",
    "fetch_image",
    "is_supported_image",
    "make_barcode",
    "make_qr",
]
