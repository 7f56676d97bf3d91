"""A4 catalog layout: a title page followed by two products per page.

Coordinates are PDF points measured from the top-left corner, which is what
fpdf2 uses. Text is placed by baseline.
"""

import datetime as dt
import io
import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from fpdf import FPDF
from PIL import Image

from ..assets import AssetFetcher, AssetResult, ProductAssets
from ..canonical import Product, format_amount, format_count
from ..config import CoreConfig
from .text import pdf_text, wrap_text

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]
Color = tuple[int, int, int]

PAGE_WIDTH = 595.28
PAGE_HEIGHT = 841.89
MARGIN = 50.0
FOOTER_RESERVE = 40.0
INNER_WIDTH = PAGE_WIDTH - MARGIN * 2
SLOT_HEIGHT = (PAGE_HEIGHT - MARGIN * 2 - FOOTER_RESERVE) / 2
PRODUCTS_PER_PAGE = 2
PROGRESS_LOG_EVERY = 100

FONT = "helvetica"
LOGO_SCALE = 0.5
BARCODE_SIZE = (120.0, 35.0)
QR_SIZE = 45.0
MAX_NAME_LINES = 2
MAX_DETAILS = 4


@dataclass(frozen=True)
class Brand:
    white: Color = (255, 255, 255)
    cream: Color = (247, 243, 237)
    taupe: Color = (209, 185, 165)
    black: Color = (0, 0, 0)
    text_primary: Color = (26, 26, 26)
    text_secondary: Color = (115, 115, 115)
    text_muted: Color = (153, 153, 153)
    divider: Color = (224, 217, 209)
    success: Color = (102, 153, 102)
    shadow: Color = (235, 230, 224)


BRAND = Brand()


@dataclass(frozen=True)
class PagePlan:
    number: int
    products: tuple[int, ...]

    @property
    def has_divider(self) -> bool:
        return len(self.products) == PRODUCTS_PER_PAGE


@dataclass(frozen=True)
class SlotReport:
    product_index: int
    page_number: int
    regions: tuple[str, ...] = ()
    name_lines: int = 0


def plan_pages(products: Sequence[Product]) -> list[PagePlan]:
    """Product pages only; the title page is always page 1."""
    plans: list[PagePlan] = []
    for start in range(0, len(products), PRODUCTS_PER_PAGE):
        indexes = tuple(range(start, min(start + PRODUCTS_PER_PAGE, len(products))))
        plans.append(PagePlan(number=start // PRODUCTS_PER_PAGE + 2, products=indexes))
    return plans


def total_pages(product_count: int) -> int:
    return 1 + math.ceil(product_count / PRODUCTS_PER_PAGE)


def _open_image(data: bytes | None) -> Image.Image | None:
    if not data:
        return None
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
        logger.debug("Skipping undecodable image: %s", exc)
        return None
    return image


@dataclass
class _Slot:
    x: float
    top: float
    width: float = INNER_WIDTH
    height: float = SLOT_HEIGHT
    regions: list[str] = field(default_factory=list)
    name_lines: int = 0

    @property
    def bottom(self) -> float:
        return self.top + self.height


class CatalogRenderer:
    def __init__(
        self,
        config: CoreConfig | None = None,
        assets: AssetFetcher | None = None,
        logo: bytes | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self.config = config or CoreConfig()
        self.assets = assets or AssetFetcher(self.config)
        self.logo = logo
        self.on_progress = on_progress
        self.page_count = 0
        self.slot_reports: list[SlotReport] = []
        self._pdf: FPDF | None = None

    @property
    def pdf(self) -> FPDF:
        if self._pdf is None:
            raise RuntimeError("render() has not been called")
        return self._pdf

    def render(self, products: Sequence[Product]) -> bytes:
        items = list(products)
        plans = plan_pages(items)
        total = total_pages(len(items))
        logger.info("Rendering catalog: %d product(s), %d page(s)", len(items), total)

        self._pdf = FPDF(orientation="portrait", unit="pt", format="A4")
        self._pdf.set_auto_page_break(False)
        self._pdf.set_margin(0)
        self.slot_reports = []

        self._title_page(len(items))
        self.page_count = 1
        self._progress(1, total, "Title page")

        asset_stream = iter(self.assets.iter_assets(items))
        try:
            for plan in plans:
                page_assets = [next(asset_stream) for _ in plan.products]
                self._product_page(plan, items, page_assets)
                self.page_count += 1
                done = plan.number - 1
                if done % PROGRESS_LOG_EVERY == 0:
                    logger.info("Rendered %d product page(s)", done)
                self._progress(plan.number, total, f"Page {plan.number} of {total}")
        finally:
            close = getattr(asset_stream, "close", None)
            if close is not None:
                close()

        pdf_bytes = bytes(self._pdf.output())
        logger.info("Catalog rendered: %.2f MB", len(pdf_bytes) / 1024 / 1024)
        return pdf_bytes

    def _progress(self, current: int, total: int, message: str) -> None:
        if self.on_progress is not None:
            self.on_progress(current, total, message)

    # Drawing primitives

    def _fill(self, color: Color) -> None:
        self.pdf.set_fill_color(*color)

    def _ink(self, color: Color) -> None:
        self.pdf.set_text_color(*color)

    def _font(self, size: float, *, bold: bool = False) -> None:
        self.pdf.set_font(FONT, style="B" if bold else "", size=size)

    def _text(self, x: float, baseline: float, text: str, *, size: float, color: Color, bold: bool = False) -> float:
        self._font(size, bold=bold)
        self._ink(color)
        self.pdf.text(x, baseline, text)
        return self.pdf.get_string_width(text)

    def _centered(self, baseline: float, text: str, *, size: float, color: Color, bold: bool = False) -> None:
        self._font(size, bold=bold)
        x = (self.pdf.w - self.pdf.get_string_width(text)) / 2
        self._text(x, baseline, text, size=size, color=color, bold=bold)

    def _rule(self, x1: float, y1: float, x2: float, y2: float, *, width: float, color: Color) -> None:
        self.pdf.set_draw_color(*color)
        self.pdf.set_line_width(width)
        self.pdf.line(x1, y1, x2, y2)

    def _image(self, image: Image.Image, x: float, top: float, w: float, h: float) -> None:
        self.pdf.image(image, x=x, y=top, w=w, h=h)

    # Pages

    def _title_page(self, product_count: int) -> None:
        pdf = self.pdf
        pdf.add_page()
        width, height = pdf.w, pdf.h
        self._fill(BRAND.cream)
        pdf.rect(0, 0, width, height, style="F")
        self._fill(BRAND.taupe)
        pdf.rect(0, height - 180, width, 180, style="F")

        logo = _open_image(self.logo)
        if logo is not None:
            logo_w = logo.width * LOGO_SCALE
            logo_h = logo.height * LOGO_SCALE
            self._image(logo, (width - logo_w) / 2, height / 2 - 50 - logo_h, logo_w, logo_h)

        self._centered(height / 2 + 30, pdf_text(self.config.subtitle), size=14, color=BRAND.text_secondary)
        self._rule(width / 2 - 60, height / 2 + 50, width / 2 + 60, height / 2 + 50, width=1, color=BRAND.taupe)
        self._centered(height / 2 + 90, str(dt.date.today().year), size=24, color=BRAND.text_primary, bold=True)
        self._centered(height - 100, f"{product_count} produktow", size=12, color=BRAND.white)
        self._centered(height - 70, pdf_text(self.config.website), size=11, color=BRAND.white)

    def _product_page(self, plan: PagePlan, products: Sequence[Product], page_assets: list[ProductAssets]) -> None:
        pdf = self.pdf
        pdf.add_page()
        self._fill(BRAND.white)
        pdf.rect(0, 0, pdf.w, pdf.h, style="F")

        tops = (MARGIN, pdf.h - (MARGIN + 30 + SLOT_HEIGHT))
        for position, (product_index, assets) in enumerate(zip(plan.products, page_assets)):
            slot = _Slot(x=MARGIN, top=tops[position])
            self._product_block(products[product_index], assets, slot)
            self.slot_reports.append(
                SlotReport(
                    product_index=product_index,
                    page_number=plan.number,
                    regions=tuple(slot.regions),
                    name_lines=slot.name_lines,
                )
            )

        if plan.has_divider:
            middle = pdf.h / 2
            self._rule(MARGIN + 50, middle, pdf.w - MARGIN - 50, middle, width=0.5, color=BRAND.divider)

        self._footer(plan.number)

    def _footer(self, page_number: int) -> None:
        width, height = self.pdf.w, self.pdf.h
        self._centered(height - 25, str(page_number), size=9, color=BRAND.text_muted)
        rule_y = height - 28
        self._rule(width / 2 - 30, rule_y, width / 2 - 15, rule_y, width=0.5, color=BRAND.divider)
        self._rule(width / 2 + 15, rule_y, width / 2 + 30, rule_y, width=0.5, color=BRAND.divider)

    # Product slot

    def _product_block(self, product: Product, assets: ProductAssets, slot: _Slot) -> None:
        image_size = min(slot.width * 0.55, slot.height - 60)
        image_x = slot.x + 8
        text_x = slot.x + image_size + 20
        text_width = slot.width - image_size - 35

        self._draw_photo(assets.image, image_x, slot.top + 8, image_size, slot)

        cursor = slot.top + 18
        cursor = self._draw_heading(product, text_x, cursor, text_width, slot)
        cursor += 8
        cursor = self._draw_price(product, text_x, cursor, slot)
        if product.in_stock:
            stock = format_count(math.floor(product.availability_count))
            self._text(text_x, cursor, f"Stan: {stock} szt.", size=9, color=BRAND.success)
            slot.regions.append("availability")
            cursor += 14
        cursor += 6
        self._draw_details(product, text_x, cursor, slot)

        self._draw_barcode(product, assets.barcode, image_x, slot)
        self._draw_index(product, slot)
        self._draw_qr(assets.qr, slot)

    def _draw_photo(self, asset: AssetResult, x: float, top: float, size: float, slot: _Slot) -> None:
        image = _open_image(asset.data) if asset.available else None
        if image is None:
            return
        scale = min(size / image.width, size / image.height)
        scaled_w = image.width * scale
        scaled_h = image.height * scale
        left = x + (size - scaled_w) / 2
        upper = top + (size - scaled_h) / 2

        self._fill(BRAND.shadow)
        self.pdf.rect(left + 3, upper + 3, scaled_w, scaled_h, style="F")
        self._image(image, left, upper, scaled_w, scaled_h)
        slot.regions.append("image")

    def _draw_heading(self, product: Product, x: float, cursor: float, max_width: float, slot: _Slot) -> float:
        if product.category:
            self._text(x, cursor, pdf_text(product.category.upper()), size=8, color=BRAND.taupe)
            slot.regions.append("category")
            cursor += 16

        if product.name:
            self._font(13, bold=True)
            lines = wrap_text(pdf_text(product.name), max_width, self.pdf.get_string_width)
            for line in lines[:MAX_NAME_LINES]:
                self._text(x, cursor, line, size=13, color=BRAND.text_primary, bold=True)
                cursor += 17
                slot.name_lines += 1
            if lines:
                slot.regions.append("name")
        return cursor

    def _draw_price(self, product: Product, x: float, cursor: float, slot: _Slot) -> float:
        if product.price <= 0:
            return cursor
        gross = f"{format_amount(product.price)} {pdf_text(self.config.currency)}"
        gross_width = self._text(x, cursor, gross, size=16, color=BRAND.black, bold=True)
        if product.price_net > 0:
            net = f"({format_amount(product.price_net)} netto)"
            self._text(x + gross_width + 8, cursor - 2, net, size=10, color=BRAND.text_secondary)
        slot.regions.append("price")
        return cursor + 20

    def _draw_details(self, product: Product, x: float, cursor: float, slot: _Slot) -> float:
        details: list[tuple[str, str]] = []
        if product.color:
            details.append(("Kolor", product.color))
        if product.composition:
            details.append(("Sklad", product.composition))
        if product.grammage:
            details.append(("Gramatura", product.grammage))
        if product.pieces_in_carton:
            details.append(("W kartonie", f"{product.pieces_in_carton} szt."))

        for label, value in details[:MAX_DETAILS]:
            self._text(x, cursor, pdf_text(f"{label}: {value}"), size=9, color=BRAND.text_secondary)
            cursor += 12
        if details:
            slot.regions.append("details")

        dimensions = [d for d in (product.package_width, product.package_height, product.package_depth) if d]
        if dimensions:
            text = pdf_text(f"Wymiary: {' × '.join(dimensions)} cm")
            self._text(x, cursor, text, size=8, color=BRAND.text_muted)
            slot.regions.append("dimensions")
            cursor += 11

        if product.package_weight:
            self._text(x, cursor, pdf_text(f"Waga: {product.package_weight} kg"), size=8, color=BRAND.text_muted)
            slot.regions.append("weight")
            cursor += 11
        return cursor

    def _draw_barcode(self, product: Product, asset: AssetResult, x: float, slot: _Slot) -> None:
        if not product.ean:
            return
        ean = pdf_text(product.ean)
        image = _open_image(asset.data) if asset.available else None
        if image is None:
            self._text(x, slot.bottom - 15, f"EAN: {ean}", size=8, color=BRAND.text_secondary)
            slot.regions.append("ean_text")
            return
        width, height = BARCODE_SIZE
        self._image(image, x, slot.bottom - 27 - height, width, height)
        self._text(x, slot.bottom - 15, ean, size=8, color=BRAND.text_secondary)
        slot.regions.append("barcode")

    def _draw_index(self, product: Product, slot: _Slot) -> None:
        if not product.index:
            return
        index = pdf_text(product.index)
        self._font(11, bold=True)
        index_width = self.pdf.get_string_width(index)
        right = slot.x + slot.width
        self._fill(BRAND.cream)
        self.pdf.rect(right - index_width - 20, slot.top + 7, index_width + 14, 18, style="F")
        self._text(right - index_width - 13, slot.top + 21, index, size=11, color=BRAND.text_primary, bold=True)
        slot.regions.append("index")

    def _draw_qr(self, asset: AssetResult, slot: _Slot) -> None:
        image = _open_image(asset.data) if asset.available else None
        if image is None:
            return
        right = slot.x + slot.width
        self._image(image, right - QR_SIZE - 10, slot.bottom - 10 - QR_SIZE, QR_SIZE, QR_SIZE)
        self._text(right - QR_SIZE - 5, slot.bottom - 2, "Zamow B2B", size=6, color=BRAND.text_muted)
        slot.regions.append("qr")


__all__ = [
    "BRAND",
    "CatalogRenderer",
    "PagePlan",
    "SlotReport",
    "plan_pages",
    "total_pages",
]
