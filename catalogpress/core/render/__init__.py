from .layout import BRAND, CatalogRenderer, PagePlan, SlotReport, plan_pages, total_pages
from .text import pdf_text, transliterate, wrap_text

__all__ = [
    "BRAND",
    "CatalogRenderer",
    "PagePlan",
    "SlotReport",
    "pdf_text",
    "plan_pages",
    "total_pages",
    "transliterate",
    "wrap_text",
]
