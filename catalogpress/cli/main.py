"""Command-line frontend for the catalogpress core engine."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from catalogpress.core import (
    CatalogFilters,
    config_from_env,
    generate_catalog,
    load_feed,
    summarize_products,
)
from catalogpress.core.filters import SORT_KEYS

load_dotenv(Path(__file__).resolve().parents[2] / ".env")


def _json_dump(data: Any) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def _filters_from_args(args: argparse.Namespace) -> CatalogFilters:
    return CatalogFilters.from_params(
        {
            "search_phrase": args.search,
            "category": args.category,
            "min_price": args.min_price,
            "max_price": args.max_price,
            "min_stock": args.min_stock,
            "only_available": args.only_available,
            "color": args.color,
            "composition": args.composition,
            "sort_by": args.sort_by,
        }
    )


def _cmd_summary(args: argparse.Namespace) -> int:
    products = load_feed(args.input, format_hint=args.format, config=config_from_env())
    payload = summarize_products(products).to_dict()
    payload["filename"] = Path(args.input).name
    _json_dump(payload)
    return 0


def _cmd_products(args: argparse.Namespace) -> int:
    config = config_from_env()
    products = load_feed(args.input, format_hint=args.format, config=config)
    _json_dump([product.to_dict() for product in products[: args.limit or None]])
    return 0


def _cmd_generate(args: argparse.Namespace) -> int:
    config = config_from_env()
    products = load_feed(args.input, format_hint=args.format, config=config)
    logo = Path(args.logo).read_bytes() if args.logo else None

    def report_progress(current: int, total: int, message: str) -> None:
        if args.verbose:
            print(f"[{current}/{total}] {message}", file=sys.stderr, flush=True)

    result = generate_catalog(
        products,
        _filters_from_args(args),
        config=config,
        logo=logo,
        on_progress=report_progress,
    )
    out_path = Path(args.out) if args.out else Path(result.filename)
    out_path.write_bytes(result.pdf_bytes)
    _json_dump(
        {
            "output": str(out_path),
            "filename": result.filename,
            "pages": result.page_count,
            "products": result.product_count,
        }
    )
    return 0


def _add_feed_arguments(command: argparse.ArgumentParser) -> None:
    command.add_argument("input", help="Feed file path (CSV, XML, XLSX or XLS)")
    command.add_argument("--format", default=None, help="Dialect override: csv, xml, abstore, xlsx, xls")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="catalogpress", description="Product feed to PDF catalog")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    summary = subparsers.add_parser("summary", help="Print feed metadata used to pick filters")
    _add_feed_arguments(summary)
    summary.set_defaults(func=_cmd_summary)

    products = subparsers.add_parser("products", help="Print normalized products as JSON")
    _add_feed_arguments(products)
    products.add_argument("--limit", type=int, default=0)
    products.set_defaults(func=_cmd_products)

    generate = subparsers.add_parser("generate", help="Render the PDF catalog")
    _add_feed_arguments(generate)
    generate.add_argument("--out", default="", help="Output PDF path (defaults to the catalog file name)")
    generate.add_argument("--logo", default="", help="PNG or JPEG logo for the title page")
    generate.add_argument("--search", default="")
    generate.add_argument("--category", default="")
    generate.add_argument("--min-price", default=None)
    generate.add_argument("--max-price", default=None)
    generate.add_argument("--min-stock", default=None)
    generate.add_argument("--only-available", action="store_true")
    generate.add_argument("--color", default="")
    generate.add_argument("--composition", default="")
    generate.add_argument("--sort-by", default="", choices=["", *SORT_KEYS])
    generate.set_defaults(func=_cmd_generate)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return int(args.func(args) or 0)
    except (ValueError, OSError) as exc:
        parser.exit(status=2, message=f"error: {exc}\n")


if __name__ == "__main__":
    raise SystemExit(main())
