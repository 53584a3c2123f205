"""Command line entry point: ``python -m mdbinder``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from mdbinder.config import DEFAULT_TOC_HEADER_TEXT
from mdbinder.exceptions import MdBinderError
from mdbinder.export import export_pdf
from mdbinder.schemas import (
    ExportOptions,
    FormattingOptions,
    LeaderStyle,
    PageNumberPosition,
    TocStyle,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdbinder",
        description="Combine Markdown files into one PDF with numbered headings, a TOC and bookmarks.",
    )
    parser.add_argument("files", nargs="+", type=Path, help="Markdown files, in output order")
    parser.add_argument("-o", "--output", required=True, type=Path, help="Destination PDF path")

    fmt = parser.add_argument_group("formatting")
    fmt.add_argument("--numbering", metavar="PATTERN", help="Number headings, e.g. 1.1.1, A.A. or a.a")
    fmt.add_argument("--toc", action="store_true", help="Generate a table of contents")
    fmt.add_argument("--toc-after-first-file", action="store_true", help="Place the TOC after the first file")
    fmt.add_argument("--toc-title", default=None, help="TOC heading text")
    fmt.add_argument("--toc-style", choices=[style.value for style in TocStyle], default=TocStyle.FLAT.value)
    fmt.add_argument("--toc-bullet", choices=["-", "1."], default="-", help="Flat TOC list marker")
    fmt.add_argument("--no-toc-indent", action="store_true", help="Do not indent nested flat TOC entries")
    fmt.add_argument("--toc-leader", choices=[style.value for style in LeaderStyle], default=LeaderStyle.DOTS.value)
    fmt.add_argument("--page-breaks", action="store_true", help="Start every file on a new page")
    fmt.add_argument("--no-extensions", action="store_true", help="Disable tables, strikethrough, footnotes and task lists")
    fmt.add_argument("--no-tables", action="store_true", help="Disable pipe tables (combine with --no-extensions)")
    fmt.add_argument("--no-autolinks", action="store_true", help="Leave bare URLs as plain text")

    page = parser.add_argument_group("page layout")
    page.add_argument("--paper", default="A4", help="A3, A4 or Letter")
    page.add_argument("--landscape", action="store_true")
    page.add_argument("--margin-mm", type=float, default=25.4, help="Margin applied to all four sides")
    page.add_argument("--page-numbers", action="store_true", help="Print page numbers")
    page.add_argument(
        "--page-number-position",
        choices=[position.value for position in PageNumberPosition],
        default=PageNumberPosition.BOTTOM_RIGHT.value,
    )
    page.add_argument("--no-first-page-number", action="store_true", help="Hide the page number on page 1")
    page.add_argument("--no-background", action="store_true", help="Do not print background colors")
    page.add_argument("--clear-header", action="store_true", help="Blank the top margin band on every page")

    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def options_from_args(args: argparse.Namespace) -> tuple[FormattingOptions, ExportOptions]:
    formatting = FormattingOptions(
        use_advanced_extensions=not args.no_extensions,
        use_pipe_tables=not args.no_tables,
        use_auto_links=not args.no_autolinks,
        insert_page_breaks_between_files=args.page_breaks,
        add_header_numbering=bool(args.numbering),
        header_numbering_pattern=args.numbering or "",
        add_table_of_contents=args.toc,
        table_of_contents_after_first_file=args.toc_after_first_file,
        table_of_contents_bullet_style=args.toc_bullet,
        indent_table_of_contents=not args.no_toc_indent,
        toc_style=TocStyle(args.toc_style),
        toc_leader_style=LeaderStyle(args.toc_leader),
        table_of_contents_header_text=args.toc_title or DEFAULT_TOC_HEADER_TEXT,
    )
    export = ExportOptions(
        paper_format=args.paper,
        landscape=args.landscape,
        print_background=not args.no_background,
        top_margin_mm=args.margin_mm,
        right_margin_mm=args.margin_mm,
        bottom_margin_mm=args.margin_mm,
        left_margin_mm=args.margin_mm,
        show_page_numbers=args.page_numbers,
        show_page_number_on_first_page=not args.no_first_page_number,
        page_number_position=PageNumberPosition(args.page_number_position),
        clear_header_band=args.clear_header,
    )
    return formatting, export


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    formatting, export = options_from_args(args)

    try:
        result = asyncio.run(export_pdf(args.files, args.output, formatting=formatting, export=export))
    except (MdBinderError, OSError) as exc:
        print(f"mdbinder: {exc}", file=sys.stderr)
        return 1

    print(f"Wrote {result.output_path} ({result.page_count} pages, {result.outline_entries} bookmarks)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
