"""Export pipeline for Markdown files -> numbered, bookmarked PDF."""

from __future__ import annotations

import asyncio
import logging
import tempfile
from pathlib import Path
from typing import Sequence

from mdbinder.assembler import DocumentAssembler
from mdbinder.config import MDBINDER_TEMP_DIR
from mdbinder.exceptions import PdfAccessError, PdfMutationError
from mdbinder.file_utils import mkdir_async
from mdbinder.html_utils import fill_toc_page_numbers, has_toc_tree
from mdbinder.outline import inject_outline
from mdbinder.pdf_utils import page_count
from mdbinder.redaction import clear_footer_on_first_page, clear_header_on_all_pages
from mdbinder.render import render_html_to_pdf
from mdbinder.resolver import resolve_heading_pages
from mdbinder.schemas import ExportOptions, ExportResult, FormattingOptions, PublicHeading

logger = logging.getLogger(__name__)


async def export_pdf(
    paths: Sequence[Path],
    output_path: Path,
    *,
    formatting: FormattingOptions | None = None,
    export: ExportOptions | None = None,
    assembler: DocumentAssembler | None = None,
) -> ExportResult:
    """Combine Markdown files, render them and post-process the PDF.

    When the document carries a tree TOC, a first render is used to resolve
    heading pages, the TOC page numbers are filled in, and the document is
    rendered again to ``output_path``. Outline injection and band clearing
    are best-effort: failures are logged and the PDF is kept.

    Args:
        paths: Markdown files in the order they should appear.
        output_path: Destination PDF.
        formatting: Combination, numbering and TOC options.
        export: Page layout options.
        assembler: Assembler to use; a fresh one is created when omitted.

    Returns:
        Export summary including the resolved headings.

    Raises:
        RendererNotAvailableError: If no browser is installed.
        RenderError: If rendering fails.
        PdfAccessError: If the rendered PDF cannot be read.
    """
    fmt = formatting or FormattingOptions()
    opts = export or ExportOptions()
    builder = assembler or DocumentAssembler()
    output_path = Path(output_path)
    await mkdir_async(output_path.parent, parents=True, exist_ok=True)

    html = await builder.build_from_files([Path(path) for path in paths], fmt)
    headings = builder.extracted_headings

    if headings and has_toc_tree(html):
        await _render_with_toc_pages(html, output_path, opts, headings)
    else:
        await render_html_to_pdf(html, output_path, opts)
        await asyncio.to_thread(resolve_heading_pages, output_path, headings)

    outline_entries = await _best_effort("outline injection", inject_outline, output_path, headings)
    if opts.show_page_numbers and not opts.show_page_number_on_first_page:
        await _best_effort(
            "first page footer clearing",
            clear_footer_on_first_page,
            output_path,
            opts.bottom_margin_mm,
        )
    if opts.clear_header_band:
        await _best_effort("header clearing", clear_header_on_all_pages, output_path, opts.top_margin_mm)

    total_pages = await asyncio.to_thread(page_count, output_path)
    unresolved = sum(1 for heading in headings if heading.page == 0)
    if unresolved:
        logger.info("%d of %d headings could not be matched to a page", unresolved, len(headings))

    return ExportResult(
        output_path=output_path,
        headings=headings,
        page_count=total_pages,
        outline_entries=outline_entries or 0,
    )


async def _render_with_toc_pages(
    html: str,
    output_path: Path,
    options: ExportOptions,
    headings: list[PublicHeading],
) -> None:
    with tempfile.TemporaryDirectory(prefix="mdbinder-", dir=MDBINDER_TEMP_DIR) as work:
        first_pass = Path(work) / "first_pass.pdf"
        await render_html_to_pdf(html, first_pass, options)
        await asyncio.to_thread(resolve_heading_pages, first_pass, headings)

    final_html = fill_toc_page_numbers(html, headings)
    await render_html_to_pdf(final_html, output_path, options)

    # Filling in page numbers can shift layout; give unresolved headings
    # another chance against the final PDF.
    try:
        await asyncio.to_thread(resolve_heading_pages, output_path, headings)
    except PdfAccessError as exc:
        logger.warning("Second page resolution pass failed for %s: %s", output_path, exc)


async def _best_effort(step: str, func, *args):
    try:
        return await asyncio.to_thread(func, *args)
    except PdfMutationError as exc:
        logger.warning("Skipping %s: %s", step, exc)
    except PdfAccessError as exc:
        logger.warning("Skipping %s, PDF not readable: %s", step, exc)
    return None
