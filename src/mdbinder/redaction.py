"""Paint over header and footer bands of a rendered PDF."""

from __future__ import annotations

from pathlib import Path

import pymupdf

from mdbinder.pdf_utils import edit_pdf, mm_to_points

_WHITE = (1, 1, 1)


def clear_footer_on_first_page(pdf_path: Path, footer_height_mm: float) -> None:
    """Cover the bottom ``footer_height_mm`` of page 1 with an opaque white band."""
    with edit_pdf(pdf_path) as doc:
        if doc.page_count == 0:
            return
        page = doc[0]
        height = mm_to_points(footer_height_mm)
        bounds = page.rect
        _draw_opaque_rect(page, pymupdf.Rect(bounds.x0, bounds.y1 - height, bounds.x1, bounds.y1))


def clear_header_on_all_pages(pdf_path: Path, header_height_mm: float) -> None:
    """Cover the top ``header_height_mm`` of every page with an opaque white band."""
    with edit_pdf(pdf_path) as doc:
        height = mm_to_points(header_height_mm)
        for page in doc:
            bounds = page.rect
            _draw_opaque_rect(page, pymupdf.Rect(bounds.x0, bounds.y0, bounds.x1, bounds.y0 + height))


def _draw_opaque_rect(page: pymupdf.Page, rect: pymupdf.Rect) -> None:
    page.draw_rect(rect, color=_WHITE, fill=_WHITE, width=0, overlay=True)
