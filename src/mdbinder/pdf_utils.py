"""Thin PyMuPDF helpers for reading and editing rendered PDFs."""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import pymupdf

from mdbinder.exceptions import PdfAccessError, PdfMutationError

POINTS_PER_INCH = 72.0
MM_PER_INCH = 25.4


def mm_to_points(mm: float) -> float:
    return mm * POINTS_PER_INCH / MM_PER_INCH


def open_pdf(path: Path) -> pymupdf.Document:
    """Open a PDF for reading.

    Raises:
        PdfAccessError: If the file is missing or is not a readable PDF.
    """
    try:
        return pymupdf.open(str(path))
    except (OSError, RuntimeError, ValueError) as exc:
        raise PdfAccessError(f"Cannot open PDF {path}: {exc}") from exc


def page_count(path: Path) -> int:
    with open_pdf(path) as doc:
        return doc.page_count


def extract_page_texts(path: Path) -> list[str]:
    """Return the plain text of every page, index 0 being page 1."""
    with open_pdf(path) as doc:
        return [page.get_text() for page in doc]


@contextmanager
def edit_pdf(path: Path) -> Iterator[pymupdf.Document]:
    """Open ``path`` for modification and save it back when the block exits.

    The document is written to a sibling temp file and then moved over the
    original, since PyMuPDF only saves onto its own source incrementally.
    Nothing is written if the block raises.

    Raises:
        PdfAccessError: If the file cannot be opened.
        PdfMutationError: If saving the modified document fails.
    """
    path = Path(path)
    doc = open_pdf(path)
    temp_path = path.with_name(f".{path.name}.tmp")
    try:
        yield doc
        doc.save(str(temp_path), garbage=3, deflate=True)
    except (OSError, RuntimeError, ValueError) as exc:
        temp_path.unlink(missing_ok=True)
        raise PdfMutationError(f"Failed to update PDF {path}: {exc}") from exc
    finally:
        doc.close()
    try:
        os.replace(temp_path, path)
    except OSError as exc:
        temp_path.unlink(missing_ok=True)
        raise PdfMutationError(f"Failed to replace PDF {path}: {exc}") from exc
