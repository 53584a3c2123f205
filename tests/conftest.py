"""Test setup for mdbinder."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pymupdf
import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

PdfFactory = Callable[..., Path]


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for pytest.

    This allows running integration tests selectively:
        pytest -m integration       # run only integration tests
        pytest -m "not integration" # skip integration tests
    """
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (launch a real browser)",
    )


def write_pdf(path: Path, pages: list[list[str]]) -> Path:
    """Write a PDF with one page per entry, each line drawn as text."""
    doc = pymupdf.open()
    for lines in pages:
        page = doc.new_page()
        for index, line in enumerate(lines):
            page.insert_text((72, 72 + index * 18), line, fontsize=12)
    doc.save(str(path))
    doc.close()
    return path


@pytest.fixture
def make_pdf(tmp_path: Path) -> PdfFactory:
    """Factory building small text PDFs under ``tmp_path``."""

    def _make(pages: list[list[str]], name: str = "doc.pdf", path: Path | None = None) -> Path:
        return write_pdf(path or tmp_path / name, pages)

    return _make
