"""Inspect the text layer of a rendered PDF to debug heading page matching."""

from __future__ import annotations

import argparse
from pathlib import Path

import pymupdf

from mdbinder.resolver import normalize_text


def main() -> None:
    parser = argparse.ArgumentParser(description="Print normalized page text and outline of a PDF.")
    parser.add_argument("pdf", help="PDF file path")
    parser.add_argument("--find", action="append", default=[], help="Heading label to count on every page")
    parser.add_argument("--outline", action="store_true", help="Also print the PDF outline")
    args = parser.parse_args()

    path = Path(args.pdf)
    if not path.is_file():
        raise FileNotFoundError(f"PDF file not found: {path}")

    with pymupdf.open(str(path)) as doc:
        texts = [normalize_text(page.get_text()) for page in doc]
        outline = doc.get_toc()

    needles = [normalize_text(label) for label in args.find]
    for number, text in enumerate(texts, start=1):
        print(f"--- page {number} ({len(text)} chars)")
        if needles:
            for needle in needles:
                print(f"{needle!r}: {text.count(needle)}")
        else:
            print(text)

    if args.outline:
        print("\nOutline:")
        for level, title, page in outline:
            print(f"{'  ' * (level - 1)}{title} .... {page}")


if __name__ == "__main__":
    main()
