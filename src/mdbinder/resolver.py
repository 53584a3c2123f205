"""Resolve headings to the PDF pages they were rendered on."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from mdbinder.pdf_utils import extract_page_texts
from mdbinder.schemas import PublicHeading

logger = logging.getLogger(__name__)

# Long headings often wrap or hyphenate differently in the PDF text layer.
_RELAXED_MATCH_MIN_LENGTH = 60
_RELAXED_PREFIX_LENGTH = 50


@dataclass
class HeadingGroup:
    """Unresolved headings sharing one normalized label, in document order.

    ``cursor`` points at the next heading to assign and counts down from the
    last one.
    """

    key: str
    headings: list[PublicHeading] = field(default_factory=list)
    cursor: int = -1

    @property
    def exhausted(self) -> bool:
        return self.cursor < 0


def normalize_text(text: str) -> str:
    """Lowercase and collapse whitespace for matching."""
    return re.sub(r"\s+", " ", text.lower()).strip()


def resolve_heading_pages(pdf_path: Path, headings: Sequence[PublicHeading]) -> int:
    """Fill in ``page`` for unresolved headings by scanning the PDF text.

    An empty heading list returns immediately without opening the PDF.

    Returns:
        Number of headings resolved by this pass.

    Raises:
        PdfAccessError: If the PDF cannot be opened.
    """
    if not headings:
        return 0
    page_texts = extract_page_texts(pdf_path)
    resolved = assign_pages(page_texts, headings)
    logger.debug(
        "Resolved %d of %d headings across %d pages of %s",
        resolved,
        len(headings),
        len(page_texts),
        pdf_path,
    )
    return resolved


def assign_pages(page_texts: Sequence[str], headings: Sequence[PublicHeading]) -> int:
    """Assign 1-based pages to headings still at page 0.

    Pages are scanned from last to first. Every occurrence of a label on a
    page goes to the latest still-unassigned heading with that label, so the
    later of two identical headings gets the later page. Headings that are
    never found keep page 0.
    """
    groups = _group_headings(headings)
    resolved = 0

    for page_index in range(len(page_texts) - 1, -1, -1):
        if not groups:
            break
        page_text = normalize_text(page_texts[page_index])
        if not page_text:
            continue

        for key in list(groups):
            group = groups[key]
            occurrences = _count_occurrences(page_text, key)
            while occurrences > 0 and not group.exhausted:
                group.headings[group.cursor].page = page_index + 1
                group.cursor -= 1
                occurrences -= 1
                resolved += 1
            if group.exhausted:
                del groups[key]

    return resolved


def _group_headings(headings: Sequence[PublicHeading]) -> dict[str, HeadingGroup]:
    groups: dict[str, HeadingGroup] = {}
    for heading in headings:
        if heading.page != 0:
            continue
        key = normalize_text(heading.label)
        if not key:
            continue
        groups.setdefault(key, HeadingGroup(key=key)).headings.append(heading)
    for group in groups.values():
        group.cursor = len(group.headings) - 1
    return groups


def _count_occurrences(page_text: str, key: str) -> int:
    count = page_text.count(key)
    if count == 0 and len(key) > _RELAXED_MATCH_MIN_LENGTH:
        count = page_text.count(key[:_RELAXED_PREFIX_LENGTH])
    return count
