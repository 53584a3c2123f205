"""Write resolved headings into the PDF outline (bookmarks)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from mdbinder.pdf_utils import edit_pdf
from mdbinder.schemas import PublicHeading

logger = logging.getLogger(__name__)


@dataclass
class OutlineNode:
    """A bookmark entry pointing at a 1-based page."""

    title: str
    page: int
    children: list["OutlineNode"] = field(default_factory=list)


def build_outline(headings: Iterable[PublicHeading]) -> list[OutlineNode]:
    """Nest resolved headings under the last heading seen one level up.

    Every level keeps its most recently created node, not just the open path,
    so a heading attaches to the last node recorded for ``level - 1`` even
    when shallower headings came in between. A heading with no such node
    becomes a root entry. Unresolved headings are skipped.
    """
    roots: list[OutlineNode] = []
    last_at_level: dict[int, OutlineNode] = {}

    for heading in headings:
        if heading.page <= 0:
            continue
        node = OutlineNode(title=heading.label, page=heading.page)
        parent = last_at_level.get(heading.level - 1) if heading.level > 1 else None
        if parent is None:
            roots.append(node)
        else:
            parent.children.append(node)
        last_at_level[heading.level] = node

    return roots


def flatten_outline(nodes: list[OutlineNode], depth: int = 1) -> list[list]:
    """Serialize the outline depth-first as ``[depth, title, page]`` rows."""
    rows: list[list] = []
    for node in nodes:
        rows.append([depth, node.title, node.page])
        rows.extend(flatten_outline(node.children, depth + 1))
    return rows


def inject_outline(pdf_path: Path, headings: Iterable[PublicHeading]) -> int:
    """Replace the PDF outline with one built from ``headings``.

    Returns:
        Number of outline entries written. The file is left untouched when
        there is nothing to write.

    Raises:
        PdfAccessError: If the PDF cannot be opened.
        PdfMutationError: If the outline cannot be written or saved.
    """
    roots = build_outline(headings)
    if not roots:
        return 0

    with edit_pdf(pdf_path) as doc:
        rows = flatten_outline(_drop_missing_pages(roots, doc.page_count))
        if rows:
            doc.set_toc(rows)
    logger.debug("Wrote %d outline entries to %s", len(rows), pdf_path)
    return len(rows)


def _drop_missing_pages(nodes: list[OutlineNode], page_count: int) -> list[OutlineNode]:
    kept: list[OutlineNode] = []
    for node in nodes:
        if node.page > page_count:
            logger.warning(
                "Skipping bookmark %r: page %d is beyond the last page (%d)",
                node.title,
                node.page,
                page_count,
            )
            kept.extend(_drop_missing_pages(node.children, page_count))
            continue
        node.children = _drop_missing_pages(node.children, page_count)
        kept.append(node)
    return kept
