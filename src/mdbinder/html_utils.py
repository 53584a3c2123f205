"""Shared HTML utilities for the assembled document."""

from __future__ import annotations

from typing import Iterable

try:
    from bs4 import BeautifulSoup
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for HTML processing (pip install beautifulsoup4)."
    ) from exc

from mdbinder.config import TOC_CONTAINER_ID
from mdbinder.schemas import PublicHeading


def has_toc_tree(html: str) -> bool:
    """Return True if the document carries a tree TOC with page placeholders."""
    return f'id="{TOC_CONTAINER_ID}"' in html


def inject_head_html(html: str, fragment: str) -> str:
    """Append ``fragment`` to the end of the document ``<head>``.

    Falls back to prepending the fragment when the document has no head.
    """
    if not fragment:
        return html
    soup = BeautifulSoup(html, "lxml")
    if soup.head is None:
        return fragment + html
    for node in list(BeautifulSoup(fragment, "html.parser").contents):
        soup.head.append(node)
    return str(soup)


def fill_toc_page_numbers(html: str, headings: Iterable[PublicHeading]) -> str:
    """Write resolved page numbers into the tree TOC's page spans.

    Spans whose ``data-href`` has no resolved heading are left untouched.
    """
    pages = {heading.href: heading.page for heading in headings if heading.page > 0}
    if not pages:
        return html

    soup = BeautifulSoup(html, "lxml")
    container = soup.find(id=TOC_CONTAINER_ID)
    if container is None:
        return html

    for span in container.select("span.page[data-href]"):
        page = pages.get(span.get("data-href"))
        if page is None:
            continue
        prefix = soup.new_tag("span", attrs={"class": "visually-hidden"})
        prefix.string = "Page\xa0"
        span.clear()
        span.append(prefix)
        span.append(str(page))
    return str(soup)
