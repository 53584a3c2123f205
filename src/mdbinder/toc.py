"""Render a table of contents from numbered heading descriptors."""

from __future__ import annotations

import html
from typing import Iterable

from mdbinder.config import DEFAULT_TOC_HEADER_TEXT, PAGE_BREAK_HTML, TOC_CONTAINER_ID
from mdbinder.schemas import FormattingOptions, HeadingDescriptor, LeaderStyle, TocNode, TocStyle

_LEADER_DOTS = "." * 200

TOC_TREE_CSS = f"""
<style>
    #{TOC_CONTAINER_ID} ol {{ list-style: none; margin: 0; padding-left: 1.5em; }}
    #{TOC_CONTAINER_ID} > ol {{ padding-left: 0; }}
    #{TOC_CONTAINER_ID} li {{ margin: 0.15em 0; }}
    #{TOC_CONTAINER_ID} .toc-entry {{ display: flex; align-items: baseline; color: inherit; text-decoration: none; }}
    #{TOC_CONTAINER_ID} .title {{ flex: 0 1 auto; }}
    #{TOC_CONTAINER_ID} .leader {{ flex: 1 1 auto; overflow: hidden; white-space: nowrap; margin: 0 0.3em; }}
    #{TOC_CONTAINER_ID} .page {{ flex: 0 0 auto; text-align: right; }}
    #{TOC_CONTAINER_ID} .visually-hidden {{ position: absolute; width: 1px; height: 1px; overflow: hidden; clip: rect(0 0 0 0); }}
</style>"""


def build_table_of_contents(
    headers: Iterable[HeadingDescriptor],
    options: FormattingOptions,
    *,
    page_break_html: str = PAGE_BREAK_HTML,
) -> str:
    """Create the TOC block spliced into the combined Markdown.

    Level-1 headings are skipped. Returns an empty string when nothing is
    left to list.
    """
    entries = [header for header in headers if header.markdown_level > 1]
    if not entries:
        return ""
    if options.toc_style == TocStyle.TREE:
        return render_toc_tree(entries, options, page_break_html=page_break_html)
    return render_flat_toc(entries, options, page_break_html=page_break_html)


def render_flat_toc(
    headers: list[HeadingDescriptor],
    options: FormattingOptions,
    *,
    page_break_html: str = PAGE_BREAK_HTML,
) -> str:
    if not headers:
        return ""
    numbered = options.table_of_contents_bullet_style == "1."
    bullet = "1." if numbered else "-"
    indent_unit = " " * (4 if numbered else 2)

    lines = [f"## {_header_text(options)}"]
    for header in headers:
        depth = max(header.logical_level - 1, 0)
        indent = indent_unit * depth if options.indent_table_of_contents else ""
        lines.append(f"{indent}{bullet} [{header.label}](#{header.anchor})")
    lines.append("")
    lines.append(page_break_html)
    return "\n".join(lines)


def build_toc_tree(headings: Iterable[HeadingDescriptor]) -> list[TocNode]:
    """Nest headings by logical level using a stack of open entries."""
    roots: list[TocNode] = []
    stack: list[TocNode] = []

    for heading in headings:
        node = TocNode(level=heading.logical_level, title=heading.label, href=f"#{heading.anchor}")

        while stack and stack[-1].level >= node.level:
            stack.pop()

        if stack:
            stack[-1].children.append(node)
        else:
            roots.append(node)

        stack.append(node)

    return roots


def render_toc_tree(
    headers: list[HeadingDescriptor],
    options: FormattingOptions,
    *,
    page_break_html: str = PAGE_BREAK_HTML,
) -> str:
    """Render a nested ``<nav>`` TOC whose page spans are filled after rendering.

    The output is a single raw HTML block, so it must not contain blank lines.
    """
    roots = build_toc_tree(headers)
    if not roots:
        return ""
    dotted = options.toc_leader_style == LeaderStyle.DOTS
    leader_class = "toc-leader-dots" if dotted else "toc-leader-none"

    lines = [f'<nav id="{TOC_CONTAINER_ID}" class="toc {leader_class}">']
    lines.append(f'<h2 class="toc-title">{html.escape(_header_text(options))}</h2>')
    lines.extend(_render_nodes(roots, depth=1, dotted=dotted))
    lines.append("</nav>")
    lines.append("")
    lines.append(page_break_html)
    return "\n".join(lines)


def _render_nodes(nodes: list[TocNode], *, depth: int, dotted: bool) -> list[str]:
    indent = "  " * depth
    lines = [f'{indent}<ol class="toc-level-{depth}">']
    for node in nodes:
        href = html.escape(node.href, quote=True)
        entry = (
            f'<a class="toc-entry" href="{href}">'
            f'<span class="title">{html.escape(node.title)}</span>'
        )
        if dotted:
            entry += f'<span class="leader" aria-hidden="true">{_LEADER_DOTS}</span>'
        entry += f'<span class="page" data-href="{href}"></span></a>'
        if node.children:
            lines.append(f"{indent}  <li>{entry}")
            lines.extend(_render_nodes(node.children, depth=depth + 1, dotted=dotted))
            lines.append(f"{indent}  </li>")
        else:
            lines.append(f"{indent}  <li>{entry}</li>")
    lines.append(f"{indent}</ol>")
    return lines


def _header_text(options: FormattingOptions) -> str:
    text = (options.table_of_contents_header_text or "").strip()
    return text or DEFAULT_TOC_HEADER_TEXT
