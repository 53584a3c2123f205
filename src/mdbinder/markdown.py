"""Convert combined Markdown to an HTML fragment with markdown-it-py."""

from __future__ import annotations

import re

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from mdit_py_plugins.deflist import deflist_plugin
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

from mdbinder.exceptions import ConversionError

_HEADING_ATTRS_RE = re.compile(r"\s*\{#([^\s{}]+)\}\s*$")


def convert_markdown_to_html(
    markdown: str,
    *,
    advanced_extensions: bool = False,
    pipe_tables: bool = False,
    auto_links: bool = False,
) -> str:
    """Convert Markdown into an HTML body fragment.

    Parameters
    ----------
    markdown : str
        The Markdown source. Raw HTML blocks (page breaks, the tree TOC) are
        passed through.
    advanced_extensions : bool
        Enable tables, strikethrough, footnotes, definition lists and task lists.
    pipe_tables : bool
        Enable pipe tables on their own.
    auto_links : bool
        Turn bare URLs into links.

    Heading ``{#id}`` attribute blocks are always honored so that anchors
    written by the numbering pass become element ids.
    """
    md = build_markdown_parser(
        advanced_extensions=advanced_extensions,
        pipe_tables=pipe_tables,
        auto_links=auto_links,
    )
    try:
        return md.render(markdown)
    except Exception as exc:
        raise ConversionError(f"Markdown conversion failed: {exc}") from exc


def build_markdown_parser(
    *,
    advanced_extensions: bool = False,
    pipe_tables: bool = False,
    auto_links: bool = False,
) -> MarkdownIt:
    md = MarkdownIt("commonmark", {"html": True, "linkify": auto_links})
    if advanced_extensions or pipe_tables:
        md.enable("table")
    if advanced_extensions:
        md.enable("strikethrough")
        md.use(footnote_plugin).use(deflist_plugin).use(tasklists_plugin)
    if auto_links:
        md.enable("linkify")
    md.core.ruler.before("inline", "heading_attrs", _heading_attrs_rule)
    return md


def _heading_attrs_rule(state: StateCore) -> None:
    """Move a trailing ``{#id}`` from heading text onto the heading tag."""
    tokens = state.tokens
    for index, token in enumerate(tokens[:-1]):
        if token.type != "heading_open":
            continue
        inline = tokens[index + 1]
        if inline.type != "inline":
            continue
        match = _HEADING_ATTRS_RE.search(inline.content)
        if not match:
            continue
        token.attrSet("id", match.group(1))
        inline.content = inline.content[: match.start()]
