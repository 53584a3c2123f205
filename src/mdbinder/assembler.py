"""Combine Markdown files into one numbered HTML document."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Sequence

from mdbinder.config import PAGE_BREAK_HTML, TOC_PLACEHOLDER
from mdbinder.file_utils import read_text_async
from mdbinder.markdown import convert_markdown_to_html
from mdbinder.numbering import number_headings
from mdbinder.schemas import FormattingOptions, PublicHeading, TocStyle
from mdbinder.toc import TOC_TREE_CSS, build_table_of_contents

logger = logging.getLogger(__name__)

MarkdownConverter = Callable[..., str]

_ALIGNMENT_RULES = {
    "left": "p, li { text-align: left; }",
    "center": "p, li { text-align: center; }",
    "right": "p, li { text-align: right; }",
}
_JUSTIFY_RULE = "p, li { text-align: justify; text-justify: inter-word; hyphens: auto; }"


class DocumentAssembler:
    """Builds the combined HTML document and keeps the latest heading list.

    The heading list is replaced on every build; nothing carries over between
    builds.
    """

    def __init__(self, converter: MarkdownConverter = convert_markdown_to_html) -> None:
        self._converter = converter
        self._extracted_headings: list[PublicHeading] = []

    @property
    def extracted_headings(self) -> list[PublicHeading]:
        """Headings found by the most recent build, in document order."""
        return self._extracted_headings

    async def build_from_files(self, paths: Sequence[Path], options: FormattingOptions) -> str:
        """Read ``paths`` in order and build the combined HTML document.

        Each file read is awaited separately, so a cancelled build stops
        between files.
        """
        contents: list[str] = []
        for path in paths:
            logger.debug("Reading %s", path)
            contents.append(await read_text_async(Path(path)))
        return self.build_html(contents, options)

    def build_html(self, contents: Sequence[str], options: FormattingOptions) -> str:
        """Combine, number and convert already loaded Markdown file contents."""
        markdown = self.process_markdown(self.combine_markdown(contents, options), options)
        body = self._converter(
            markdown,
            advanced_extensions=options.use_advanced_extensions,
            pipe_tables=options.use_pipe_tables,
            auto_links=options.use_auto_links,
        )
        return wrap_html_document(body, build_head_html(options))

    def combine_markdown(self, contents: Sequence[str], options: FormattingOptions) -> str:
        """Concatenate file contents with page breaks and the TOC placeholder."""
        blocks: list[str] = []
        toc_after_first = options.add_table_of_contents and options.table_of_contents_after_first_file

        for index, content in enumerate(contents):
            # The TOC block already ends with a page break.
            if index > 0 and options.insert_page_breaks_between_files and not (
                index == 1 and toc_after_first
            ):
                blocks.append(PAGE_BREAK_HTML)
            blocks.append(content.replace("\r\n", "\n").strip("\n"))
            if index == 0 and toc_after_first:
                blocks.append(PAGE_BREAK_HTML)
                blocks.append(TOC_PLACEHOLDER)

        return "\n\n".join(blocks) + "\n" if blocks else ""

    def process_markdown(self, markdown: str, options: FormattingOptions) -> str:
        """Number headings and splice in the TOC block."""
        if not (options.add_header_numbering or options.add_table_of_contents):
            self._extracted_headings = []
            return markdown

        result = number_headings(markdown, options, toc_placeholder=TOC_PLACEHOLDER)
        self._extracted_headings = result.public_headings
        logger.debug("Extracted %d headings", len(result.public_headings))

        if not options.add_table_of_contents:
            return result.processed_markdown

        lines = result.processed_markdown.split("\n")
        toc_block = build_table_of_contents(result.headers, options, page_break_html=PAGE_BREAK_HTML)
        toc_lines = toc_block.split("\n") if toc_block else []
        if TOC_PLACEHOLDER in lines:
            index = lines.index(TOC_PLACEHOLDER)
            lines[index : index + 1] = toc_lines
        elif toc_lines:
            lines[0:0] = toc_lines + [""]
        return "\n".join(lines)


def build_head_html(options: FormattingOptions) -> str:
    """Base stylesheet plus TOC styles and any caller supplied head markup."""
    alignment = (options.body_text_alignment or "justify").strip().lower()
    paragraph_rule = _ALIGNMENT_RULES.get(alignment, _JUSTIFY_RULE)
    parts = [
        f"""
<style>
    :root {{ --mdbinder-border-color: #d0d7de; }}
    body {{ font-family: {options.base_font_family}; font-size: {options.body_font_size_px:g}px; margin: {options.body_margin_px:g}px; }}
    {paragraph_rule}
    h1, h2, h3, h4, h5, h6, pre, code {{ text-align: left; }}
    img {{ max-width: 100%; }}
    pre {{ overflow: auto; white-space: pre-wrap; }}
    table {{ border-collapse: collapse; border-spacing: 0; width: 100%; }}
    table, th, td {{ border: 1px solid var(--mdbinder-border-color); }}
    th, td {{ padding: 6px 8px; vertical-align: top; word-break: break-word; }}
    thead th {{ background: #f6f8fa; }}
</style>"""
    ]
    if options.add_table_of_contents and options.toc_style == TocStyle.TREE:
        parts.append(TOC_TREE_CSS)
    if options.additional_head_html:
        parts.append(options.additional_head_html)
    return "".join(parts)


def wrap_html_document(body_html: str, head_html: str = "") -> str:
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        f"<meta charset='utf-8'>{head_html}\n"
        "</head>\n"
        "<body>\n"
        f"{body_html}\n"
        "</body>\n"
        "</html>\n"
    )
