"""Formatting and export option models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from mdbinder.config import DEFAULT_NUMBERING_PATTERN, DEFAULT_TOC_HEADER_TEXT


class TocStyle(str, Enum):
    """Rendering form of the generated table of contents."""

    FLAT = "flat"
    TREE = "tree"


class LeaderStyle(str, Enum):
    """Decoration between a tree TOC entry's title and its page number."""

    DOTS = "dots"
    NONE = "none"


class PageNumberPosition(str, Enum):
    """Page margin box that receives the page number."""

    TOP_LEFT = "TopLeft"
    TOP_CENTER = "TopCenter"
    TOP_RIGHT = "TopRight"
    BOTTOM_LEFT = "BottomLeft"
    BOTTOM_CENTER = "BottomCenter"
    BOTTOM_RIGHT = "BottomRight"


class FormattingOptions(BaseModel):
    """Options controlling how Markdown files are combined and converted.

    Attributes:
        use_advanced_extensions: Enable tables, strikethrough, footnotes,
            definition lists and task lists.
        use_pipe_tables: Enable GitHub-style pipe tables.
        use_auto_links: Turn bare URLs into links.
        insert_page_breaks_between_files: Start every file on a new page.
        add_header_numbering: Prefix headings with hierarchical numbers.
        header_numbering_pattern: Pattern such as ``1.1.1``, ``a.a`` or ``A.A.``.
            Its first character picks the counter style and a trailing dot is
            copied onto every label.
        add_table_of_contents: Generate a table of contents.
        table_of_contents_after_first_file: Place the TOC after the first file
            (typically a cover page) instead of at the top.
        table_of_contents_header_text: Title shown above the TOC.
        table_of_contents_bullet_style: ``-`` for bullets or ``1.`` for an
            ordered list (flat TOC only).
        indent_table_of_contents: Indent nested entries (flat TOC only).
        toc_style: Flat Markdown list or nested HTML tree with page numbers.
        toc_leader_style: Dotted leader between title and page (tree TOC only).
        additional_head_html: Extra markup appended to the document ``<head>``.
    """

    use_advanced_extensions: bool = True
    use_pipe_tables: bool = True
    use_auto_links: bool = True
    insert_page_breaks_between_files: bool = False

    add_header_numbering: bool = False
    header_numbering_pattern: str = DEFAULT_NUMBERING_PATTERN

    add_table_of_contents: bool = False
    table_of_contents_after_first_file: bool = False
    table_of_contents_header_text: str = DEFAULT_TOC_HEADER_TEXT
    table_of_contents_bullet_style: str = "-"
    indent_table_of_contents: bool = True
    toc_style: TocStyle = TocStyle.FLAT
    toc_leader_style: LeaderStyle = LeaderStyle.DOTS

    base_font_family: str = "Segoe UI, sans-serif"
    body_font_size_px: float = Field(default=12, gt=0)
    body_margin_px: float = Field(default=0, ge=0)
    body_text_alignment: str = "justify"
    additional_head_html: str = ""


class ExportOptions(BaseModel):
    """Page layout and post-processing options for the rendered PDF."""

    paper_format: str = "A4"
    landscape: bool = False
    print_background: bool = True

    top_margin_mm: float = Field(default=25.4, ge=0)
    right_margin_mm: float = Field(default=25.4, ge=0)
    bottom_margin_mm: float = Field(default=25.4, ge=0)
    left_margin_mm: float = Field(default=25.4, ge=0)

    show_page_numbers: bool = False
    show_page_number_on_first_page: bool = True
    page_number_position: PageNumberPosition = PageNumberPosition.BOTTOM_RIGHT
    clear_header_band: bool = False
