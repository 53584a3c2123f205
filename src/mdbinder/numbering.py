"""Heading numbering and anchor synthesis for combined Markdown."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from mdbinder.config import TOC_PLACEHOLDER
from mdbinder.schemas import FormattingOptions, HeadingDescriptor, PublicHeading

MAX_HEADING_DEPTH = 6

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.*\S)\s*$")
_FENCE_RE = re.compile(r"^\s{0,3}(`{3,}|~{3,})")
_CLOSING_FENCE_RE = re.compile(r"^\s{0,3}(`{3,}|~{3,})\s*$")
_NUMERIC_PREFIX_RE = re.compile(r"^[0-9]+(\.[0-9]+)+\.?\s")
_ALPHA_PREFIX_RE = re.compile(r"^[A-Za-z]+(\.[A-Za-z]+)+\.?\s")


class NumberingStyle(str, Enum):
    """Counter rendering style inferred from the numbering pattern."""

    NUMERIC = "numeric"
    LOWER_ALPHA = "lower_alpha"
    UPPER_ALPHA = "upper_alpha"


@dataclass
class NumberingState:
    """Per-build heading counters, one slot per sub-level."""

    counters: list[int] = field(default_factory=lambda: [0] * MAX_HEADING_DEPTH)

    def reset(self) -> None:
        for index in range(len(self.counters)):
            self.counters[index] = 0

    def advance(self, logical_level: int) -> None:
        """Count one heading at ``logical_level`` and zero every deeper level."""
        self.counters[logical_level - 1] += 1
        for index in range(logical_level, len(self.counters)):
            self.counters[index] = 0

    def label(self, logical_level: int, style: NumberingStyle, trailing_dot: bool) -> str:
        parts: list[str] = []
        for counter in self.counters[:logical_level]:
            if counter == 0:
                break
            parts.append(_format_counter(counter, style))
        core = ".".join(parts)
        return f"{core}." if trailing_dot and core else core


@dataclass
class NumberingResult:
    """Output of one numbering pass over combined Markdown."""

    processed_markdown: str
    headers: list[HeadingDescriptor]
    public_headings: list[PublicHeading]


def number_headings(
    markdown: str,
    options: FormattingOptions,
    *,
    toc_placeholder: str = TOC_PLACEHOLDER,
) -> NumberingResult:
    """Number headings, attach anchors and collect heading descriptors.

    Headings above the TOC placeholder are left unnumbered and unregistered
    when the TOC is placed after the first file. Level-1 headings reset all
    counters and are never numbered.
    """
    lines = markdown.replace("\r\n", "\n").split("\n")
    placeholder_index = lines.index(toc_placeholder) if toc_placeholder in lines else -1
    suppress_before = (
        placeholder_index
        if options.add_table_of_contents
        and options.table_of_contents_after_first_file
        and placeholder_index > -1
        else -1
    )

    pattern = (options.header_numbering_pattern or "").strip()
    style = determine_numbering_style(pattern)
    numbering_enabled = options.add_header_numbering and style is not None
    trailing_dot = pattern.endswith(".")

    state = NumberingState()
    headers: list[HeadingDescriptor] = []
    fence: str | None = None

    for index, line in enumerate(lines):
        if fence is not None:
            # Closing fences carry no info string.
            closing = _CLOSING_FENCE_RE.match(line)
            if closing and closing.group(1)[0] == fence[0] and len(closing.group(1)) >= len(fence):
                fence = None
            continue
        opening = _FENCE_RE.match(line)
        if opening:
            fence = opening.group(1)
            continue
        if line == toc_placeholder:
            continue

        match = _HEADING_RE.match(line)
        if not match:
            continue

        hashes = match.group(1)
        markdown_level = len(hashes)
        text = match.group(2).strip()
        is_super = markdown_level == 1
        logical_level = 0 if is_super else markdown_level - 1
        suppressed = index < suppress_before

        numbering = ""
        if suppressed:
            pass
        elif is_super:
            state.reset()
        elif numbering_enabled and not _looks_numbered(text):
            state.advance(logical_level)
            numbering = state.label(logical_level, style, trailing_dot)

        anchor = build_anchor(text, numbering)
        lines[index] = _rewrite_heading(hashes, numbering, text, anchor)

        if not suppressed:
            headers.append(
                HeadingDescriptor(
                    markdown_level=markdown_level,
                    logical_level=logical_level,
                    text=text,
                    numbering=numbering,
                    anchor=anchor,
                )
            )

    public_headings = [
        PublicHeading(level=header.logical_level, label=header.label, anchor=header.anchor)
        for header in headers
        if header.markdown_level > 1
    ]
    return NumberingResult(
        processed_markdown="\n".join(lines),
        headers=headers,
        public_headings=public_headings,
    )


def determine_numbering_style(pattern: str) -> NumberingStyle | None:
    """Infer the counter style from the first non-dot character of ``pattern``.

    Returns None when the pattern is blank or does not start with a digit or
    letter, which disables numbering.
    """
    first = next((char for char in pattern.strip() if char != "."), "")
    if first.isdigit():
        return NumberingStyle.NUMERIC
    if first.isalpha():
        return NumberingStyle.UPPER_ALPHA if first.isupper() else NumberingStyle.LOWER_ALPHA
    return None


def to_alpha(number: int, *, upper: bool = False) -> str:
    """Render ``number`` in bijective base 26 (1 -> a, 26 -> z, 27 -> aa)."""
    letters: list[str] = []
    while number > 0:
        number -= 1
        letters.append(chr(ord("a") + number % 26))
        number //= 26
    result = "".join(reversed(letters))
    return result.upper() if upper else result


def slugify(text: str) -> str:
    """Create a URL-fragment-safe slug from heading text."""
    slug = text.lower()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-{2,}", "-", slug)
    return slug.strip("-")


def build_anchor(text: str, numbering: str = "") -> str:
    """Join the hyphenated numbering and the slugified text."""
    number_part = numbering.rstrip(".").replace(".", "-").lower()
    parts = [part for part in (number_part, slugify(text)) if part]
    return "-".join(parts).strip("-")


def _format_counter(counter: int, style: NumberingStyle) -> str:
    if style is NumberingStyle.LOWER_ALPHA:
        return to_alpha(counter)
    if style is NumberingStyle.UPPER_ALPHA:
        return to_alpha(counter, upper=True)
    return str(counter)


def _looks_numbered(text: str) -> bool:
    return bool(_NUMERIC_PREFIX_RE.match(text) or _ALPHA_PREFIX_RE.match(text))


def _rewrite_heading(hashes: str, numbering: str, text: str, anchor: str) -> str:
    line = f"{hashes} {numbering} {text}" if numbering else f"{hashes} {text}"
    return f"{line} {{#{anchor}}}" if anchor else line
