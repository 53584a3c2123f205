"""Export output model."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from mdbinder.schemas.headings import PublicHeading


class ExportResult(BaseModel):
    """Final export output."""

    output_path: Path
    headings: list[PublicHeading] = Field(default_factory=list)
    page_count: int = 0
    outline_entries: int = 0
