"""Local configuration for mdbinder."""

from __future__ import annotations

import os
from pathlib import Path


DEFAULT_RENDER_TIMEOUT_S = 120.0
DEFAULT_TOC_HEADER_TEXT = "Table of Contents"
DEFAULT_NUMBERING_PATTERN = "1.1.1"

# Sentinel line marking where the generated TOC is spliced into the Markdown.
TOC_PLACEHOLDER = "<!--__TOC_PLACEHOLDER__-->"
PAGE_BREAK_HTML = "<div style='page-break-after: always;'></div>"
TOC_CONTAINER_ID = "md2pdf-toc"

# Browser executables probed on PATH, in order.
BROWSER_CANDIDATES = (
    "chromium",
    "chromium-browser",
    "google-chrome",
    "google-chrome-stable",
    "chrome",
    "msedge",
    "microsoft-edge",
)

MDBINDER_BROWSER = os.getenv("MDBINDER_BROWSER") or None
MDBINDER_RENDER_TIMEOUT_S = float(os.getenv("MDBINDER_RENDER_TIMEOUT_S", str(DEFAULT_RENDER_TIMEOUT_S)))
MDBINDER_TEMP_DIR = Path(os.getenv("MDBINDER_TEMP_DIR")).expanduser().resolve() if os.getenv("MDBINDER_TEMP_DIR") else None
