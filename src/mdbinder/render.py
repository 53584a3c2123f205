"""Render the assembled HTML to PDF with a headless Chromium-family browser."""

from __future__ import annotations

import asyncio
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Final

from mdbinder.config import (
    BROWSER_CANDIDATES,
    MDBINDER_BROWSER,
    MDBINDER_RENDER_TIMEOUT_S,
    MDBINDER_TEMP_DIR,
)
from mdbinder.exceptions import RenderError, RendererNotAvailableError
from mdbinder.file_utils import write_text_async
from mdbinder.html_utils import inject_head_html
from mdbinder.schemas import ExportOptions, PageNumberPosition

logger = logging.getLogger(__name__)

# Portrait (width, height) in millimetres.
PAPER_SIZES_MM: Final[dict[str, tuple[float, float]]] = {
    "A3": (297.0, 420.0),
    "A4": (210.0, 297.0),
    "LETTER": (215.9, 279.4),
}

_MARGIN_BOXES: Final[dict[PageNumberPosition, str]] = {
    PageNumberPosition.TOP_LEFT: "top-left",
    PageNumberPosition.TOP_CENTER: "top-center",
    PageNumberPosition.TOP_RIGHT: "top-right",
    PageNumberPosition.BOTTOM_LEFT: "bottom-left",
    PageNumberPosition.BOTTOM_CENTER: "bottom-center",
    PageNumberPosition.BOTTOM_RIGHT: "bottom-right",
}


def find_browser() -> str:
    """Locate a Chromium-family executable.

    ``MDBINDER_BROWSER`` wins when set; otherwise the usual executable names
    are looked up on ``PATH``.

    Raises:
        RendererNotAvailableError: If no browser can be found.
    """
    if MDBINDER_BROWSER:
        resolved = shutil.which(MDBINDER_BROWSER)
        if resolved:
            return resolved
        raise RendererNotAvailableError(f"MDBINDER_BROWSER is set but not executable: {MDBINDER_BROWSER}")
    for name in BROWSER_CANDIDATES:
        resolved = shutil.which(name)
        if resolved:
            return resolved
    raise RendererNotAvailableError(
        "No Chromium-based browser found. Install Chromium or Chrome, "
        "or point MDBINDER_BROWSER at one."
    )


def paper_size_mm(options: ExportOptions) -> tuple[float, float]:
    """Page (width, height) in millimetres, unknown formats falling back to A4."""
    key = (options.paper_format or "").strip().upper()
    width, height = PAPER_SIZES_MM.get(key, PAPER_SIZES_MM["A4"])
    return (height, width) if options.landscape else (width, height)


def build_page_css(options: ExportOptions) -> str:
    """Translate layout options into an ``@page`` stylesheet."""
    width, height = paper_size_mm(options)
    page_rules = [
        f"size: {width:g}mm {height:g}mm;",
        (
            f"margin: {options.top_margin_mm:g}mm {options.right_margin_mm:g}mm "
            f"{options.bottom_margin_mm:g}mm {options.left_margin_mm:g}mm;"
        ),
    ]
    if options.show_page_numbers:
        box = _MARGIN_BOXES[options.page_number_position]
        page_rules.append(
            f'@{box} {{ content: "Page " counter(page) " of " counter(pages); font-size: 10px; }}'
        )

    css = ["@page { " + " ".join(page_rules) + " }"]
    if options.print_background:
        css.append("html { -webkit-print-color-adjust: exact; print-color-adjust: exact; }")
    return "\n<style>\n" + "\n".join(css) + "\n</style>"


def build_browser_command(browser: str, html_path: Path, output_path: Path, profile_dir: Path) -> list[str]:
    return [
        browser,
        "--headless",
        "--disable-gpu",
        "--no-sandbox",
        "--no-first-run",
        f"--user-data-dir={profile_dir}",
        "--no-pdf-header-footer",
        "--print-to-pdf-no-header",
        "--run-all-compositor-stages-before-draw",
        f"--print-to-pdf={output_path}",
        html_path.resolve().as_uri(),
    ]


async def render_html_to_pdf(
    html: str,
    output_path: Path,
    options: ExportOptions | None = None,
    *,
    timeout_s: float = MDBINDER_RENDER_TIMEOUT_S,
) -> Path:
    """Render ``html`` to a PDF at ``output_path``.

    Args:
        html: Complete HTML document.
        output_path: Destination PDF path; parent directories must exist.
        options: Paper size, orientation, margins and page-number settings.
        timeout_s: Seconds to wait for the browser before giving up.

    Returns:
        The output path.

    Raises:
        RendererNotAvailableError: If no browser is installed.
        RenderError: If the browser fails, times out or writes no PDF.
    """
    opts = options or ExportOptions()
    browser = find_browser()
    output_path = Path(output_path).resolve()

    with tempfile.TemporaryDirectory(prefix="mdbinder-", dir=MDBINDER_TEMP_DIR) as work:
        work_dir = Path(work)
        html_path = work_dir / "document.html"
        await write_text_async(html_path, inject_head_html(html, build_page_css(opts)))

        command = build_browser_command(browser, html_path, output_path, work_dir / "profile")
        logger.debug("Rendering %s with %s", output_path, browser)
        await _run_browser(command, timeout_s)

    if not output_path.is_file() or output_path.stat().st_size == 0:
        raise RenderError(f"Browser finished but produced no PDF at {output_path}")
    return output_path


async def _run_browser(command: list[str], timeout_s: float) -> None:
    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise RendererNotAvailableError(f"Cannot start browser {command[0]}: {exc}") from exc

    try:
        _, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout_s)
    except asyncio.TimeoutError as exc:
        await _kill(process)
        raise RenderError(f"Browser did not finish within {timeout_s:g}s") from exc
    except asyncio.CancelledError:
        await _kill(process)
        raise

    if process.returncode != 0:
        message = stderr.decode("utf-8", errors="replace").strip()
        raise RenderError(f"Browser exited with code {process.returncode}: {message}")


async def _kill(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        process.kill()
        await process.wait()
