"""Tests for HTML to PDF rendering."""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from mdbinder.exceptions import RenderError, RendererNotAvailableError
from mdbinder.render import (
    build_browser_command,
    build_page_css,
    find_browser,
    paper_size_mm,
    render_html_to_pdf,
)
from mdbinder.schemas import ExportOptions, PageNumberPosition

from conftest import write_pdf

HTML = "<!DOCTYPE html>\n<html>\n<head>\n<meta charset='utf-8'>\n</head>\n<body>\n<h2>Hi</h2>\n</body>\n</html>\n"


def _flag(command: tuple[str, ...], name: str) -> str:
    prefix = f"--{name}="
    return next(arg[len(prefix) :] for arg in command if arg.startswith(prefix))


class FakeBrowser:
    """Stands in for asyncio.create_subprocess_exec."""

    def __init__(self, returncode: int = 0, stderr: bytes = b"", write_pdf: bool = True) -> None:
        self.returncode = returncode
        self.stderr = stderr
        self.write_pdf = write_pdf
        self.commands: list[tuple[str, ...]] = []
        self.rendered_html: str | None = None

    async def __call__(self, *command: str, **kwargs) -> MagicMock:
        self.commands.append(command)
        html_path = Path(_flag(command, "user-data-dir")).parent / "document.html"
        self.rendered_html = html_path.read_text(encoding="utf-8")
        if self.write_pdf:
            write_pdf(Path(_flag(command, "print-to-pdf")), [["Hi"]])

        process = MagicMock()
        process.returncode = self.returncode
        process.communicate = AsyncMock(return_value=(b"", self.stderr))
        return process


class TestPaperSize:
    """Tests for paper_size_mm function."""

    @pytest.mark.parametrize(
        ("paper", "expected"),
        [("A4", (210.0, 297.0)), ("a3", (297.0, 420.0)), ("Letter", (215.9, 279.4)), ("Tabloid", (210.0, 297.0))],
    )
    def test_formats(self, paper: str, expected: tuple[float, float]) -> None:
        """Known formats are case-insensitive and unknown ones fall back to A4."""
        assert paper_size_mm(ExportOptions(paper_format=paper)) == expected

    def test_landscape_swaps(self) -> None:
        """Landscape swaps width and height."""
        assert paper_size_mm(ExportOptions(landscape=True)) == (297.0, 210.0)


class TestBuildPageCss:
    """Tests for build_page_css function."""

    def test_default_a4(self) -> None:
        """Defaults give A4 with one-inch margins and no page numbers."""
        css = build_page_css(ExportOptions())

        assert "size: 210mm 297mm;" in css
        assert "margin: 25.4mm 25.4mm 25.4mm 25.4mm;" in css
        assert "counter(page)" not in css
        assert "print-color-adjust: exact" in css
        assert css.startswith("\n<style>")

    def test_margins_in_order(self) -> None:
        """Margins follow the CSS top, right, bottom, left order."""
        options = ExportOptions(top_margin_mm=10, right_margin_mm=20, bottom_margin_mm=30, left_margin_mm=40)

        assert "margin: 10mm 20mm 30mm 40mm;" in build_page_css(options)

    def test_letter_landscape(self) -> None:
        """Letter landscape uses swapped Letter dimensions."""
        css = build_page_css(ExportOptions(paper_format="Letter", landscape=True))

        assert "size: 279.4mm 215.9mm;" in css

    @pytest.mark.parametrize(
        ("position", "box"),
        [
            (PageNumberPosition.BOTTOM_RIGHT, "@bottom-right"),
            (PageNumberPosition.TOP_CENTER, "@top-center"),
            (PageNumberPosition.BOTTOM_LEFT, "@bottom-left"),
        ],
    )
    def test_page_number_box(self, position: PageNumberPosition, box: str) -> None:
        """Page numbers go into the requested margin box."""
        css = build_page_css(ExportOptions(show_page_numbers=True, page_number_position=position))

        assert f'{box} {{ content: "Page " counter(page) " of " counter(pages);' in css

    def test_without_background(self) -> None:
        """Background printing can be turned off."""
        assert "print-color-adjust" not in build_page_css(ExportOptions(print_background=False))


class TestFindBrowser:
    """Tests for find_browser function."""

    def test_first_candidate_on_path(self) -> None:
        """The first executable found on PATH wins."""
        found = {"chromium-browser": "/usr/bin/chromium-browser", "google-chrome": "/usr/bin/google-chrome"}
        with (
            patch("mdbinder.render.MDBINDER_BROWSER", None),
            patch("mdbinder.render.shutil.which", side_effect=found.get),
        ):
            assert find_browser() == "/usr/bin/chromium-browser"

    def test_override(self) -> None:
        """MDBINDER_BROWSER takes precedence."""
        with (
            patch("mdbinder.render.MDBINDER_BROWSER", "/opt/chrome/chrome"),
            patch("mdbinder.render.shutil.which", return_value="/opt/chrome/chrome") as which,
        ):
            assert find_browser() == "/opt/chrome/chrome"
        which.assert_called_once_with("/opt/chrome/chrome")

    def test_override_not_executable(self) -> None:
        """A bad override is reported rather than silently ignored."""
        with (
            patch("mdbinder.render.MDBINDER_BROWSER", "/nope"),
            patch("mdbinder.render.shutil.which", return_value=None),
        ):
            with pytest.raises(RendererNotAvailableError, match="MDBINDER_BROWSER"):
                find_browser()

    def test_nothing_installed(self) -> None:
        """No browser raises RendererNotAvailableError."""
        with (
            patch("mdbinder.render.MDBINDER_BROWSER", None),
            patch("mdbinder.render.shutil.which", return_value=None),
        ):
            with pytest.raises(RendererNotAvailableError):
                find_browser()


class TestBuildBrowserCommand:
    """Tests for build_browser_command function."""

    def test_flags(self, tmp_path: Path) -> None:
        """The command prints headless to the output path from a file URI."""
        html_path = tmp_path / "document.html"

        command = build_browser_command("chromium", html_path, tmp_path / "out.pdf", tmp_path / "profile")

        assert command[0] == "chromium"
        assert "--headless" in command
        assert "--no-pdf-header-footer" in command
        assert f"--print-to-pdf={tmp_path / 'out.pdf'}" in command
        assert f"--user-data-dir={tmp_path / 'profile'}" in command
        assert command[-1] == html_path.resolve().as_uri()


class TestRenderHtmlToPdf:
    """Tests for render_html_to_pdf function."""

    @pytest.mark.asyncio
    async def test_success(self, tmp_path: Path) -> None:
        """The browser is driven with page CSS injected into the document."""
        browser = FakeBrowser()
        output = tmp_path / "out.pdf"
        options = ExportOptions(paper_format="Letter", show_page_numbers=True)

        with (
            patch("mdbinder.render.find_browser", return_value="chromium"),
            patch("mdbinder.render.asyncio.create_subprocess_exec", new=browser),
        ):
            result = await render_html_to_pdf(HTML, output, options)

        assert result == output.resolve()
        assert output.stat().st_size > 0
        assert len(browser.commands) == 1
        assert "size: 215.9mm 279.4mm;" in browser.rendered_html
        assert "counter(pages)" in browser.rendered_html
        assert "<h2>Hi</h2>" in browser.rendered_html

    @pytest.mark.asyncio
    async def test_nonzero_exit(self, tmp_path: Path) -> None:
        """A failing browser raises RenderError with its stderr."""
        browser = FakeBrowser(returncode=1, stderr=b"GPU process crashed", write_pdf=False)

        with (
            patch("mdbinder.render.find_browser", return_value="chromium"),
            patch("mdbinder.render.asyncio.create_subprocess_exec", new=browser),
        ):
            with pytest.raises(RenderError, match="GPU process crashed"):
                await render_html_to_pdf(HTML, tmp_path / "out.pdf")

    @pytest.mark.asyncio
    async def test_no_output(self, tmp_path: Path) -> None:
        """A clean exit without a PDF is still a failure."""
        browser = FakeBrowser(write_pdf=False)

        with (
            patch("mdbinder.render.find_browser", return_value="chromium"),
            patch("mdbinder.render.asyncio.create_subprocess_exec", new=browser),
        ):
            with pytest.raises(RenderError, match="produced no PDF"):
                await render_html_to_pdf(HTML, tmp_path / "out.pdf")

    @pytest.mark.asyncio
    async def test_cannot_start(self, tmp_path: Path) -> None:
        """Launch failures report the renderer as unavailable."""
        with (
            patch("mdbinder.render.find_browser", return_value="chromium"),
            patch(
                "mdbinder.render.asyncio.create_subprocess_exec",
                new=AsyncMock(side_effect=PermissionError("denied")),
            ),
        ):
            with pytest.raises(RendererNotAvailableError, match="denied"):
                await render_html_to_pdf(HTML, tmp_path / "out.pdf")

    @pytest.mark.asyncio
    async def test_timeout_kills_browser(self, tmp_path: Path) -> None:
        """A browser that hangs is killed and reported."""

        async def hang() -> tuple[bytes, bytes]:
            await asyncio.sleep(10)
            return b"", b""

        process = MagicMock()
        process.returncode = None
        process.communicate = hang
        process.wait = AsyncMock(return_value=-9)

        with (
            patch("mdbinder.render.find_browser", return_value="chromium"),
            patch("mdbinder.render.asyncio.create_subprocess_exec", new=AsyncMock(return_value=process)),
        ):
            with pytest.raises(RenderError, match="did not finish"):
                await render_html_to_pdf(HTML, tmp_path / "out.pdf", timeout_s=0.05)

        process.kill.assert_called_once()
        process.wait.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_cancel_kills_browser(self, tmp_path: Path) -> None:
        """Cancelling the render kills the browser and re-raises."""
        started = asyncio.Event()

        async def hang() -> tuple[bytes, bytes]:
            started.set()
            await asyncio.sleep(10)
            return b"", b""

        process = MagicMock()
        process.returncode = None
        process.communicate = hang
        process.wait = AsyncMock(return_value=-9)

        with (
            patch("mdbinder.render.find_browser", return_value="chromium"),
            patch("mdbinder.render.asyncio.create_subprocess_exec", new=AsyncMock(return_value=process)),
        ):
            task = asyncio.create_task(render_html_to_pdf(HTML, tmp_path / "out.pdf", timeout_s=30))
            await started.wait()
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        process.kill.assert_called_once()

    @pytest.mark.asyncio
    async def test_missing_browser(self, tmp_path: Path) -> None:
        """Without a browser nothing is launched."""
        with (
            patch(
                "mdbinder.render.find_browser",
                side_effect=RendererNotAvailableError("none"),
            ),
            patch("mdbinder.render.asyncio.create_subprocess_exec") as spawn,
        ):
            with pytest.raises(RendererNotAvailableError):
                await render_html_to_pdf(HTML, tmp_path / "out.pdf")

        spawn.assert_not_called()


@pytest.mark.integration
class TestRenderIntegration:
    """Renders with a real browser when one is installed."""

    @pytest.mark.asyncio
    async def test_real_render(self, tmp_path: Path) -> None:
        """A real browser produces a readable PDF."""
        try:
            find_browser()
        except RendererNotAvailableError:
            pytest.skip("No Chromium-based browser installed")

        output = await render_html_to_pdf(HTML, tmp_path / "real.pdf", ExportOptions(show_page_numbers=True))

        assert output.read_bytes().startswith(b"%PDF")
