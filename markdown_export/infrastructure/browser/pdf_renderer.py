"""
PDF renderer
Prints sanitized HTML to PDF with a headless Chromium
"""
import traceback
from typing import TYPE_CHECKING, Optional

from playwright.async_api import Browser, Playwright, async_playwright

from ...domain.errors import BrowserError, RenderError
from ...log import logger
from ...types import ExportSettings

if TYPE_CHECKING:
    from ...domain.interfaces import IExecutableResolver, IMarkdownRenderer


class PdfRenderer:
    """PDF renderer - one browser process per export"""

    def __init__(
        self,
        resolver: "IExecutableResolver",
        markdown_renderer: "IMarkdownRenderer",
        settings: Optional[ExportSettings] = None,
    ):
        self._resolver = resolver
        self._markdown_renderer = markdown_renderer
        self._settings = settings or ExportSettings()

    async def render_pdf(self, markdown_text: str) -> Optional[bytes]:
        """Render Markdown to PDF bytes

        Returns:
            The PDF, or None when no Chromium executable was obtained

        Raises:
            BrowserError: Chromium could not be launched
            RenderError: the page could not be exported
        """
        executable_path = await self._resolver.resolve_or_prompt()
        if not executable_path:
            logger.info("[MarkdownExport] No Chromium available, PDF export skipped")
            return None

        html = self._markdown_renderer.render_html(markdown_text)

        async with async_playwright() as playwright:
            browser = await self._launch(playwright, executable_path)
            try:
                return await self._print_to_pdf(browser, html)
            finally:
                try:
                    await browser.close()
                except Exception as e:
                    logger.warning(f"[MarkdownExport] Error while closing browser: {e}")

    async def _launch(self, playwright: Playwright, executable_path: str) -> Browser:
        try:
            logger.info(f"[MarkdownExport] Launching Chromium: {executable_path}")
            return await playwright.chromium.launch(
                executable_path=executable_path,
                headless=True,
                args=list(self._settings.launch_args),
            )
        except Exception as e:
            logger.error(f"[MarkdownExport] Browser launch failed: {type(e).__name__}: {e}")
            logger.error(f"[MarkdownExport] Traceback:\n{traceback.format_exc()}")
            raise BrowserError(f"Failed to launch Chromium: {e}") from e

    async def _print_to_pdf(self, browser: Browser, html: str) -> bytes:
        try:
            page = await browser.new_page()
            await page.set_content(html)
            pdf = await page.pdf(format=self._settings.page_format)
            logger.info(f"[MarkdownExport] PDF rendered, {len(pdf)} bytes")
            return pdf
        except Exception as e:
            logger.error(f"[MarkdownExport] PDF export failed: {type(e).__name__}: {e}")
            logger.error(f"[MarkdownExport] Traceback:\n{traceback.format_exc()}")
            raise RenderError(f"PDF export failed: {e}") from e
