"""
Chromium executable resolver
Finds a usable browser binary, offering an install when none is found
"""
import asyncio
import os
import stat
import traceback
from typing import TYPE_CHECKING, Awaitable, Callable, Optional

from playwright.async_api import async_playwright

from ...log import logger
from ...types import CHROME_PATH_KEY, SETTINGS_SECTION, InstallChoice

if TYPE_CHECKING:
    from ...domain.interfaces import IBrowserInstaller
    from ...types import ExtensionContext

MISSING_CHROMIUM_MESSAGE = (
    "Cannot find Chromium. Please install or configure the path to Chromium."
)


async def detect_default_executable() -> Optional[str]:
    """Where Playwright expects its bundled Chromium to live"""
    async with async_playwright() as playwright:
        return playwright.chromium.executable_path


class ExecutableResolver:
    """Chromium executable resolver

    Lookup order:
    1. ``chrome.path`` from configuration
    2. Playwright's default install location
    """

    def __init__(
        self,
        context: "ExtensionContext",
        installer: Optional["IBrowserInstaller"] = None,
        auto_detect: Callable[[], Awaitable[Optional[str]]] = detect_default_executable,
    ):
        self._context = context
        self._installer = installer
        self._auto_detect = auto_detect

    @property
    def installer(self) -> Optional["IBrowserInstaller"]:
        return self._installer

    @installer.setter
    def installer(self, installer: "IBrowserInstaller") -> None:
        self._installer = installer

    async def find_executable(self) -> Optional[str]:
        """Return the first existing executable, or None"""
        try:
            configured = self._context.config.get(CHROME_PATH_KEY)
            if configured and await self._is_existing_file(configured):
                return configured
            elif configured:
                logger.info(f"[MarkdownExport] Cannot find Chromium at {configured}.")

            auto_detected = await self._auto_detect()
            if auto_detected and await self._is_existing_file(auto_detected):
                return auto_detected
        except Exception as e:
            logger.error(f"[MarkdownExport] Chromium lookup failed: {type(e).__name__}: {e}")
            logger.debug(f"[MarkdownExport] Traceback:\n{traceback.format_exc()}")
        return None

    async def resolve_or_prompt(self) -> Optional[str]:
        """Return an executable path, asking the user to install or configure one

        Returns:
            The executable path, or None if the user cancelled, chose to
            configure the path, or the install failed
        """
        found = await self.find_executable()
        if found:
            return found

        host = self._context.host
        try:
            label = await host.show_error(
                MISSING_CHROMIUM_MESSAGE, *(choice.value for choice in InstallChoice)
            )
            choice = InstallChoice.from_label(label)
            logger.debug(f"[MarkdownExport] Missing Chromium prompt answered: {choice.name}")

            if choice is InstallChoice.INSTALL:
                if self._installer is None:
                    logger.error("[MarkdownExport] No installer available")
                    return None
                return await self._installer.install()
            if choice is InstallChoice.CONFIGURE:
                await host.open_settings(f"{SETTINGS_SECTION}.{CHROME_PATH_KEY}")
            return None

        except Exception as e:
            logger.error(f"[MarkdownExport] Chromium prompt failed: {type(e).__name__}: {e}")
            logger.debug(f"[MarkdownExport] Traceback:\n{traceback.format_exc()}")
            return None

    async def _is_existing_file(self, file_path: str) -> bool:
        """True only for an existing regular file"""
        try:
            file_stat = await asyncio.to_thread(os.stat, file_path)
        except (OSError, ValueError) as e:
            logger.debug(f"[MarkdownExport] stat({file_path}) failed: {e}")
            return False
        return stat.S_ISREG(file_stat.st_mode)
