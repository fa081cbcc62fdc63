"""
Chromium installer
Downloads the Chromium build pinned by Playwright into the storage directory
"""

import asyncio
import collections
import json
import os
import re
import shutil
import time
from contextlib import aclosing
from pathlib import Path
from typing import TYPE_CHECKING, AsyncIterator, Awaitable, Callable, Optional

import playwright
from playwright.async_api import async_playwright

from ...domain.errors import InstallError
from ...log import logger
from ...types import CHROME_PATH_KEY, PROXY_KEY, DownloadProgress
from ...utils.decorators import log_execution
from ...utils.environment import proxy_environ, scoped_environ

if TYPE_CHECKING:
    from ...domain.interfaces import IExecutableResolver
    from ...types import ExtensionContext

BROWSERS_PATH_ENV = "PLAYWRIGHT_BROWSERS_PATH"

PROGRESS_PATTERN = re.compile(
    r"(?P<percent>\d+(?:\.\d+)?)%\s+of\s+(?P<size>\d+(?:\.\d+)?)\s*(?P<unit>[KMG]i?B|B)\b"
)
REVISION_DIR_PATTERN = re.compile(
    r"^(?P<browser>chromium(?:_headless_shell)?)-(?P<revision>\d+)$"
)
UNIT_BYTES = {
    "B": 1,
    "KB": 1000,
    "MB": 1000 ** 2,
    "GB": 1000 ** 3,
    "KiB": 1024,
    "MiB": 1024 ** 2,
    "GiB": 1024 ** 3,
}


def parse_progress(line: str) -> Optional[DownloadProgress]:
    """Parse a Playwright installer progress line such as ``|■■■ |  30% of 150.2 MiB``"""
    match = PROGRESS_PATTERN.search(line)
    if not match:
        return None
    total = int(float(match.group("size")) * UNIT_BYTES[match.group("unit")])
    downloaded = int(total * float(match.group("percent")) / 100)
    return DownloadProgress(downloaded_bytes=min(downloaded, total), total_bytes=total)


def read_pinned_revision(browsers_json: Optional[Path] = None) -> str:
    """Chromium revision pinned by the installed Playwright release"""
    if browsers_json is None:
        browsers_json = (
            Path(playwright.__file__).parent / "driver" / "package" / "browsers.json"
        )
    try:
        data = json.loads(browsers_json.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise InstallError(f"Cannot read {browsers_json}: {e}")

    for browser in data.get("browsers", []):
        if browser.get("name") == "chromium":
            return str(browser["revision"])
    raise InstallError(f"No Chromium revision listed in {browsers_json}")


def revision_dirs(install_dir: Path, revision: Optional[str] = None) -> list[Path]:
    """Revision directories under the install directory, optionally for one revision"""
    if not install_dir.is_dir():
        return []
    found = []
    for entry in sorted(install_dir.iterdir()):
        match = REVISION_DIR_PATTERN.match(entry.name)
        if not match or not entry.is_dir():
            continue
        if revision is None or match.group("revision") == revision:
            found.append(entry)
    return found


def local_revisions(install_dir: Path) -> set[str]:
    """Revisions currently present in the install directory"""
    return {
        REVISION_DIR_PATTERN.match(entry.name).group("revision")
        for entry in revision_dirs(install_dir)
    }


async def playwright_executable_path(install_dir: Path) -> str:
    """Executable path Playwright uses for Chromium installed under install_dir"""
    with scoped_environ({BROWSERS_PATH_ENV: str(install_dir)}):
        async with async_playwright() as pw:
            return pw.chromium.executable_path


class ProgressThrottle:
    """Lets through at most one progress event per interval, plus completion"""

    def __init__(self, interval: float, clock: Callable[[], float] = time.monotonic):
        self._interval = interval
        self._clock = clock
        self._last: Optional[float] = None

    def should_emit(self, progress: DownloadProgress) -> bool:
        now = self._clock()
        if progress.is_complete or self._last is None or now - self._last >= self._interval:
            self._last = now
            return True
        return False


class BrowserInstaller:
    """
    Chromium installer

    Steps:
    1. Resolve the revision pinned by Playwright
    2. Run the Playwright installer into the storage directory (proxy aware)
    3. Report throttled progress in the status bar
    4. Remove every other revision
    5. Persist the executable path to ``chrome.path`` and verify it resolves
    """

    def __init__(
        self,
        context: "ExtensionContext",
        resolver: "IExecutableResolver",
        revision: Optional[str] = None,
        executable_locator: Callable[[Path], Awaitable[str]] = playwright_executable_path,
    ):
        self._context = context
        self._resolver = resolver
        self._revision = revision
        self._executable_locator = executable_locator
        self._lock = asyncio.Lock()

    def target_revision(self) -> str:
        if self._revision is None:
            self._revision = read_pinned_revision()
        return self._revision

    @log_execution
    async def install(self) -> str:
        """Download Chromium and return the executable path

        Raises:
            InstallError: the download failed
        """
        async with self._lock:
            return await self._install()

    async def _install(self) -> str:
        host = self._context.host
        install_dir = self._context.storage_dir

        await host.show_info(f"Installing Chromium into '{install_dir}'")
        status = host.set_status("Installing Chromium...")

        try:
            try:
                revision = self.target_revision()
                logger.info(
                    f"[MarkdownExport] Installing Chromium revision {revision} into '{install_dir}'..."
                )
                proxy = self._context.config.get(PROXY_KEY) or ""
                with scoped_environ(proxy_environ(proxy)):
                    await self._download(install_dir)
            except Exception as e:
                status.dispose()
                logger.error(f"[MarkdownExport] Chromium download failed: {type(e).__name__}: {e}")
                await host.show_error(f"Failed to install Chromium: {e}")
                if isinstance(e, InstallError):
                    raise
                raise InstallError(str(e), revision=self._revision or "") from e

            await self._remove_old_revisions(install_dir, revision)

            executable_path = await self._executable_locator(install_dir)
            await self._context.config.update(CHROME_PATH_KEY, executable_path)
        finally:
            status.dispose()

        if await self._resolver.find_executable():
            logger.info(f"[MarkdownExport] Chromium installed: {executable_path}")
            await host.show_info("Chromium installed.")
        else:
            logger.warning(f"[MarkdownExport] Installed executable not found: {executable_path}")
            await host.show_error("Install completed but couldn't find the executable.")
        return executable_path

    async def _download(self, install_dir: Path) -> None:
        throttle = ProgressThrottle(self._context.settings.progress_interval)
        async with aclosing(self.download_progress(install_dir)) as events:
            async for progress in events:
                if throttle.should_emit(progress):
                    self._report_progress(progress)

    async def download_progress(self, install_dir: Path) -> AsyncIterator[DownloadProgress]:
        """Run the installer and yield its progress events

        The installer is killed if reading its output fails or the caller
        stops iterating early.

        Raises:
            InstallError: the installer exited with a non-zero code
            OSError: the installer could not be started
            ValueError: an output line exceeded the stream buffer limit
        """
        install_dir.mkdir(parents=True, exist_ok=True)
        env = dict(os.environ)
        env[BROWSERS_PATH_ENV] = str(install_dir)

        command = self._context.settings.install_command
        logger.debug(f"[MarkdownExport] Running: {' '.join(command)}")
        process = await asyncio.create_subprocess_exec(
            *command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
            env=env,
        )

        output_tail = collections.deque(maxlen=10)
        reached_eof = False
        try:
            async for raw_line in process.stdout:
                # TTY-style output separates updates with carriage returns
                for segment in raw_line.decode("utf-8", errors="replace").splitlines():
                    if not segment.strip():
                        continue
                    output_tail.append(segment.strip())
                    progress = parse_progress(segment)
                    if progress is not None:
                        yield progress
            reached_eof = True
        finally:
            if not reached_eof:
                await self._terminate(process)

        returncode = await process.wait()
        if returncode != 0:
            detail = " | ".join(output_tail)
            raise InstallError(
                f"installer exited with code {returncode}: {detail}",
                revision=self._revision or "",
            )

    @staticmethod
    async def _terminate(process: asyncio.subprocess.Process) -> None:
        if process.returncode is None:
            logger.warning(f"[MarkdownExport] Killing installer process {process.pid}")
            try:
                process.kill()
            except ProcessLookupError:
                pass
        await process.wait()

    def _report_progress(self, progress: DownloadProgress) -> None:
        self._context.host.set_status(
            f"Installing Chromium : {progress.percent}% "
            f"({progress.downloaded_megabytes} MB / {progress.total_megabytes} MB)",
            timeout_ms=self._context.settings.status_timeout_ms,
        )

    async def _remove_old_revisions(self, install_dir: Path, keep: str) -> None:
        """Best-effort removal of every revision except ``keep``"""
        for revision in sorted(local_revisions(install_dir) - {keep}):
            for entry in revision_dirs(install_dir, revision):
                try:
                    await asyncio.to_thread(shutil.rmtree, entry)
                    logger.info(f"[MarkdownExport] Removed old Chromium revision: {entry.name}")
                except OSError as e:
                    logger.warning(f"[MarkdownExport] Could not remove {entry}: {e}")
