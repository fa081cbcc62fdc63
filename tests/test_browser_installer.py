import asyncio
import json
import os
import sys
import tempfile
import textwrap
import time
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, patch

from markdown_export.domain.errors import InstallError
from markdown_export.infrastructure.browser import (
    BrowserInstaller,
    ExecutableResolver,
    ProgressThrottle,
    parse_progress,
)
from markdown_export.infrastructure.browser.browser_installer import (
    local_revisions,
    read_pinned_revision,
)
from markdown_export.types import DownloadProgress, ExportSettings, ExtensionContext

from tests.fakes import FakeConfig, FakeHost, no_default_executable

REVISION = "1234"

# Stands in for `playwright install chromium`: lays out a revision directory
# under PLAYWRIGHT_BROWSERS_PATH and prints progress lines in Playwright's format.
FAKE_INSTALLER = textwrap.dedent("""
    import os, pathlib, sys, time
    run_log = os.environ.get("FAKE_RUN_LOG")
    if run_log:
        with open(run_log, "a") as log:
            log.write("start\\n")
        time.sleep(0.2)
    root = pathlib.Path(os.environ["PLAYWRIGHT_BROWSERS_PATH"])
    revision = sys.argv[1]
    exe = root / f"chromium-{revision}" / "chrome-linux" / "chrome"
    exe.parent.mkdir(parents=True, exist_ok=True)
    exe.write_text("#!/bin/sh\\n")
    (root / f"chromium_headless_shell-{revision}").mkdir(exist_ok=True)
    proxy_log = os.environ.get("FAKE_PROXY_LOG")
    if proxy_log:
        pathlib.Path(proxy_log).write_text(os.environ.get("HTTPS_PROXY", ""))
    print("Downloading Chromium (playwright build v" + revision + ")", flush=True)
    for percent in (10, 50, 100):
        print(f"|#####   | {percent:3d}% of 100 MiB", flush=True)
    if run_log:
        with open(run_log, "a") as log:
            log.write("end\\n")
""")

FAILING_INSTALLER = "import sys; print('Host system is missing dependencies'); sys.exit(3)"

# Carriage-return progress with no newline overruns the stream reader's line limit
OVERSIZED_INSTALLER = textwrap.dedent("""
    import sys, time
    sys.stdout.write("|##| 10% of 100 MiB\\r" * 6000)
    sys.stdout.flush()
    time.sleep(30)
""")


async def locate_fake_executable(install_dir: Path) -> str:
    return str(install_dir / f"chromium-{REVISION}" / "chrome-linux" / "chrome")


class TestParseProgress(unittest.TestCase):
    def test_playwright_progress_line(self):
        progress = parse_progress("|■■■■■■■■        |  50% of 150 MiB")
        self.assertEqual(progress.total_bytes, 150 * 1024 * 1024)
        self.assertEqual(progress.downloaded_bytes, 75 * 1024 * 1024)
        self.assertEqual(progress.percent, 50)
        self.assertEqual(progress.downloaded_megabytes, 75)
        self.assertEqual(progress.total_megabytes, 150)

    def test_decimal_size(self):
        progress = parse_progress("| 100% of 2.5 MiB")
        self.assertTrue(progress.is_complete)
        self.assertEqual(progress.total_bytes, int(2.5 * 1024 * 1024))

    def test_other_output_is_ignored(self):
        self.assertIsNone(parse_progress("Downloading Chromium 120.0 (playwright build v1091)"))
        self.assertIsNone(parse_progress(""))


class TestProgressThrottle(unittest.TestCase):
    def test_throttles_by_interval_but_always_emits_completion(self):
        now = [0.0]
        throttle = ProgressThrottle(1.0, clock=lambda: now[0])
        half = DownloadProgress(50, 100)

        self.assertTrue(throttle.should_emit(DownloadProgress(10, 100)))
        now[0] = 0.5
        self.assertFalse(throttle.should_emit(half))
        now[0] = 1.2
        self.assertTrue(throttle.should_emit(half))
        now[0] = 1.3
        self.assertTrue(throttle.should_emit(DownloadProgress(100, 100)))


class TestRevisions(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_read_pinned_revision(self):
        browsers_json = self.tmp / "browsers.json"
        browsers_json.write_text(json.dumps({
            "browsers": [
                {"name": "firefox", "revision": "1400"},
                {"name": "chromium", "revision": "1091", "installByDefault": True},
            ]
        }))
        self.assertEqual(read_pinned_revision(browsers_json), "1091")

    def test_read_pinned_revision_without_chromium(self):
        browsers_json = self.tmp / "browsers.json"
        browsers_json.write_text(json.dumps({"browsers": []}))
        with self.assertRaises(InstallError):
            read_pinned_revision(browsers_json)

    def test_local_revisions(self):
        for name in ("chromium-1000", "chromium_headless_shell-1000", "chromium-1091", "ffmpeg-1009"):
            (self.tmp / name).mkdir()
        (self.tmp / "chromium-2000").write_text("not a directory")

        self.assertEqual(local_revisions(self.tmp), {"1000", "1091"})
        self.assertEqual(local_revisions(self.tmp / "missing"), set())


class TestBrowserInstaller(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.storage_dir = self.tmp / "storage"
        self.host = FakeHost()
        self.config = FakeConfig()

    def tearDown(self):
        self._tmp.cleanup()

    def make_installer(self, command=None) -> BrowserInstaller:
        command = command or (sys.executable, "-c", FAKE_INSTALLER, REVISION)
        context = ExtensionContext(
            host=self.host,
            config=self.config,
            storage_dir=self.storage_dir,
            settings=ExportSettings(install_command=tuple(command), progress_interval=0.0),
        )
        resolver = ExecutableResolver(context, auto_detect=no_default_executable)
        installer = BrowserInstaller(
            context,
            resolver,
            revision=REVISION,
            executable_locator=locate_fake_executable,
        )
        resolver.installer = installer
        self.resolver = resolver
        return installer

    async def test_fresh_install_leaves_one_revision_and_resolves(self):
        installer = self.make_installer()

        path = await installer.install()

        self.assertEqual(local_revisions(self.storage_dir), {REVISION})
        self.assertTrue(Path(path).is_file())
        self.assertEqual(self.config.values["chrome.path"], path)
        self.assertEqual(await self.resolver.find_executable(), path)
        self.assertIn("Chromium installed.", self.host.infos)
        self.assertEqual(self.host.errors, [])

    async def test_old_revisions_are_removed(self):
        for name in ("chromium-1000", "chromium_headless_shell-1000", "chromium-999"):
            (self.storage_dir / name).mkdir(parents=True)

        await self.make_installer().install()

        self.assertEqual(local_revisions(self.storage_dir), {REVISION})
        self.assertFalse((self.storage_dir / "chromium_headless_shell-1000").exists())
        self.assertTrue((self.storage_dir / f"chromium_headless_shell-{REVISION}").exists())

    async def test_progress_is_reported_in_status_bar(self):
        await self.make_installer().install()

        messages = [status.message for status in self.host.statuses]
        self.assertEqual(messages[0], "Installing Chromium...")
        self.assertTrue(self.host.statuses[0].disposed)
        self.assertIn("Installing Chromium : 10% (10 MB / 100 MB)", messages)
        self.assertIn("Installing Chromium : 100% (100 MB / 100 MB)", messages)
        progress_status = self.host.statuses[-1]
        self.assertEqual(progress_status.timeout_ms, 1000)

    async def test_announces_install_directory(self):
        await self.make_installer().install()
        self.assertEqual(self.host.infos[0], f"Installing Chromium into '{self.storage_dir}'")

    async def test_proxy_applied_only_during_install(self):
        proxy_log = self.tmp / "proxy.txt"
        self.config.values["http.proxy"] = "http://proxy.local:3128"

        with patch.dict(os.environ, {"FAKE_PROXY_LOG": str(proxy_log)}):
            os.environ.pop("HTTPS_PROXY", None)
            os.environ.pop("HTTP_PROXY", None)
            await self.make_installer().install()
            self.assertNotIn("HTTPS_PROXY", os.environ)
            self.assertNotIn("HTTP_PROXY", os.environ)

        self.assertEqual(proxy_log.read_text(), "http://proxy.local:3128")

    async def test_failed_download_raises_and_reports(self):
        installer = self.make_installer(command=(sys.executable, "-c", FAILING_INSTALLER))

        with self.assertRaises(InstallError) as ctx:
            await installer.install()

        self.assertIn("exited with code 3", str(ctx.exception))
        self.assertIn("missing dependencies", str(ctx.exception))
        self.assertTrue(self.host.errors[-1].startswith("Failed to install Chromium:"))
        self.assertTrue(self.host.statuses[0].disposed)
        self.assertNotIn("chrome.path", self.config.values)

    async def test_unreadable_output_kills_installer_and_reports(self):
        installer = self.make_installer(command=(sys.executable, "-c", OVERSIZED_INSTALLER))

        started = time.monotonic()
        with self.assertRaises(InstallError):
            await installer.install()

        self.assertLess(time.monotonic() - started, 10)
        self.assertTrue(self.host.statuses[0].disposed)
        self.assertTrue(self.host.errors[-1].startswith("Failed to install Chromium:"))
        self.assertNotIn("chrome.path", self.config.values)

    async def test_status_disposed_when_persisting_fails(self):
        installer = self.make_installer()
        self.config.update = AsyncMock(side_effect=OSError("read-only settings"))

        with self.assertRaises(OSError):
            await installer.install()

        self.assertTrue(self.host.statuses[0].disposed)

    async def test_concurrent_installs_do_not_overlap(self):
        run_log = self.tmp / "runs.txt"
        installer = self.make_installer()

        with patch.dict(os.environ, {"FAKE_RUN_LOG": str(run_log)}):
            first, second = await asyncio.gather(installer.install(), installer.install())

        self.assertEqual(first, second)
        self.assertEqual(run_log.read_text().split(), ["start", "end", "start", "end"])
        self.assertEqual(local_revisions(self.storage_dir), {REVISION})

    async def test_missing_installer_command_raises_install_error(self):
        installer = self.make_installer(command=(str(self.tmp / "no-such-installer"),))

        with self.assertRaises(InstallError):
            await installer.install()
        self.assertTrue(self.host.errors[-1].startswith("Failed to install Chromium:"))

    async def test_unresolvable_executable_warns_but_returns_path(self):
        async def locate_missing(install_dir: Path) -> str:
            return str(install_dir / "nowhere" / "chrome")

        installer = self.make_installer()
        installer._executable_locator = locate_missing

        path = await installer.install()

        self.assertEqual(path, str(self.storage_dir / "nowhere" / "chrome"))
        self.assertIn("Install completed but couldn't find the executable.", self.host.errors)
        self.assertNotIn("Chromium installed.", self.host.infos)


if __name__ == "__main__":
    unittest.main()
