"""
Console host
Terminal implementation of the editor host used by the CLI
"""
import asyncio
import sys
from pathlib import Path
from typing import Optional, TextIO

from ...log import logger
from ...types import SETTINGS_SECTION, Document, InstallChoice


class ConsoleStatus:
    """Status line handle"""

    def __init__(self, stream: TextIO):
        self._stream = stream
        self.disposed = False

    def dispose(self) -> None:
        if not self.disposed:
            self.disposed = True
            self._stream.flush()


class ConsoleHost:
    """Editor host backed by stdin/stdout

    ``output`` answers the save dialog and ``assume_install`` answers the
    missing-Chromium prompt, so the CLI can run unattended.
    """

    def __init__(
        self,
        document_path: Path,
        settings_path: Optional[Path] = None,
        output: Optional[Path] = None,
        assume_install: bool = False,
        stream: Optional[TextIO] = None,
    ):
        self._document_path = Path(document_path)
        self._settings_path = settings_path
        self._output = output
        self._assume_install = assume_install
        self._stream = stream or sys.stdout

    def active_document(self) -> Optional[Document]:
        try:
            text = self._document_path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning(f"[MarkdownExport] Cannot read {self._document_path}: {e}")
            return None
        return Document(file_name=self._document_path.resolve(), text=text)

    async def show_info(self, message: str) -> None:
        self._write(message)

    async def show_error(self, message: str, *choices: str) -> Optional[str]:
        self._write(f"Error: {message}")
        if not choices:
            return None
        if self._assume_install and InstallChoice.INSTALL.value in choices:
            return InstallChoice.INSTALL.value

        for index, choice in enumerate(choices, start=1):
            self._write(f"  {index}) {choice}")
        answer = await self._ask("Choose an option: ")
        if answer is None:
            return None
        answer = answer.strip()
        if answer.isdigit() and 1 <= int(answer) <= len(choices):
            return choices[int(answer) - 1]
        return answer if answer in choices else None

    async def show_save_dialog(self, default_path: Path) -> Optional[Path]:
        if self._output is not None:
            return self._output
        answer = await self._ask(f"Save to [{default_path}]: ")
        if answer is None:
            return None
        answer = answer.strip()
        return Path(answer).expanduser() if answer else default_path

    def set_status(self, message: str, timeout_ms: Optional[int] = None) -> ConsoleStatus:
        self._write(message)
        return ConsoleStatus(self._stream)

    async def open_settings(self, key: str) -> None:
        where = self._settings_path or "your settings file"
        key = key.removeprefix(f"{SETTINGS_SECTION}.")
        self._write(f'Set "{key}" in {where} to the path of a Chromium executable.')

    async def _ask(self, prompt: str) -> Optional[str]:
        try:
            return await asyncio.to_thread(input, prompt)
        except EOFError:
            return None

    def _write(self, message: str) -> None:
        print(message, file=self._stream, flush=True)
