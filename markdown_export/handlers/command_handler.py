"""
Command handler
Handles the markdown-export.to.html and markdown-export.to.pdf commands
"""

from pathlib import Path
from typing import TYPE_CHECKING, Awaitable, Callable, Optional

from ..log import logger
from ..types import ExportFormat

if TYPE_CHECKING:
    from ..domain.interfaces import IExportOrchestrator

COMMAND_PREFIX = "markdown-export.to."


class CommandHandler:
    """Command handler"""

    def __init__(self, orchestrator: "IExportOrchestrator"):
        self._orchestrator = orchestrator
        self._commands: dict[str, Callable[[], Awaitable[Optional[Path]]]] = {
            f"{COMMAND_PREFIX}{fmt.value}": self._exporter(fmt) for fmt in ExportFormat
        }

    @property
    def commands(self) -> dict[str, Callable[[], Awaitable[Optional[Path]]]]:
        """Command id -> zero-argument callback, for registration with the host"""
        return dict(self._commands)

    async def handle_command(self, command: str) -> Optional[Path]:
        """Run a command by id; returns the exported file, if any"""
        callback = self._commands.get(command)
        if callback is None:
            logger.warning(f"[MarkdownExport] Unknown command: {command}")
            return None
        return await callback()

    def _exporter(self, fmt: ExportFormat) -> Callable[[], Awaitable[Optional[Path]]]:
        async def run() -> Optional[Path]:
            logger.info(f"[MarkdownExport] Command {COMMAND_PREFIX}{fmt.value}")
            return await self._orchestrator.export(fmt)

        return run
