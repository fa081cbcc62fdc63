"""
Domain layer - core interfaces
Components depend on these protocols, never on a concrete editor
"""

from pathlib import Path
from typing import Any, Optional, Protocol, runtime_checkable

from ..types import Document, ExportFormat


@runtime_checkable
class IStatusHandle(Protocol):
    """Handle of a status bar message"""

    def dispose(self) -> None:
        """Remove the message"""
        ...


@runtime_checkable
class IEditorHost(Protocol):
    """Editor services used by the exporter"""

    def active_document(self) -> Optional[Document]:
        """Return the active document, or None"""
        ...

    async def show_info(self, message: str) -> None:
        """Show an informational message"""
        ...

    async def show_error(self, message: str, *choices: str) -> Optional[str]:
        """Show an error message

        Returns:
            The chosen button label, or None if dismissed
        """
        ...

    async def show_save_dialog(self, default_path: Path) -> Optional[Path]:
        """Ask where to save; None when cancelled"""
        ...

    def set_status(self, message: str, timeout_ms: Optional[int] = None) -> IStatusHandle:
        """Show a status message, optionally for a limited time"""
        ...

    async def open_settings(self, key: str) -> None:
        """Open the settings editor at a key"""
        ...


@runtime_checkable
class IConfigStore(Protocol):
    """String-keyed configuration store"""

    def get(self, key: str, default: Any = None) -> Any:
        ...

    async def update(self, key: str, value: Any) -> None:
        ...


@runtime_checkable
class IExecutableResolver(Protocol):
    """Chromium executable resolver"""

    async def find_executable(self) -> Optional[str]:
        """Locate an executable without user interaction"""
        ...

    async def resolve_or_prompt(self) -> Optional[str]:
        """Locate an executable, offering an install when missing"""
        ...


@runtime_checkable
class IBrowserInstaller(Protocol):
    """Chromium installer"""

    async def install(self) -> str:
        """Download Chromium and return the executable path"""
        ...


@runtime_checkable
class IMarkdownRenderer(Protocol):
    """Markdown to sanitized HTML"""

    def render_html(self, markdown_text: str) -> str:
        ...


@runtime_checkable
class IPdfRenderer(Protocol):
    """Markdown to PDF"""

    async def render_pdf(self, markdown_text: str) -> Optional[bytes]:
        """Render a PDF, or None when no browser could be obtained"""
        ...


@runtime_checkable
class IExportOrchestrator(Protocol):
    """Export orchestrator"""

    async def export(self, fmt: "str | ExportFormat") -> Optional[Path]:
        """Written path, or None when nothing was written"""
        ...


@runtime_checkable
class ICommandHandler(Protocol):
    """Command handler"""

    async def handle_command(self, command: str) -> Optional[Path]:
        """Run a command by id"""
        ...
