"""
Domain layer - core interfaces and errors
"""

from .interfaces import (
    IStatusHandle,
    IEditorHost,
    IConfigStore,
    IExecutableResolver,
    IBrowserInstaller,
    IMarkdownRenderer,
    IPdfRenderer,
    IExportOrchestrator,
    ICommandHandler,
)
from .errors import (
    ErrorCode,
    ExportError,
    BrowserError,
    InstallError,
    RenderError,
    UnsupportedFormatError,
)

__all__ = [
    "IStatusHandle",
    "IEditorHost",
    "IConfigStore",
    "IExecutableResolver",
    "IBrowserInstaller",
    "IMarkdownRenderer",
    "IPdfRenderer",
    "IExportOrchestrator",
    "ICommandHandler",
    "ErrorCode",
    "ExportError",
    "BrowserError",
    "InstallError",
    "RenderError",
    "UnsupportedFormatError",
]
