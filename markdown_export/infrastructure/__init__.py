"""
Infrastructure layer
"""
from .browser import (
    ExecutableResolver,
    BrowserInstaller,
    PdfRenderer,
)
from .converter import MarkdownConverter
from .config import JsonConfigStore
from .host import ConsoleHost

__all__ = [
    "ExecutableResolver",
    "BrowserInstaller",
    "PdfRenderer",
    "MarkdownConverter",
    "JsonConfigStore",
    "ConsoleHost",
]
