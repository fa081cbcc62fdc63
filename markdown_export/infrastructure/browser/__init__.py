"""
Infrastructure layer - browser module
"""
from .executable_resolver import ExecutableResolver, detect_default_executable
from .browser_installer import BrowserInstaller, ProgressThrottle, parse_progress
from .pdf_renderer import PdfRenderer

__all__ = [
    "ExecutableResolver",
    "detect_default_executable",
    "BrowserInstaller",
    "ProgressThrottle",
    "parse_progress",
    "PdfRenderer",
]
