"""
markdown-export
Export Markdown documents to sanitized HTML or A4 PDF
"""
from .main import MarkdownExportExtension
from .types import Document, ExportFormat, ExportSettings, ExtensionContext

__version__ = "1.0.0"

__all__ = [
    "MarkdownExportExtension",
    "Document",
    "ExportFormat",
    "ExportSettings",
    "ExtensionContext",
    "__version__",
]
