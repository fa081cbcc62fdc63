"""
markdown-export extension
Converts the active Markdown document to HTML or PDF
"""
from typing import Optional

from .application import ExportOrchestrator
from .handlers import CommandHandler
from .infrastructure.browser import BrowserInstaller, ExecutableResolver, PdfRenderer
from .infrastructure.converter import MarkdownConverter
from .log import logger
from .types import ExtensionContext


class MarkdownExportExtension:
    """Wires the export components for one host"""

    def __init__(self, context: ExtensionContext):
        self.context = context

        self.resolver = ExecutableResolver(context)
        self.installer = BrowserInstaller(context, self.resolver)
        self.resolver.installer = self.installer

        self.markdown_converter = MarkdownConverter()
        self.pdf_renderer = PdfRenderer(
            resolver=self.resolver,
            markdown_renderer=self.markdown_converter,
            settings=context.settings,
        )
        self.orchestrator = ExportOrchestrator(
            host=context.host,
            markdown_renderer=self.markdown_converter,
            pdf_renderer=self.pdf_renderer,
        )
        self._handler: Optional[CommandHandler] = None

    def activate(self) -> CommandHandler:
        """Build the command handler; the host registers ``handler.commands``"""
        if self._handler is None:
            self._handler = CommandHandler(self.orchestrator)
            logger.info('[MarkdownExport] Extension "markdown-export" is now active.')
        return self._handler

    def deactivate(self) -> None:
        self._handler = None
