"""
Export orchestrator
Orchestrates a complete export of the active document
"""
import asyncio
import traceback
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from ..domain.errors import UnsupportedFormatError
from ..log import logger
from ..types import ExportFormat
from ..utils.decorators import log_execution

if TYPE_CHECKING:
    from ..domain.interfaces import IEditorHost, IMarkdownRenderer, IPdfRenderer


def default_output_path(source: Path, fmt: ExportFormat) -> Path:
    """``notes.md`` -> ``notes.pdf``; other names keep their suffix (``notes.txt.pdf``)"""
    if source.suffix == ".md":
        name = f"{source.stem}.{fmt.value}"
    else:
        name = f"{source.name}.{fmt.value}"
    return source.with_name(name)


class ExportOrchestrator:
    """
    Export orchestrator

    Pipeline:
    document ──► markdown renderer ──► (html) ──► save
                                  └──► pdf renderer ──► save
    """

    def __init__(
        self,
        host: "IEditorHost",
        markdown_renderer: "IMarkdownRenderer",
        pdf_renderer: "IPdfRenderer",
    ):
        self._host = host
        self._markdown_renderer = markdown_renderer
        self._pdf_renderer = pdf_renderer

    @log_execution
    async def export(self, fmt: Union[str, ExportFormat]) -> Optional[Path]:
        """Export the active document; errors are reported, never raised

        Returns:
            The written path, or None if nothing was written
        """
        try:
            document = self._host.active_document()
            if document is None:
                await self._host.show_error("No active editor; cannot find file to export")
                return None

            try:
                out_format = ExportFormat.parse(fmt)
            except ValueError:
                raise UnsupportedFormatError(str(fmt)) from None

            default_path = default_output_path(Path(document.file_name), out_format)
            logger.info(
                f"[MarkdownExport] Exporting {document.file_name} as {out_format.value}, "
                f"{len(document.text)} chars"
            )

            if out_format is ExportFormat.HTML:
                content = self._markdown_renderer.render_html(document.text)
            else:
                content = await self._pdf_renderer.render_pdf(document.text)
                if not content:
                    return None

            return await self.save(content, default_path)

        except Exception as e:
            logger.error(f"[MarkdownExport] Export failed: {type(e).__name__}: {e}")
            logger.error(f"[MarkdownExport] Traceback:\n{traceback.format_exc()}")
            await self._host.show_error(f"Error saving file; {e}")
            return None

    async def save(self, content: Union[str, bytes], default_path: Path) -> Optional[Path]:
        """Ask for a location and write the content

        Returns:
            The written path, or None if the user cancelled
        """
        save_path = await self._host.show_save_dialog(default_path)
        if not save_path:
            logger.info("[MarkdownExport] Save cancelled")
            return None
        if isinstance(content, str):
            content = content.encode("utf-8")

        save_path = Path(save_path)
        await asyncio.to_thread(save_path.write_bytes, content)
        logger.info(f"[MarkdownExport] Wrote {len(content)} bytes to {save_path}")
        await self._host.show_info(f"File saved to {save_path}")
        return save_path
