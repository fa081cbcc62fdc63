"""
Command-line interface for markdown-export
"""

import argparse
import asyncio
import os
from pathlib import Path
from typing import Optional

from . import __version__
from .infrastructure.config import JsonConfigStore
from .infrastructure.host import ConsoleHost
from .main import MarkdownExportExtension
from .handlers import COMMAND_PREFIX
from .types import ExportFormat, ExtensionContext
from .utils.logging_config import setup_logging

HOME_ENV = "MARKDOWN_EXPORT_HOME"


def default_config_path() -> Path:
    home = os.environ.get(HOME_ENV)
    if home:
        return Path(home) / "settings.json"
    return Path.home() / ".config" / "markdown-export" / "settings.json"


def default_storage_dir() -> Path:
    home = os.environ.get(HOME_ENV)
    if home:
        return Path(home) / "chromium"
    return Path.home() / ".local" / "share" / "markdown-export"


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="markdown-export",
        description=f"markdown-export v{__version__}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  markdown-export html README.md                 Export to README.html (asks where to save)
  markdown-export pdf README.md -o out.pdf       Export to out.pdf
  markdown-export pdf README.md -o out.pdf --yes Download Chromium if missing
        """,
    )
    parser.add_argument("--version", "-v", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "format",
        choices=[fmt.value for fmt in ExportFormat],
        help="Output format",
    )
    parser.add_argument("file", type=Path, help="Markdown file to export")
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Where to save (default: ask, suggesting <name>.<format>)",
    )
    parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Install Chromium without asking when none is found",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Settings file (default: {default_config_path()})",
    )
    parser.add_argument(
        "--storage-dir",
        type=Path,
        default=None,
        help=f"Chromium install directory (default: {default_storage_dir()})",
    )
    parser.add_argument("--debug", "-d", action="store_true", help="Verbose logging")
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write a rotating debug log to this file",
    )
    return parser.parse_args(argv)


def build_extension(args: argparse.Namespace) -> MarkdownExportExtension:
    config_path = args.config or default_config_path()
    host = ConsoleHost(
        document_path=args.file,
        settings_path=config_path,
        output=args.output,
        assume_install=args.yes,
    )
    context = ExtensionContext(
        host=host,
        config=JsonConfigStore(config_path),
        storage_dir=args.storage_dir or default_storage_dir(),
    )
    return MarkdownExportExtension(context)


async def run(args: argparse.Namespace) -> Optional[Path]:
    """Run one export; returns the written file, or None"""
    extension = build_extension(args)
    handler = extension.activate()
    try:
        return await handler.handle_command(f"{COMMAND_PREFIX}{args.format}")
    finally:
        extension.deactivate()


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point; exits 1 when no file was written."""
    args = parse_args(argv)
    setup_logging(debug_mode=args.debug, log_file=args.log_file)
    written = asyncio.run(run(args))
    return 0 if written else 1


if __name__ == "__main__":
    raise SystemExit(main())
