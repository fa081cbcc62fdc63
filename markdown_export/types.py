"""
markdown-export type definitions
"""

import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .domain.interfaces import IConfigStore, IEditorHost

MEGABYTE = 1024 * 1024

CHROME_PATH_KEY = "chrome.path"
PROXY_KEY = "http.proxy"
SETTINGS_SECTION = "markdown-export"


class ExportFormat(Enum):
    """Output format"""

    HTML = "html"
    PDF = "pdf"

    @classmethod
    def parse(cls, value: "str | ExportFormat") -> "ExportFormat":
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


class InstallChoice(Enum):
    """Answer to the missing-Chromium prompt; values are the button labels"""

    INSTALL = "Install Chromium"
    CONFIGURE = "Configure Chromium Path"
    CANCEL = "Cancel"

    @classmethod
    def from_label(cls, label: str | None) -> "InstallChoice":
        """Map a host answer to a choice; dismissal counts as cancel"""
        if not label:
            return cls.CANCEL
        try:
            return cls(label)
        except ValueError:
            return cls.CANCEL


@dataclass(frozen=True)
class Document:
    """Document currently open in the host"""

    file_name: Path
    text: str


@dataclass(frozen=True)
class DownloadProgress:
    """One download progress event"""

    downloaded_bytes: int
    total_bytes: int

    @property
    def percent(self) -> int:
        if self.total_bytes <= 0:
            return 0
        return round(self.downloaded_bytes / self.total_bytes * 100)

    @property
    def downloaded_megabytes(self) -> int:
        return round(self.downloaded_bytes / MEGABYTE)

    @property
    def total_megabytes(self) -> int:
        return round(self.total_bytes / MEGABYTE)

    @property
    def is_complete(self) -> bool:
        return self.total_bytes > 0 and self.downloaded_bytes >= self.total_bytes


@dataclass(frozen=True)
class ExportSettings:
    """Export tunables (immutable)"""

    page_format: str = "A4"
    launch_args: tuple[str, ...] = ("--disable-gpu",)
    progress_interval: float = 1.0
    status_timeout_ms: int = 1000
    install_command: tuple[str, ...] = (
        sys.executable, "-m", "playwright", "install", "chromium",
    )


@dataclass
class ExtensionContext:
    """Process-wide state passed explicitly into the components"""

    host: "IEditorHost"
    config: "IConfigStore"
    storage_dir: Path
    settings: ExportSettings = field(default_factory=ExportSettings)
