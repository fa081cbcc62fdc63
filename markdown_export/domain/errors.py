"""
Domain layer - error types
"""

from enum import Enum


class ErrorCode(Enum):
    """Error codes"""

    BROWSER_LAUNCH_FAILED = "BROWSER_LAUNCH_FAILED"
    INSTALL_FAILED = "INSTALL_FAILED"
    RENDER_FAILED = "RENDER_FAILED"
    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"


class ExportError(Exception):
    """Base class for export errors"""

    def __init__(self, message: str, code: ErrorCode = None):
        super().__init__(message)
        self.code = code


class BrowserError(ExportError):
    """Browser could not be launched"""

    def __init__(self, message: str):
        super().__init__(message, code=ErrorCode.BROWSER_LAUNCH_FAILED)


class InstallError(ExportError):
    """Chromium download failed"""

    def __init__(self, message: str, revision: str = ""):
        super().__init__(message, code=ErrorCode.INSTALL_FAILED)
        self.revision = revision


class RenderError(ExportError):
    """Page rendering or PDF export failed"""

    def __init__(self, message: str):
        super().__init__(message, code=ErrorCode.RENDER_FAILED)


class UnsupportedFormatError(ExportError):
    """Requested output format is not supported"""

    def __init__(self, fmt: str):
        super().__init__(f"Unsupported export format: {fmt}", code=ErrorCode.UNSUPPORTED_FORMAT)
        self.format = fmt
