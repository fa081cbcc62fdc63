"""
Utility layer - decorators and environment helpers
"""

from .decorators import log_execution
from .environment import scoped_environ, proxy_environ
from .logging_config import setup_logging

__all__ = ["log_execution", "scoped_environ", "proxy_environ", "setup_logging"]
