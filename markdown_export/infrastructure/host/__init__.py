"""
Infrastructure layer - host module
"""
from .console_host import ConsoleHost, ConsoleStatus

__all__ = ["ConsoleHost", "ConsoleStatus"]
