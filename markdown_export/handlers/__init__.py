"""
Command handler layer
"""

from .command_handler import CommandHandler, COMMAND_PREFIX

__all__ = ["CommandHandler", "COMMAND_PREFIX"]
