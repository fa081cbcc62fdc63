"""
Infrastructure layer - converter module
"""
from .markdown_converter import MarkdownConverter

__all__ = ["MarkdownConverter"]
