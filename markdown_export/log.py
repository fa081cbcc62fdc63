"""
Package-wide logger shared by every layer
"""
import logging

logger = logging.getLogger("markdown_export")
