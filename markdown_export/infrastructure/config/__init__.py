"""
Infrastructure layer - configuration module
"""
from .json_config_store import JsonConfigStore

__all__ = ["JsonConfigStore"]
