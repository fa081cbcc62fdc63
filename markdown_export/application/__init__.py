"""
Application layer
"""
from .export_orchestrator import ExportOrchestrator, default_output_path

__all__ = ["ExportOrchestrator", "default_output_path"]
