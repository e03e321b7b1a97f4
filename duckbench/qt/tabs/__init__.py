"""
Tab widgets for DuckBench PyQt6 GUI.
"""

from .database_tab import DatabaseTab

__all__ = ["DatabaseTab"]
