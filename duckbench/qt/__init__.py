"""
DuckBench PyQt6 GUI Module

Desktop workbench for browsing and querying DuckDB database files.
"""

from .main_window import MainWindow

__all__ = ["MainWindow"]
