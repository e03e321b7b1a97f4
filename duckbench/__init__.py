"""DuckBench - DuckDB file workbench."""

from .version import __version__

__all__ = ["__version__"]
