"""Version information for DuckBench."""

__version__ = "0.1.0"
