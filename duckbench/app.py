"""Application bootstrap for the DuckBench GUI."""

import logging
import sys
from typing import List, Optional

from .settings import get_setting

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging; falls back to the log_level setting."""
    if level is None:
        level = get_setting("log_level") or "WARNING"
    numeric = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric, int):
        numeric = logging.WARNING
    logging.basicConfig(level=numeric, format=LOG_FORMAT)


def main(paths: Optional[List[str]] = None, log_level: Optional[str] = None) -> int:
    """Start the GUI and open the given database files."""
    configure_logging(log_level)

    from PyQt6.QtWidgets import QApplication
    from .qt import MainWindow

    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName("DuckBench")
    app.setOrganizationName("DuckBench")

    # Files named on the command line replace the previous session
    window = MainWindow(restore_session=not paths)
    window.show()
    if paths:
        window.open_files(paths)

    return app.exec()
