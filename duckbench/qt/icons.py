"""
Icons for DuckBench PyQt6 GUI.

Provides programmatically generated icons for documents, tables and
toolbar actions.
"""

from PyQt6.QtCore import Qt, QRect
from PyQt6.QtGui import QIcon, QPixmap, QPainter, QColor, QFont, QPen, QPainterPath


def get_file_icon(read_only: bool = False, size: int = 16) -> QIcon:
    """Get an icon for an open database file."""
    pixmap = QPixmap(size, size)
    pixmap.fill(Qt.GlobalColor.transparent)

    painter = QPainter(pixmap)
    painter.setRenderHint(QPainter.RenderHint.Antialiasing)

    # DuckDB yellow, dimmed for read-only documents
    color = QColor('#b8a23a' if read_only else '#fff000')

    painter.setBrush(color)
    painter.setPen(Qt.PenStyle.NoPen)
    painter.drawEllipse(1, 1, size - 2, size - 2)

    painter.setPen(QColor(0, 0, 0))
    font = QFont("Arial", size // 2, QFont.Weight.Bold)
    painter.setFont(font)
    painter.drawText(QRect(0, 0, size, size), Qt.AlignmentFlag.AlignCenter, 'D')

    painter.end()

    return QIcon(pixmap)


def get_table_icon(size: int = 16) -> QIcon:
    """Get an icon for a table in the table list."""
    pixmap = QPixmap(size, size)
    pixmap.fill(Qt.GlobalColor.transparent)

    painter = QPainter(pixmap)
    painter.setRenderHint(QPainter.RenderHint.Antialiasing)

    painter.setBrush(QColor('#cd853f'))
    painter.setPen(Qt.PenStyle.NoPen)
    painter.drawRoundedRect(1, 1, size - 2, size - 2, 3, 3)

    painter.setPen(QColor(255, 255, 255))
    font = QFont("Arial", size // 2 - 1, QFont.Weight.Bold)
    painter.setFont(font)
    painter.drawText(QRect(0, 0, size, size), Qt.AlignmentFlag.AlignCenter, 'T')

    painter.end()

    return QIcon(pixmap)


def make_icon(shape: str, color: str = "#ddd", size: int = 18) -> QIcon:
    """Create a simple painted toolbar icon."""
    pixmap = QPixmap(size, size)
    pixmap.fill(QColor(0, 0, 0, 0))
    p = QPainter(pixmap)
    p.setRenderHint(QPainter.RenderHint.Antialiasing)
    c = QColor(color)
    m = size  # shorthand

    if shape == "play":
        p.setBrush(c)
        p.setPen(Qt.PenStyle.NoPen)
        path = QPainterPath()
        path.moveTo(m * 0.2, m * 0.1)
        path.lineTo(m * 0.85, m * 0.5)
        path.lineTo(m * 0.2, m * 0.9)
        path.closeSubpath()
        p.drawPath(path)

    elif shape == "clear":
        pen = QPen(c, 2.0)
        p.setPen(pen)
        p.drawLine(int(m * 0.2), int(m * 0.2), int(m * 0.8), int(m * 0.8))
        p.drawLine(int(m * 0.8), int(m * 0.2), int(m * 0.2), int(m * 0.8))

    elif shape == "refresh":
        pen = QPen(c, 2.0)
        p.setPen(pen)
        p.drawArc(int(m * 0.15), int(m * 0.15), int(m * 0.7), int(m * 0.7), 90 * 16, 270 * 16)
        p.setBrush(c)
        p.setPen(Qt.PenStyle.NoPen)
        path = QPainterPath()
        path.moveTo(m * 0.5, m * 0.02)
        path.lineTo(m * 0.72, m * 0.15)
        path.lineTo(m * 0.5, m * 0.28)
        path.closeSubpath()
        p.drawPath(path)

    elif shape in ("chevron_left", "chevron_right"):
        pen = QPen(c, 2.0)
        p.setPen(pen)
        if shape == "chevron_left":
            p.drawLine(int(m * 0.65), int(m * 0.2), int(m * 0.35), int(m * 0.5))
            p.drawLine(int(m * 0.35), int(m * 0.5), int(m * 0.65), int(m * 0.8))
        else:
            p.drawLine(int(m * 0.35), int(m * 0.2), int(m * 0.65), int(m * 0.5))
            p.drawLine(int(m * 0.65), int(m * 0.5), int(m * 0.35), int(m * 0.8))

    p.end()
    return QIcon(pixmap)
