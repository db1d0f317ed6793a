"""Colour themes for the board and the engine log."""

from __future__ import annotations

from dataclasses import dataclass

from PyQt6.QtGui import QColor

from kibitzer.core.enums import LogKind


@dataclass
class BoardTheme:
    """Colour palette for the chessboard."""

    light_square: QColor
    dark_square: QColor
    piece_white: QColor
    piece_black: QColor
    highlight_from: QColor
    highlight_to: QColor
    highlight_check: QColor
    last_move: QColor
    coord_light: QColor
    coord_dark: QColor

    @classmethod
    def default(cls) -> BoardTheme:
        return cls(
            light_square=QColor(240, 217, 181),
            dark_square=QColor(181, 136, 99),
            piece_white=QColor(255, 255, 255),
            piece_black=QColor(20, 20, 20),
            highlight_from=QColor(255, 255, 0, 100),
            highlight_to=QColor(0, 0, 0, 40),
            highlight_check=QColor(255, 0, 0, 120),
            last_move=QColor(155, 199, 0, 105),
            coord_light=QColor(181, 136, 99),
            coord_dark=QColor(240, 217, 181),
        )


@dataclass(frozen=True)
class TerminalTheme:
    """Log panel palette."""

    background: QColor
    foreground: QColor
    kinds: dict[LogKind, QColor]
    scrollback: int = 1000

    @classmethod
    def default(cls) -> TerminalTheme:
        return cls(
            background=QColor("#1E1E1E"),
            foreground=QColor("#C0C0C0"),
            kinds={
                LogKind.WELCOME: QColor(0, 205, 205),  # cyan
                LogKind.ERROR: QColor(205, 49, 49),  # red
                LogKind.ENGINE: QColor(13, 188, 121),  # green
                LogKind.INFO: QColor(229, 229, 229),  # white
            },
        )

    def color_for(self, kind: LogKind) -> QColor:
        return self.kinds.get(kind, self.foreground)


# ── Application-wide QSS ────────────────────────────────────────────────────

APP_STYLE = """
QMainWindow {
    background: #2b2b2b;
}

QLabel {
    color: #e0e0e0;
}

QPlainTextEdit#logPanel {
    background: #1e1e1e;
    color: #c0c0c0;
    border: 1px solid #3c3c3c;
    selection-background-color: #264f78;
}

QPushButton {
    background: #3c3c3c;
    color: #e0e0e0;
    border: 1px solid #555;
    border-radius: 4px;
    padding: 6px 14px;
    font-size: 13px;
}
QPushButton:hover {
    background: #505050;
}
QPushButton:pressed {
    background: #264f78;
}
QPushButton:disabled {
    color: #666;
    background: #2b2b2b;
}

QStatusBar {
    color: #c0c0c0;
}

QMenuBar {
    background: #2b2b2b;
    color: #e0e0e0;
}
QMenuBar::item:selected {
    background: #3c3c3c;
}
QMenu {
    background: #2b2b2b;
    color: #e0e0e0;
    border: 1px solid #3c3c3c;
}
QMenu::item:selected {
    background: #264f78;
}
"""
