"""ControlPanel — session action buttons."""

from __future__ import annotations

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import QHBoxLayout, QPushButton, QVBoxLayout, QWidget


class ControlPanel(QWidget):
    """Buttons for session actions: reset, retry engine move, check engine."""

    reset_clicked = pyqtSignal()
    retry_clicked = pyqtSignal()
    check_engine_clicked = pyqtSignal()

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._setup_ui()
        self.set_retry_enabled(False)

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(6)

        btn_font = QFont()
        btn_font.setPointSize(10)

        self._btn_reset = QPushButton("Reset Board")
        self._btn_reset.setFont(btn_font)
        self._btn_reset.setMinimumHeight(36)
        self._btn_reset.clicked.connect(self.reset_clicked)
        layout.addWidget(self._btn_reset)

        row = QHBoxLayout()
        self._btn_retry = QPushButton("Retry Engine Move")
        self._btn_retry.setFont(btn_font)
        self._btn_retry.setMinimumHeight(36)
        self._btn_retry.clicked.connect(self.retry_clicked)
        row.addWidget(self._btn_retry)

        self._btn_check = QPushButton("Check Engine")
        self._btn_check.setFont(btn_font)
        self._btn_check.setMinimumHeight(36)
        self._btn_check.clicked.connect(self.check_engine_clicked)
        row.addWidget(self._btn_check)
        layout.addLayout(row)

    def set_retry_enabled(self, enabled: bool) -> None:
        self._btn_retry.setEnabled(enabled)

    def set_check_enabled(self, enabled: bool) -> None:
        self._btn_check.setEnabled(enabled)
