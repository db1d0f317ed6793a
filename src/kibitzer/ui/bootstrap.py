"""Qt application bootstrap helpers."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from kibitzer.config import ClientSettings

if TYPE_CHECKING:
    from PyQt6.QtWidgets import QApplication

_LOGGER = logging.getLogger(__name__)


def _configure_application(app: QApplication) -> None:
    """Apply app-wide settings and theme."""
    from kibitzer.ui.styles.theme import APP_STYLE

    app.setApplicationName("Kibitzer")
    app.setStyle("Fusion")
    app.setStyleSheet(APP_STYLE)


def run_application(
    settings: ClientSettings, argv: list[str] | None = None
) -> int:
    """Create the session and main window, then run the Qt event loop."""
    from PyQt6.QtWidgets import QApplication

    from kibitzer.session.game_session import GameSession
    from kibitzer.ui.main_window import MainWindow

    app = QApplication(sys.argv if argv is None else argv)
    _configure_application(app)

    session = GameSession(settings, parent=app)
    window = MainWindow(session)
    window.show()
    session.start()

    _LOGGER.debug("Entering Qt event loop")
    return app.exec()
