"""MainWindow — top-level window assembling all UI components."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from PyQt6.QtGui import QAction, QCloseEvent
from PyQt6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from kibitzer.core.enums import ControllerPhase, EngineReadiness
from kibitzer.net.push_channel import PushState
from kibitzer.session.controller import ControllerSnapshot
from kibitzer.session.game_session import GameSession
from kibitzer.ui.board.board_view import BoardView
from kibitzer.ui.panels.control_panel import ControlPanel
from kibitzer.ui.panels.log_panel import LogPanel

_LOGGER = logging.getLogger(__name__)

TCallback = TypeVar("TCallback", bound=Callable[..., None])

_PUSH_LABELS: dict[PushState, str] = {
    PushState.DISCONNECTED: "Log stream: offline",
    PushState.CONNECTING: "Log stream: connecting…",
    PushState.CONNECTED: "Log stream: live",
    PushState.RECONNECT_WAIT: "Log stream: reconnecting…",
    PushState.GAVE_UP: "Log stream: lost",
    PushState.CLOSED: "Log stream: closed",
}


def status_text(snapshot: ControllerSnapshot) -> str:
    """One-line description of the controller snapshot for the status bar."""
    state = snapshot.state
    if state.is_game_over:
        return f"Game over: {state.board().result()}"
    readiness = snapshot.readiness
    if readiness == EngineReadiness.UNKNOWN:
        return "Checking engine status…"
    if readiness != EngineReadiness.READY:
        return f"Engine {readiness.value}; moves are disabled"
    phase = snapshot.phase
    if phase == ControllerPhase.REQUESTING_ENGINE_MOVE:
        return "Engine is thinking…"
    if phase == ControllerPhase.APPLYING_ENGINE_RESULT:
        return "Applying engine move…"
    side = "White" if state.white_to_move else "Black"
    return f"Your move ({side} to play)"


class MainWindow(QMainWindow):
    """Main application window: board, engine log and session controls."""

    def __init__(self, session: GameSession) -> None:
        super().__init__()
        self.setWindowTitle("Kibitzer")
        self.setMinimumSize(900, 600)
        self.resize(1200, 720)

        self._session = session

        self._setup_ui()
        self._setup_menu()
        self._connect_signals()
        self._connect_session_events()

        self._on_state_changed(session.controller.snapshot)
        self._on_push_state_changed(session.push.state)

    # ── UI setup ─────────────────────────────────────────────────────────

    def _setup_ui(self) -> None:
        central = QWidget()
        self.setCentralWidget(central)
        root = QHBoxLayout(central)
        root.setContentsMargins(6, 6, 6, 6)
        root.setSpacing(6)

        # Board (left)
        self._board_view = BoardView()
        root.addWidget(self._board_view, stretch=3)

        # Log + controls (right)
        right = QVBoxLayout()
        right.setSpacing(6)

        self._log_panel = LogPanel(self._session.log)
        right.addWidget(self._log_panel, stretch=1)

        self._control_panel = ControlPanel()
        right.addWidget(self._control_panel)

        right_widget = QWidget()
        right_widget.setLayout(right)
        right_widget.setMinimumWidth(420)
        root.addWidget(right_widget, stretch=2)

        # Status bar
        self._status = QStatusBar()
        self.setStatusBar(self._status)
        self._status_label = QLabel()
        self._status.addWidget(self._status_label)
        self._push_label = QLabel()
        self._status.addPermanentWidget(self._push_label)

    def _setup_menu(self) -> None:
        menu_bar = self.menuBar()
        assert menu_bar is not None

        self._menu_game = menu_bar.addMenu("&Game")
        assert self._menu_game is not None

        self._act_reset = QAction("Reset Board", self)
        self._act_reset.setShortcut("Ctrl+R")
        self._act_reset.triggered.connect(self._on_reset)
        self._menu_game.addAction(self._act_reset)

        self._act_retry = QAction("Retry Engine Move", self)
        self._act_retry.setShortcut("Ctrl+E")
        self._act_retry.triggered.connect(self._on_retry)
        self._menu_game.addAction(self._act_retry)

        self._act_check = QAction("Check Engine", self)
        self._act_check.setShortcut("F5")
        self._act_check.triggered.connect(self._on_check_engine)
        self._menu_game.addAction(self._act_check)

        self._menu_game.addSeparator()

        self._act_flip = QAction("Flip Board", self)
        self._act_flip.setShortcut("F")
        self._act_flip.triggered.connect(self._on_flip)
        self._menu_game.addAction(self._act_flip)

        self._menu_game.addSeparator()

        self._act_quit = QAction("Quit", self)
        self._act_quit.setShortcut("Ctrl+Q")
        self._act_quit.triggered.connect(self.close)
        self._menu_game.addAction(self._act_quit)

        self._menu_log = menu_bar.addMenu("&Log")
        assert self._menu_log is not None

        # The log panel handles Ctrl+L itself while focused.
        self._act_clear_logs = QAction("Clear Logs", self)
        self._act_clear_logs.triggered.connect(self._on_clear_logs)
        self._menu_log.addAction(self._act_clear_logs)

    # ── Signal wiring ────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        """Connect Qt widget signals."""
        self._board_view.move_intent.connect(self._on_move_intent)
        self._log_panel.clear_requested.connect(self._on_clear_logs)
        self._control_panel.reset_clicked.connect(self._on_reset)
        self._control_panel.retry_clicked.connect(self._on_retry)
        self._control_panel.check_engine_clicked.connect(self._on_check_engine)
        self._session.push.state_changed.connect(self._on_push_state_changed)

    def _connect_session_events(self) -> None:
        """Subscribe to controller callbacks (idempotent)."""
        events = self._session.controller.events
        self._replace_callback(events.on_state_changed, self._on_state_changed)

    def _disconnect_session_events(self) -> None:
        events = self._session.controller.events
        self._remove_callback(events.on_state_changed, self._on_state_changed)

    @staticmethod
    def _replace_callback(callbacks: list[TCallback], callback: TCallback) -> None:
        callbacks[:] = [cb for cb in callbacks if cb != callback]
        callbacks.append(callback)

    @staticmethod
    def _remove_callback(callbacks: list[TCallback], callback: TCallback) -> None:
        callbacks[:] = [cb for cb in callbacks if cb != callback]

    # ── Intents ──────────────────────────────────────────────────────────

    def _on_move_intent(self, source: str, target: str) -> None:
        if not self._session.controller.submit_player_move(source, target):
            _LOGGER.debug("Move %s-%s rejected", source, target)

    def _on_reset(self) -> None:
        self._session.controller.reset()

    def _on_retry(self) -> None:
        self._session.controller.retry_engine_move()

    def _on_check_engine(self) -> None:
        self._session.probe.probe()
        self._control_panel.set_check_enabled(False)
        self._act_check.setEnabled(False)

    def _on_clear_logs(self) -> None:
        self._session.clear_logs()

    def _on_flip(self) -> None:
        scene = self._board_view.board_scene
        scene.set_flipped(not scene.is_flipped())

    # ── Session callbacks ────────────────────────────────────────────────

    def _on_state_changed(self, snapshot: ControllerSnapshot) -> None:
        scene = self._board_view.board_scene
        scene.set_state(snapshot.state)
        scene.set_interactive(snapshot.accepts_player_moves)

        can_retry = self._session.controller.can_retry
        self._control_panel.set_retry_enabled(can_retry)
        self._act_retry.setEnabled(can_retry)

        probing = self._session.probe.is_pending
        self._control_panel.set_check_enabled(not probing)
        self._act_check.setEnabled(not probing)

        self._status_label.setText(status_text(snapshot))

    def _on_push_state_changed(self, state: PushState) -> None:
        self._push_label.setText(_PUSH_LABELS.get(state, ""))

    # ── Lifecycle ────────────────────────────────────────────────────────

    def closeEvent(self, event: QCloseEvent | None) -> None:
        self._disconnect_session_events()
        self._log_panel.unbind()
        self._session.shutdown()
        super().closeEvent(event)
