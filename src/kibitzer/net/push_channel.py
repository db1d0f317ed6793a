"""Socket.IO engine log stream, bridged into Qt signals.

A :class:`PushWorker` owns the ``socketio.Client`` and runs on its own
``QThread``; the client's event handlers re-emit as Qt signals, which reach
:class:`PushChannel` queued on the GUI thread.  The channel keeps the
connection state and the reconnection budget: lost or failed connections are
retried a bounded number of times with a fixed delay, and a successful
connect refills the budget.
"""

from __future__ import annotations

import logging
from enum import IntEnum, auto
from typing import Any, Protocol

import socketio
from PyQt6.QtCore import QObject, QThread, QTimer, pyqtSignal, pyqtSlot

from kibitzer.config import ClientSettings

_LOGGER = logging.getLogger(__name__)

WELCOME_EVENT = "welcomeMessage"
RAW_LOG_EVENT = "rawEngineLog"


class PushState(IntEnum):
    DISCONNECTED = auto()
    CONNECTING = auto()
    CONNECTED = auto()
    RECONNECT_WAIT = auto()
    GAVE_UP = auto()
    CLOSED = auto()


class PushWorker(QObject):
    """Thread-affine owner of the Socket.IO client.

    Reconnection is left to :class:`PushChannel`, so the client is built with
    ``reconnection=False`` and every connect attempt goes through
    :meth:`open_connection`.
    """

    connected = pyqtSignal()
    connection_lost = pyqtSignal(str)
    connect_failed = pyqtSignal(str)
    welcome_received = pyqtSignal(str, str)
    raw_log_received = pyqtSignal(str)

    __slots__ = ("_client", "_origin", "_path", "_wait_timeout_s")

    def __init__(
        self,
        settings: ClientSettings,
        client: socketio.Client | None = None,
    ) -> None:
        super().__init__()
        self._origin = settings.push_origin
        self._path = settings.push_path
        self._wait_timeout_s = settings.request_timeout_ms / 1000
        if client is None:
            client = socketio.Client(reconnection=False, logger=False)
        self._client = client
        client.on("connect", self._on_connect)
        client.on("disconnect", self._on_disconnect)
        client.on(WELCOME_EVENT, self._on_welcome)
        client.on(RAW_LOG_EVENT, self._on_raw_log)

    @pyqtSlot()
    def open_connection(self) -> None:
        """Connect and wait for the namespace handshake (blocking)."""
        _LOGGER.debug("Opening push channel %s/%s", self._origin, self._path)
        try:
            self._client.connect(
                self._origin,
                transports=["websocket"],
                socketio_path=self._path,
                wait_timeout=self._wait_timeout_s,
            )
        except socketio.exceptions.ConnectionError as exc:
            self.connect_failed.emit(str(exc) or "connection refused")

    @pyqtSlot()
    def close_connection(self) -> None:
        self._client.disconnect()

    # ── Client event handlers (client threads) ───────────────────────────

    def _on_connect(self) -> None:
        self.connected.emit()

    def _on_disconnect(self, *args: Any) -> None:
        # Newer clients pass a reason; older ones pass nothing.
        reason = str(args[0]) if args else "connection lost"
        self.connection_lost.emit(reason)

    def _on_welcome(self, payload: Any = None) -> None:
        if not isinstance(payload, dict):
            _LOGGER.warning("Dropping welcomeMessage without an object payload")
            return
        self.welcome_received.emit(
            str(payload.get("ascii", "")), str(payload.get("description", ""))
        )

    def _on_raw_log(self, line: Any = None) -> None:
        if line is None:
            return
        self.raw_log_received.emit(line if isinstance(line, str) else str(line))


class PushTransport(Protocol):
    """Subset of :class:`PushWorker` the channel drives."""

    connected: Any
    connection_lost: Any
    connect_failed: Any
    welcome_received: Any
    raw_log_received: Any

    def open_connection(self) -> None: ...

    def close_connection(self) -> None: ...


class _PushCommandBus(QObject):
    """Signal bridge for issuing worker commands with queued delivery."""

    open_requested = pyqtSignal()
    close_requested = pyqtSignal()


class PushChannel(QObject):
    """Server-initiated event stream.

    Signals:
        welcome_received(str, str): ascii art, description.
        raw_log_received(str): one raw engine log line.
        state_changed(PushState): connection state transitions.
        gave_up(int): reconnection budget exhausted after N attempts.
    """

    welcome_received = pyqtSignal(str, str)
    raw_log_received = pyqtSignal(str)
    state_changed = pyqtSignal(object)
    gave_up = pyqtSignal(int)

    def __init__(
        self,
        settings: ClientSettings,
        parent: QObject | None = None,
        transport: PushTransport | None = None,
    ) -> None:
        super().__init__(parent)
        self._settings = settings
        self._state = PushState.DISCONNECTED
        self._attempts = 0
        self._closing = False

        self._thread: QThread | None = None
        if transport is None:
            transport = PushWorker(settings)
            self._thread = QThread(self)
            transport.moveToThread(self._thread)
        self._transport = transport

        self._commands = _PushCommandBus(self)
        self._commands.open_requested.connect(transport.open_connection)
        self._commands.close_requested.connect(transport.close_connection)
        transport.connected.connect(self._on_connected)
        transport.connection_lost.connect(self._on_connection_lost)
        transport.connect_failed.connect(self._on_connection_lost)
        transport.welcome_received.connect(self.welcome_received)
        transport.raw_log_received.connect(self.raw_log_received)

        self._reconnect_timer = QTimer(self)
        self._reconnect_timer.setSingleShot(True)
        self._reconnect_timer.timeout.connect(self._open_socket)

    @property
    def state(self) -> PushState:
        return self._state

    @property
    def attempts(self) -> int:
        """Reconnection attempts made since the last successful connect."""
        return self._attempts

    def open(self) -> None:
        """Start connecting (no-op when already connecting/connected)."""
        if self._state in (PushState.CONNECTING, PushState.CONNECTED):
            return
        self._closing = False
        self._attempts = 0
        if self._thread is not None and not self._thread.isRunning():
            self._thread.start()
        self._open_socket()

    def close(self) -> None:
        """Disconnect for good; no reconnection afterwards."""
        self._closing = True
        self._reconnect_timer.stop()
        self._set_state(PushState.CLOSED)
        self._commands.close_requested.emit()
        if self._thread is not None and self._thread.isRunning():
            self._thread.quit()
            self._thread.wait(2000)

    # ── Transport callbacks ──────────────────────────────────────────────

    def _open_socket(self) -> None:
        if self._closing:
            return
        self._set_state(PushState.CONNECTING)
        self._commands.open_requested.emit()

    def _on_connected(self) -> None:
        if self._closing:
            return
        self._attempts = 0
        self._set_state(PushState.CONNECTED)

    def _on_connection_lost(self, reason: str) -> None:
        if self._closing or self._state not in (
            PushState.CONNECTING,
            PushState.CONNECTED,
        ):
            return
        if self._attempts >= self._settings.reconnection_attempts:
            _LOGGER.warning(
                "Push channel lost (%s); giving up after %d attempts",
                reason,
                self._attempts,
            )
            self._set_state(PushState.GAVE_UP)
            self.gave_up.emit(self._attempts)
            return
        self._attempts += 1
        _LOGGER.info(
            "Push channel lost (%s); reconnect %d/%d in %d ms",
            reason,
            self._attempts,
            self._settings.reconnection_attempts,
            self._settings.reconnection_delay_ms,
        )
        self._set_state(PushState.RECONNECT_WAIT)
        self._reconnect_timer.start(self._settings.reconnection_delay_ms)

    def _set_state(self, state: PushState) -> None:
        if state == self._state:
            return
        self._state = state
        self.state_changed.emit(state)
