"""Tests for PushChannel and its Socket.IO worker."""

from __future__ import annotations

import logging
from typing import Any

import pytest
import socketio
from PyQt6.QtCore import QObject, pyqtSignal
from PyQt6.QtTest import QSignalSpy, QTest

from kibitzer.config import ClientSettings
from kibitzer.net.push_channel import PushChannel, PushState, PushWorker

_SETTINGS = ClientSettings(backend_url="https://engine.example:8443/chess/")


class _StubClient:
    """Records what the worker asks of a ``socketio.Client``."""

    def __init__(self, error: Exception | None = None) -> None:
        self.handlers: dict[str, Any] = {}
        self.connects: list[tuple[str, dict[str, Any]]] = []
        self.disconnects = 0
        self.error = error

    def on(self, event: str, handler: Any = None, namespace: Any = None) -> None:
        self.handlers[event] = handler

    def connect(self, url: str, **kwargs: Any) -> None:
        self.connects.append((url, kwargs))
        if self.error is not None:
            raise self.error

    def disconnect(self) -> None:
        self.disconnects += 1


class _StubTransport(QObject):
    connected = pyqtSignal()
    connection_lost = pyqtSignal(str)
    connect_failed = pyqtSignal(str)
    welcome_received = pyqtSignal(str, str)
    raw_log_received = pyqtSignal(str)

    def __init__(self) -> None:
        super().__init__()
        self.opened = 0
        self.closed = 0

    def open_connection(self) -> None:
        self.opened += 1

    def close_connection(self) -> None:
        self.closed += 1


def _make_worker(
    qapp: object, client: _StubClient | None = None
) -> tuple[PushWorker, _StubClient]:
    del qapp
    client = client or _StubClient()
    worker = PushWorker(_SETTINGS, client=client)  # type: ignore[arg-type]
    return worker, client


def _make_channel(
    qapp: object, **settings: object
) -> tuple[PushChannel, _StubTransport]:
    del qapp
    transport = _StubTransport()
    channel = PushChannel(
        ClientSettings(**settings),  # type: ignore[arg-type]
        transport=transport,
    )
    return channel, transport


def _connect(channel: PushChannel, transport: _StubTransport) -> None:
    channel.open()
    transport.connected.emit()


class TestPushWorker:
    def test_default_client_leaves_reconnection_to_channel(
        self, qapp: object
    ) -> None:
        del qapp
        worker = PushWorker(_SETTINGS)
        assert isinstance(worker._client, socketio.Client)
        assert worker._client.reconnection is False

    def test_connect_uses_websocket_and_path_prefix(self, qapp: object) -> None:
        worker, client = _make_worker(qapp)

        worker.open_connection()

        (url, kwargs) = client.connects[0]
        assert url == "https://engine.example:8443"
        assert kwargs["transports"] == ["websocket"]
        assert kwargs["socketio_path"] == "chess/socket.io"
        assert kwargs["wait_timeout"] == 15.0

    def test_refused_connect_is_signalled(self, qapp: object) -> None:
        error = socketio.exceptions.ConnectionError("Connection refused")
        worker, _client = _make_worker(qapp, _StubClient(error))
        failed = QSignalSpy(worker.connect_failed)

        worker.open_connection()

        assert failed[0] == ["Connection refused"]

    def test_connect_and_disconnect_events(self, qapp: object) -> None:
        worker, client = _make_worker(qapp)
        connected = QSignalSpy(worker.connected)
        lost = QSignalSpy(worker.connection_lost)

        client.handlers["connect"]()
        client.handlers["disconnect"]()
        client.handlers["disconnect"]("ping timeout")

        assert len(connected) == 1
        assert [args[0] for args in lost] == ["connection lost", "ping timeout"]

    def test_welcome_message(self, qapp: object) -> None:
        worker, client = _make_worker(qapp)
        welcome = QSignalSpy(worker.welcome_received)

        client.handlers["welcomeMessage"](
            {"ascii": "  _\n (_)", "description": "Engine v2"}
        )

        assert welcome[0] == ["  _\n (_)", "Engine v2"]

    def test_malformed_welcome_is_dropped(
        self, qapp: object, caplog: pytest.LogCaptureFixture
    ) -> None:
        worker, client = _make_worker(qapp)
        welcome = QSignalSpy(worker.welcome_received)

        with caplog.at_level(logging.WARNING, logger="kibitzer.net.push_channel"):
            client.handlers["welcomeMessage"]("not an object")

        assert len(welcome) == 0
        assert len(caplog.records) == 1

    def test_raw_engine_log(self, qapp: object) -> None:
        worker, client = _make_worker(qapp)
        lines = QSignalSpy(worker.raw_log_received)

        client.handlers["rawEngineLog"]("info depth 10")
        client.handlers["rawEngineLog"](None)
        client.handlers["rawEngineLog"](12)

        assert [args[0] for args in lines] == ["info depth 10", "12"]

    def test_close_disconnects_client(self, qapp: object) -> None:
        worker, client = _make_worker(qapp)
        worker.close_connection()
        assert client.disconnects == 1


class TestPushChannel:
    def test_open_asks_transport_to_connect(self, qapp: object) -> None:
        channel, transport = _make_channel(qapp)
        channel.open()
        assert channel.state == PushState.CONNECTING
        assert transport.opened == 1

    def test_open_twice_does_not_reconnect(self, qapp: object) -> None:
        channel, transport = _make_channel(qapp)
        channel.open()
        channel.open()
        assert transport.opened == 1

    def test_state_changes_are_signalled(self, qapp: object) -> None:
        channel, transport = _make_channel(qapp)
        states = QSignalSpy(channel.state_changed)
        _connect(channel, transport)
        assert [args[0] for args in states] == [
            PushState.CONNECTING,
            PushState.CONNECTED,
        ]

    def test_events_are_forwarded(self, qapp: object) -> None:
        channel, transport = _make_channel(qapp)
        welcome = QSignalSpy(channel.welcome_received)
        lines = QSignalSpy(channel.raw_log_received)
        _connect(channel, transport)

        transport.welcome_received.emit("art", "desc")
        transport.raw_log_received.emit("uciok")

        assert welcome[0] == ["art", "desc"]
        assert lines[0] == ["uciok"]


class TestReconnection:
    def test_lost_connection_schedules_reconnect(self, qapp: object) -> None:
        channel, transport = _make_channel(qapp)
        _connect(channel, transport)

        transport.connection_lost.emit("ping timeout")

        assert channel.state == PushState.RECONNECT_WAIT
        assert channel.attempts == 1
        assert channel._reconnect_timer.isActive()
        assert channel._reconnect_timer.interval() == 1000

    def test_gives_up_after_budget(self, qapp: object) -> None:
        channel, transport = _make_channel(
            qapp, reconnection_attempts=2, reconnection_delay_ms=0
        )
        gave_up = QSignalSpy(channel.gave_up)
        channel.open()

        for _ in range(2):
            transport.connect_failed.emit("Connection refused")
            assert channel.state == PushState.RECONNECT_WAIT
            QTest.qWait(10)
            assert channel.state == PushState.CONNECTING
        transport.connect_failed.emit("Connection refused")

        assert transport.opened == 3
        assert channel.state == PushState.GAVE_UP
        assert len(gave_up) == 1
        assert gave_up[0][0] == 2

        # No further attempts after giving up
        transport.connection_lost.emit("gone")
        QTest.qWait(10)
        assert transport.opened == 3

    def test_successful_connect_refills_budget(self, qapp: object) -> None:
        channel, transport = _make_channel(qapp, reconnection_delay_ms=0)
        channel.open()
        transport.connect_failed.emit("Connection refused")
        QTest.qWait(10)
        assert channel.attempts == 1

        transport.connected.emit()

        assert channel.state == PushState.CONNECTED
        assert channel.attempts == 0

    def test_close_stops_reconnecting(self, qapp: object) -> None:
        channel, transport = _make_channel(qapp, reconnection_delay_ms=0)
        _connect(channel, transport)

        channel.close()
        transport.connection_lost.emit("client disconnect")
        QTest.qWait(10)

        assert channel.state == PushState.CLOSED
        assert transport.closed == 1
        assert transport.opened == 1
