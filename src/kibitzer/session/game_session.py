"""The one object that owns a play session's state.

Created once at startup and passed explicitly to the UI; torn down when the
window closes.  Holds the log, the turn controller, the status probe and the
two network channels, and wires the channels' Qt signals into the core.
"""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject

from kibitzer.config import ClientSettings
from kibitzer.core.enums import LogKind
from kibitzer.net.http_client import EngineHttpClient
from kibitzer.net.push_channel import PushChannel
from kibitzer.session.controller import TurnController
from kibitzer.session.log import LogAggregator
from kibitzer.session.probe import EngineStatusProbe

_LOGGER = logging.getLogger(__name__)


class GameSession:
    """Owns the log, the state machine and the engine connections."""

    __slots__ = (
        "__weakref__",
        "settings",
        "log",
        "engine",
        "push",
        "controller",
        "probe",
        "_is_started",
    )

    def __init__(
        self,
        settings: ClientSettings,
        *,
        parent: QObject | None = None,
        engine: EngineHttpClient | None = None,
        push: PushChannel | None = None,
    ) -> None:
        self.settings = settings
        self.log = LogAggregator()
        self.engine = engine or EngineHttpClient(settings, parent)
        self.push = push or PushChannel(settings, parent)
        self.controller = TurnController(
            channel=self.engine,
            log=self.log,
            parent=parent,
            request_delay_ms=settings.request_delay_ms,
        )
        self.probe = EngineStatusProbe(channel=self.engine, log=self.log)
        self._is_started = False
        self._connect()

    def _connect(self) -> None:
        engine = self.engine
        engine.status_received.connect(self.probe.on_status)
        engine.status_failed.connect(self.probe.on_failure)
        engine.move_received.connect(self.controller.on_engine_move)
        engine.move_failed.connect(self.controller.on_engine_failure)
        engine.reset_failed.connect(self.controller.on_reset_sync_failed)

        self.probe.on_resolved.append(self.controller.set_readiness)

        push = self.push
        push.welcome_received.connect(self.log.record_welcome)
        push.raw_log_received.connect(self.log.record_pushed)
        push.gave_up.connect(self._on_push_gave_up)

    @property
    def is_started(self) -> bool:
        return self._is_started

    def start(self) -> None:
        """Open the push channel and run the startup readiness probe."""
        if self._is_started:
            return
        self._is_started = True
        _LOGGER.info("Starting session against %s", self.settings.base_url)
        self.push.open()
        self.probe.probe()

    def shutdown(self) -> None:
        if not self._is_started:
            return
        self._is_started = False
        self.controller.shutdown()
        self.push.close()

    def clear_logs(self) -> None:
        self.log.clear()

    def _on_push_gave_up(self, attempts: int) -> None:
        self.log.record_local(
            LogKind.ERROR,
            f"Engine log stream lost; gave up after {attempts} reconnection attempts",
        )
