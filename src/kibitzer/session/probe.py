"""One-shot engine readiness query."""

from __future__ import annotations

import logging
from collections.abc import Callable

from kibitzer.core.enums import EngineReadiness
from kibitzer.core.errors import ReadinessProbeError
from kibitzer.session.interfaces import EngineChannel
from kibitzer.session.log import LogAggregator

_LOGGER = logging.getLogger(__name__)

ReadinessCallback = Callable[[EngineReadiness], None]

_STATUS_MAP: dict[str, EngineReadiness] = {
    "ready": EngineReadiness.READY,
    "loading": EngineReadiness.LOADING,
    "unavailable": EngineReadiness.UNAVAILABLE,
}


def readiness_from_status(raw: object) -> EngineReadiness:
    """Map a wire status value; anything unrecognised is UNAVAILABLE."""
    if not isinstance(raw, str):
        return EngineReadiness.UNAVAILABLE
    return _STATUS_MAP.get(raw.strip().lower(), EngineReadiness.UNAVAILABLE)


class EngineStatusProbe:
    """Queries engine readiness and reports it to subscribers.

    Each :meth:`probe` logs exactly one ``Engine status: ...`` info entry
    once its reply (or failure) arrives.  Replies to an older probe are
    ignored once a newer one has been issued.
    """

    __slots__ = (
        "__weakref__",
        "_channel",
        "_log",
        "_request_id",
        "_pending",
        "_readiness",
        "on_resolved",
    )

    def __init__(self, *, channel: EngineChannel, log: LogAggregator) -> None:
        self._channel = channel
        self._log = log
        self._request_id = 0
        self._pending: int | None = None
        self._readiness = EngineReadiness.UNKNOWN
        self.on_resolved: list[ReadinessCallback] = []

    @property
    def readiness(self) -> EngineReadiness:
        return self._readiness

    @property
    def is_pending(self) -> bool:
        return self._pending is not None

    def probe(self) -> int:
        """Issue a status query; returns its request id."""
        self._request_id += 1
        self._pending = self._request_id
        self._channel.fetch_status(self._request_id)
        return self._request_id

    def on_status(self, request_id: int, raw_status: str) -> EngineReadiness | None:
        if request_id != self._pending:
            return None
        return self._resolve(readiness_from_status(raw_status))

    def on_failure(self, request_id: int, message: str) -> EngineReadiness | None:
        if request_id != self._pending:
            return None
        exc = ReadinessProbeError(message)
        _LOGGER.warning("Engine status check failed: %s", exc)
        self._log.error(f"Status check failed: {exc}")
        return self._resolve(EngineReadiness.ERROR)

    def _resolve(self, readiness: EngineReadiness) -> EngineReadiness:
        self._pending = None
        self._readiness = readiness
        self._log.info(f"Engine status: {readiness.value}")
        for cb in self.on_resolved:
            cb(readiness)
        return readiness
