"""EngineHttpClient — QtNetwork implementation of the engine request channel."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError
from PyQt6.QtCore import QByteArray, QObject, QUrl, pyqtSignal
from PyQt6.QtNetwork import QNetworkAccessManager, QNetworkReply, QNetworkRequest

from kibitzer.config import ClientSettings
from kibitzer.net.models import EngineMoveReply, EngineMoveRequest, EngineStatusReply

_LOGGER = logging.getLogger(__name__)

_STATUS_PATH = "engine-status"
_MOVE_PATH = "engine-move"


class ReplyLike(Protocol):
    """The parts of ``QNetworkReply`` the client reads."""

    def error(self) -> QNetworkReply.NetworkError: ...

    def errorString(self) -> str: ...  # noqa: N802

    def attribute(self, code: QNetworkRequest.Attribute) -> object: ...

    def readAll(self) -> QByteArray: ...  # noqa: N802

    def deleteLater(self) -> None: ...  # noqa: N802


@dataclass(frozen=True)
class _Outcome:
    body: bytes | None
    error: str | None
    is_transport_error: bool  # no HTTP status at all: refused, timeout, DNS...


class EngineHttpClient(QObject):
    """Issues engine requests; results arrive as queued signals.

    Signals:
        status_received(int, str): request id, raw status string.
        status_failed(int, str): request id, failure message.
        move_received(int, str): request id, move ("" when missing).
        move_failed(int, str): request id, failure message.
        reset_failed(str): the reset notification failed.
    """

    status_received = pyqtSignal(int, str)
    status_failed = pyqtSignal(int, str)
    move_received = pyqtSignal(int, str)
    move_failed = pyqtSignal(int, str)
    reset_failed = pyqtSignal(str)

    def __init__(
        self,
        settings: ClientSettings,
        parent: QObject | None = None,
        manager: QNetworkAccessManager | None = None,
    ) -> None:
        super().__init__(parent)
        self._settings = settings
        self._manager = manager or QNetworkAccessManager(self)

    # ── EngineChannel impl ───────────────────────────────────────────────

    def fetch_status(self, request_id: int) -> None:
        reply = self._manager.get(self._build_request(_STATUS_PATH))
        reply.finished.connect(
            lambda r=reply, rid=request_id: self._on_status_finished(r, rid)
        )

    def request_move(self, fen: str, request_id: int) -> None:
        self._post_move(fen, request_id, attempt=0)

    def notify_reset(self, fen: str) -> None:
        reply = self._manager.post(
            self._build_request(_MOVE_PATH), self._move_body(fen)
        )
        reply.finished.connect(lambda r=reply: self._on_reset_finished(r))

    # ── Reply handlers ───────────────────────────────────────────────────

    def _on_status_finished(self, reply: ReplyLike, request_id: int) -> None:
        outcome = self._read_outcome(reply)
        if outcome.error is not None:
            self.status_failed.emit(request_id, outcome.error)
            return
        try:
            parsed = EngineStatusReply.model_validate_json(outcome.body or b"")
        except ValidationError as exc:
            self.status_failed.emit(request_id, _validation_message(exc))
            return
        self.status_received.emit(request_id, parsed.status)

    def _on_move_finished(
        self, reply: ReplyLike, request_id: int, fen: str, attempt: int
    ) -> None:
        outcome = self._read_outcome(reply)
        if outcome.error is not None:
            if (
                outcome.is_transport_error
                and attempt < self._settings.max_transport_retries
            ):
                _LOGGER.info(
                    "Retrying engine move request %d after: %s",
                    request_id,
                    outcome.error,
                )
                self._post_move(fen, request_id, attempt=attempt + 1)
                return
            self.move_failed.emit(request_id, outcome.error)
            return
        try:
            parsed = EngineMoveReply.model_validate_json(outcome.body or b"")
        except ValidationError as exc:
            self.move_failed.emit(request_id, _validation_message(exc))
            return
        self.move_received.emit(request_id, parsed.move)

    def _on_reset_finished(self, reply: ReplyLike) -> None:
        outcome = self._read_outcome(reply)
        if outcome.error is not None:
            self.reset_failed.emit(outcome.error)
            return
        _LOGGER.debug("Engine acknowledged board reset")

    # ── Internal helpers ─────────────────────────────────────────────────

    def _post_move(self, fen: str, request_id: int, *, attempt: int) -> None:
        reply = self._manager.post(
            self._build_request(_MOVE_PATH), self._move_body(fen)
        )
        reply.finished.connect(
            lambda r=reply, rid=request_id, a=attempt: self._on_move_finished(
                r, rid, fen, a
            )
        )

    def _build_request(self, path: str) -> QNetworkRequest:
        request = QNetworkRequest(QUrl(self._settings.api_url(path)))
        request.setHeader(
            QNetworkRequest.KnownHeaders.ContentTypeHeader, "application/json"
        )
        request.setRawHeader(b"ngrok-skip-browser-warning", b"1")
        request.setTransferTimeout(self._settings.request_timeout_ms)
        return request

    @staticmethod
    def _move_body(fen: str) -> bytes:
        return EngineMoveRequest(fen=fen).model_dump_json().encode("utf-8")

    @staticmethod
    def _read_outcome(reply: ReplyLike) -> _Outcome:
        try:
            status = reply.attribute(QNetworkRequest.Attribute.HttpStatusCodeAttribute)
            if reply.error() != QNetworkReply.NetworkError.NoError:
                if status is None:
                    return _Outcome(None, reply.errorString(), True)
                return _Outcome(None, f"HTTP {status}: {reply.errorString()}", False)
            if isinstance(status, int) and not 200 <= status < 300:
                return _Outcome(None, f"HTTP {status}", False)
            return _Outcome(reply.readAll().data(), None, False)
        finally:
            reply.deleteLater()


def _validation_message(exc: ValidationError) -> str:
    first = exc.errors()[0] if exc.errors() else {"msg": str(exc)}
    location = ".".join(str(part) for part in first.get("loc", ())) or "body"
    return f"malformed reply ({location}: {first['msg']})"
