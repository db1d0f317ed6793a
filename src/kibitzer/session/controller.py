"""Turn and engine-request state machine.

Owns the game position and whose turn it is, validates player moves through
the rules adapter, asks the remote engine for replies and applies them.
Emits events via simple callbacks so the UI / tests can subscribe.

Thread-safety: every method runs on the Qt event loop.  Engine replies
arrive through :meth:`on_engine_move` / :meth:`on_engine_failure`, tagged
with the request id they were issued with.  The id is a generation counter
bumped for every new request and on every reset, so a reply that outlived
its request is recognised and dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace

from PyQt6.QtCore import QObject, QTimer

from kibitzer.core.enums import ControllerPhase, EngineReadiness, Turn
from kibitzer.core.errors import (
    EngineMoveError,
    InvalidEngineMoveError,
    ResetNotifyError,
)
from kibitzer.core.rules import (
    STARTING_FEN,
    GameState,
    apply_engine_move,
    apply_move,
)
from kibitzer.session.interfaces import DebounceTimer, EngineChannel
from kibitzer.session.log import LogAggregator

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ControllerSnapshot:
    """Everything observers need, published atomically."""

    phase: ControllerPhase
    state: GameState
    readiness: EngineReadiness

    @property
    def turn(self) -> Turn:
        return self.phase.turn

    @property
    def accepts_player_moves(self) -> bool:
        return (
            self.phase.accepts_player_moves
            and self.readiness == EngineReadiness.READY
            and not self.state.is_game_over
        )


SnapshotCallback = Callable[[ControllerSnapshot], None]


@dataclass
class ControllerEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_state_changed: list[SnapshotCallback] = field(default_factory=list)


class TurnController:
    """Coordinates local player moves with asynchronous engine replies."""

    _REQUEST_DELAY_MS = 500

    __slots__ = (
        "__weakref__",
        "_channel",
        "_log",
        "_snapshot",
        "_generation",
        "_pending_request",
        "_request_delay_ms",
        "_dispatch_timer",
        "_can_retry",
        "events",
    )

    def __init__(
        self,
        *,
        channel: EngineChannel,
        log: LogAggregator,
        parent: QObject | None = None,
        request_delay_ms: int | None = None,
        timer: DebounceTimer | None = None,
    ) -> None:
        self._channel = channel
        self._log = log
        self._snapshot = ControllerSnapshot(
            phase=ControllerPhase.AWAITING_READINESS,
            state=GameState.initial(),
            readiness=EngineReadiness.UNKNOWN,
        )
        self._generation = 0
        self._pending_request: int | None = None
        self._request_delay_ms = (
            self._REQUEST_DELAY_MS if request_delay_ms is None else request_delay_ms
        )

        if timer is None:
            qtimer = QTimer(parent)
            qtimer.setSingleShot(True)
            qtimer.timeout.connect(self._emit_pending_request)
            timer = qtimer
        self._dispatch_timer = timer
        self._can_retry = False
        self.events = ControllerEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def snapshot(self) -> ControllerSnapshot:
        return self._snapshot

    @property
    def state(self) -> GameState:
        return self._snapshot.state

    @property
    def phase(self) -> ControllerPhase:
        return self._snapshot.phase

    @property
    def turn(self) -> Turn:
        return self._snapshot.turn

    @property
    def readiness(self) -> EngineReadiness:
        return self._snapshot.readiness

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def can_retry(self) -> bool:
        """True after a failed engine request, until the next move or reset."""
        return self._can_retry and self._snapshot.accepts_player_moves

    # ── Intents ──────────────────────────────────────────────────────────

    def set_readiness(self, readiness: EngineReadiness) -> None:
        """Update the readiness gate (from the status probe)."""
        phase = self.phase
        if (
            phase == ControllerPhase.AWAITING_READINESS
            and readiness == EngineReadiness.READY
        ):
            phase = ControllerPhase.PLAYER_TO_MOVE
        self._publish(phase=phase, readiness=readiness)

    def submit_player_move(self, source: str, target: str) -> bool:
        """Try a player move. Returns True if it was legal and applied.

        Rejected moves leave no trace: no state change, no log entry.
        """
        if not self._snapshot.accepts_player_moves:
            return False
        if self._pending_request is not None:
            return False

        applied = apply_move(self.state, source, target)
        if applied is None:
            return False

        self._can_retry = False
        self._log.info(f"Player move: {applied.san}")
        if applied.state.is_game_over:
            self._publish(phase=ControllerPhase.PLAYER_TO_MOVE, state=applied.state)
            self._log_game_over(applied.state)
            return True

        self._publish(
            phase=ControllerPhase.REQUESTING_ENGINE_MOVE, state=applied.state
        )
        self._queue_request()
        return True

    def retry_engine_move(self) -> bool:
        """Ask the engine again for the position its last request failed on."""
        if not self.can_retry or self._pending_request is not None:
            return False

        self._log.info("Retrying engine move")
        self._publish(phase=ControllerPhase.REQUESTING_ENGINE_MOVE)
        self._queue_request()
        return True

    def reset(self) -> None:
        """Return to the starting position from any phase."""
        self._cancel_pending_request()
        self._can_retry = False
        self._publish(phase=ControllerPhase.IDLE, state=GameState.initial())
        self._channel.notify_reset(STARTING_FEN)
        self._log.info("Board reset to starting position")

    def shutdown(self) -> None:
        """Stop the debounce timer and orphan any reply still in flight."""
        self._cancel_pending_request()

    # ── Engine replies ───────────────────────────────────────────────────

    def on_engine_move(self, request_id: int, move_text: str | None) -> None:
        if not self._is_current_request(request_id):
            _LOGGER.debug(
                "Dropping stale engine move %r (request %d)", move_text, request_id
            )
            return
        self._pending_request = None

        move = (move_text or "").strip()
        try:
            if not move:
                raise EngineMoveError("no move received")
            self._log.info(f"Engine move: {move}")
            self._publish(phase=ControllerPhase.APPLYING_ENGINE_RESULT)

            applied = apply_engine_move(self.state, move)
            if applied is None:
                raise InvalidEngineMoveError(move)
        except EngineMoveError as exc:
            self._recover(exc)
            return

        self._publish(phase=ControllerPhase.PLAYER_TO_MOVE, state=applied.state)
        self._log.info(f"Engine move applied: {applied.san}")
        if applied.state.is_game_over:
            self._log_game_over(applied.state)

    def on_engine_failure(self, request_id: int, message: str) -> None:
        if not self._is_current_request(request_id):
            _LOGGER.debug(
                "Dropping stale engine failure %r (request %d)", message, request_id
            )
            return
        self._pending_request = None
        self._recover(EngineMoveError(f"transport failed: {message}"))

    def on_reset_sync_failed(self, message: str) -> None:
        exc = ResetNotifyError(message)
        _LOGGER.warning("Reset notification failed: %s", exc)
        self._log.error(exc.log_message)

    # ── Internal helpers ─────────────────────────────────────────────────

    def _queue_request(self) -> None:
        self._can_retry = False
        self._generation += 1
        self._pending_request = self._generation
        self._dispatch_timer.start(self._request_delay_ms)

    def _emit_pending_request(self) -> None:
        request_id = self._pending_request
        if request_id is None or self.phase != ControllerPhase.REQUESTING_ENGINE_MOVE:
            return
        self._log.info("Requesting engine move")
        self._channel.request_move(self.state.fen, request_id)

    def _cancel_pending_request(self) -> None:
        self._dispatch_timer.stop()
        self._generation += 1
        self._pending_request = None

    def _is_current_request(self, request_id: int) -> bool:
        return (
            self._pending_request is not None
            and request_id == self._pending_request
            and self.phase == ControllerPhase.REQUESTING_ENGINE_MOVE
        )

    def _recover(self, exc: EngineMoveError) -> None:
        _LOGGER.warning("Engine move request failed: %s", exc)
        self._publish(phase=ControllerPhase.RECOVERING_FROM_ENGINE_ERROR)
        self._log.error(exc.log_message)
        self._can_retry = True
        self._publish(phase=ControllerPhase.PLAYER_TO_MOVE)

    def _log_game_over(self, state: GameState) -> None:
        self._log.info(f"Game over: {state.board().result()}")

    def _publish(
        self,
        *,
        phase: ControllerPhase | None = None,
        state: GameState | None = None,
        readiness: EngineReadiness | None = None,
    ) -> None:
        changes: dict[str, object] = {}
        if phase is not None:
            changes["phase"] = phase
        if state is not None:
            changes["state"] = state
        if readiness is not None:
            changes["readiness"] = readiness
        self._snapshot = replace(self._snapshot, **changes)
        for cb in self.events.on_state_changed:
            cb(self._snapshot)
