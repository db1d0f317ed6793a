"""Interfaces the session layer needs from the network layer.

The turn controller and the status probe only issue commands; results come
back through their ``on_*`` handlers, wired up by :class:`GameSession`.
"""

from __future__ import annotations

from typing import Protocol


class EngineChannel(Protocol):
    """Request channel to the remote engine."""

    def fetch_status(self, request_id: int) -> None:
        """Query engine readiness; reply is tagged with *request_id*."""

    def request_move(self, fen: str, request_id: int) -> None:
        """Ask for a move in *fen*; reply is tagged with *request_id*."""

    def notify_reset(self, fen: str) -> None:
        """Tell the engine the board was reset to *fen* (fire-and-forget)."""


class DebounceTimer(Protocol):
    """Single-shot timer interface (satisfied by ``QTimer``)."""

    def start(self, msec: int) -> None: ...

    def stop(self) -> None: ...

    def isActive(self) -> bool: ...  # noqa: N802
