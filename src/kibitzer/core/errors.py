"""Exception hierarchy.

None of these is fatal: every failure degrades to "the turn returns to the
player" and a log entry.
"""

from __future__ import annotations


class KibitzerError(Exception):
    """Base class for all client errors."""


class ConfigError(KibitzerError, ValueError):
    """Invalid client configuration value."""


class ReadinessProbeError(KibitzerError):
    """The startup engine status check failed (transport or decoding)."""


class EngineMoveError(KibitzerError):
    """The engine did not deliver a usable move.

    Args:
        reason: Short human-readable cause, e.g. ``"no move received"``.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason

    @property
    def log_message(self) -> str:
        return f"Move generation failed: {self.reason}"


class InvalidEngineMoveError(EngineMoveError):
    """The engine returned a move that does not apply to the position."""

    def __init__(self, move: str) -> None:
        super().__init__(f"invalid engine move {move!r}")
        self.move = move

    @property
    def log_message(self) -> str:
        return f"Invalid engine move: {self.move}"


class ResetNotifyError(KibitzerError):
    """Best-effort sync of a board reset to the engine failed."""

    @property
    def log_message(self) -> str:
        return f"Reset sync failed: {self}"
