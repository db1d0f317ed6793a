"""Domain enumerations shared by the session layer and the UI."""

from __future__ import annotations

from enum import Enum, IntEnum, auto


class Turn(IntEnum):
    """Who is expected to produce the next move."""

    PLAYER = 0
    ENGINE = 1


class ControllerPhase(IntEnum):
    """Finite-state-machine states of the turn controller."""

    AWAITING_READINESS = auto()
    PLAYER_TO_MOVE = auto()
    REQUESTING_ENGINE_MOVE = auto()
    APPLYING_ENGINE_RESULT = auto()
    RECOVERING_FROM_ENGINE_ERROR = auto()
    IDLE = auto()  # after a reset; behaves like PLAYER_TO_MOVE

    @property
    def turn(self) -> Turn:
        if self in _ENGINE_PHASES:
            return Turn.ENGINE
        return Turn.PLAYER

    @property
    def accepts_player_moves(self) -> bool:
        return self in (ControllerPhase.PLAYER_TO_MOVE, ControllerPhase.IDLE)


_ENGINE_PHASES = frozenset(
    {
        ControllerPhase.REQUESTING_ENGINE_MOVE,
        ControllerPhase.APPLYING_ENGINE_RESULT,
        ControllerPhase.RECOVERING_FROM_ENGINE_ERROR,
    }
)


class EngineReadiness(str, Enum):
    """Remote engine availability; values are the wire status strings."""

    UNKNOWN = "unknown"
    LOADING = "loading"
    READY = "ready"
    UNAVAILABLE = "unavailable"
    ERROR = "error"


class LogKind(str, Enum):
    """Category of a log entry, used for colouring in the log panel."""

    WELCOME = "welcome"
    INFO = "info"
    ENGINE = "engine"
    ERROR = "error"
