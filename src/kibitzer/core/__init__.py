"""Core value types: rules adapter, enums and the error taxonomy."""

from kibitzer.core.enums import ControllerPhase, EngineReadiness, LogKind, Turn
from kibitzer.core.errors import (
    ConfigError,
    EngineMoveError,
    InvalidEngineMoveError,
    KibitzerError,
    ReadinessProbeError,
    ResetNotifyError,
)
from kibitzer.core.rules import (
    STARTING_FEN,
    AppliedMove,
    GameState,
    apply_engine_move,
    apply_move,
)

__all__ = [
    # Enums
    "ControllerPhase",
    "EngineReadiness",
    "LogKind",
    "Turn",
    # Errors
    "ConfigError",
    "EngineMoveError",
    "InvalidEngineMoveError",
    "KibitzerError",
    "ReadinessProbeError",
    "ResetNotifyError",
    # Rules
    "STARTING_FEN",
    "AppliedMove",
    "GameState",
    "apply_engine_move",
    "apply_move",
]
