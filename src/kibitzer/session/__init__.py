"""Session layer: turn state machine, engine status probe and the log.

Quick start::

    from kibitzer.config import ClientSettings
    from kibitzer.session import GameSession

    session = GameSession(ClientSettings())
    session.start()
    session.controller.submit_player_move("e2", "e4")
"""

from kibitzer.session.controller import (
    ControllerEvents,
    ControllerSnapshot,
    TurnController,
)
from kibitzer.session.game_session import GameSession
from kibitzer.session.interfaces import EngineChannel
from kibitzer.session.log import LogAggregator, LogEntry, LogEvents
from kibitzer.session.probe import EngineStatusProbe, readiness_from_status

__all__ = [
    # Interfaces
    "EngineChannel",
    # Concrete
    "ControllerEvents",
    "ControllerSnapshot",
    "EngineStatusProbe",
    "GameSession",
    "LogAggregator",
    "LogEntry",
    "LogEvents",
    "TurnController",
    "readiness_from_status",
]
