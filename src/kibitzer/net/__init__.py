"""Network layer: engine HTTP client and the Socket.IO push channel."""

from kibitzer.net.http_client import EngineHttpClient
from kibitzer.net.models import EngineMoveReply, EngineMoveRequest, EngineStatusReply
from kibitzer.net.push_channel import PushChannel, PushWorker

__all__ = [
    "EngineHttpClient",
    "EngineMoveReply",
    "EngineMoveRequest",
    "EngineStatusReply",
    "PushChannel",
    "PushWorker",
]
