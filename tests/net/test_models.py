"""Tests for the engine API wire models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from kibitzer.net.models import EngineMoveReply, EngineMoveRequest, EngineStatusReply


def test_status_reply_ignores_extra_fields() -> None:
    reply = EngineStatusReply.model_validate_json(b'{"status": "ready", "uptime": 3}')
    assert reply.status == "ready"


def test_status_reply_requires_status() -> None:
    with pytest.raises(ValidationError):
        EngineStatusReply.model_validate_json(b"{}")


@pytest.mark.parametrize(
    ("body", "expected"),
    [
        (b'{"move": "e7e5"}', "e7e5"),
        (b'{"move": null}', ""),
        (b"{}", ""),
    ],
)
def test_move_reply_missing_move_becomes_empty(body: bytes, expected: str) -> None:
    assert EngineMoveReply.model_validate_json(body).move == expected


def test_move_reply_rejects_non_json() -> None:
    with pytest.raises(ValidationError):
        EngineMoveReply.model_validate_json(b"<html>tunnel offline</html>")


def test_move_request_serialises_fen_only() -> None:
    body = EngineMoveRequest(fen="8/8/8/8/8/8/8/K6k w - - 0 1").model_dump_json()
    assert body == '{"fen":"8/8/8/8/8/8/8/K6k w - - 0 1"}'
