"""Wire models for the engine HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class _Reply(BaseModel):
    model_config = ConfigDict(extra="ignore")


class EngineStatusReply(_Reply):
    """``GET /api/engine-status`` response."""

    status: str


class EngineMoveRequest(BaseModel):
    """``POST /api/engine-move`` body."""

    fen: str


class EngineMoveReply(_Reply):
    """``POST /api/engine-move`` response.

    Fields:
        move: Engine move in SAN or coordinate notation.  Missing or
              ``null`` becomes the empty string; the turn controller treats
              that as "no move received".
    """

    move: str = ""

    @field_validator("move", mode="before")
    @classmethod
    def coerce_missing_move(cls, v: object) -> object:
        if v is None:
            return ""
        return v
