"""Client configuration."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from urllib.parse import urlsplit, urlunsplit

from kibitzer.core.errors import ConfigError

DEFAULT_BACKEND_URL = "http://localhost:5000"

_ENV_PREFIX = "KIBITZER_"
# The web client this replaces read its backend from this variable.
_LEGACY_BACKEND_ENV = "REACT_APP_BACKEND_URL"

_INT_ENV: dict[str, str] = {
    "request_delay_ms": "REQUEST_DELAY_MS",
    "request_timeout_ms": "REQUEST_TIMEOUT_MS",
    "max_transport_retries": "MAX_TRANSPORT_RETRIES",
    "reconnection_attempts": "RECONNECT_ATTEMPTS",
    "reconnection_delay_ms": "RECONNECT_DELAY_MS",
}


@dataclass(frozen=True)
class ClientSettings:
    """All user-configurable settings."""

    # Backend
    backend_url: str = DEFAULT_BACKEND_URL
    request_timeout_ms: int = 15_000
    max_transport_retries: int = 1

    # Turn protocol
    request_delay_ms: int = 500  # debounce before asking the engine

    # Push channel
    reconnection_attempts: int = 5
    reconnection_delay_ms: int = 1_000

    # Diagnostics
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        parts = urlsplit(self.backend_url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ConfigError(
                f"backend URL must be http(s)://host[:port], got {self.backend_url!r}"
            )
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, int) and value < 0:
                raise ConfigError(f"{f.name} must be >= 0, got {value}")
        if self.request_timeout_ms == 0:
            raise ConfigError("request_timeout_ms must be > 0")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ConfigError(f"unknown log level {self.log_level!r}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> ClientSettings:
        """Build settings from ``KIBITZER_*`` environment variables."""
        changes: dict[str, object] = {}
        backend = environ.get(_ENV_PREFIX + "BACKEND_URL") or environ.get(
            _LEGACY_BACKEND_ENV
        )
        if backend:
            changes["backend_url"] = backend.strip()
        for name, suffix in _INT_ENV.items():
            raw = environ.get(_ENV_PREFIX + suffix)
            if raw is None or not raw.strip():
                continue
            try:
                changes[name] = int(raw)
            except ValueError as exc:
                raise ConfigError(
                    f"{_ENV_PREFIX}{suffix} must be an integer, got {raw!r}"
                ) from exc
        level = environ.get(_ENV_PREFIX + "LOG_LEVEL")
        if level:
            changes["log_level"] = level.strip().upper()
        return replace(cls(), **changes)

    def with_overrides(self, **overrides: object) -> ClientSettings:
        """Return a copy with every non-``None`` override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    # ── Derived endpoints ────────────────────────────────────────────────

    @property
    def base_url(self) -> str:
        return self.backend_url.rstrip("/")

    def api_url(self, path: str) -> str:
        return f"{self.base_url}/api/{path.lstrip('/')}"

    @property
    def push_origin(self) -> str:
        """Scheme and host the Socket.IO client connects to."""
        parts = urlsplit(self.base_url)
        return urlunsplit((parts.scheme, parts.netloc, "", "", ""))

    @property
    def push_path(self) -> str:
        """Socket.IO endpoint path, keeping any prefix of the backend URL."""
        prefix = urlsplit(self.base_url).path.strip("/")
        return f"{prefix}/socket.io" if prefix else "socket.io"
