"""Tests for ClientSettings and command-line resolution."""

from __future__ import annotations

import pytest

from kibitzer.app import load_settings
from kibitzer.config import ClientSettings
from kibitzer.core.errors import ConfigError


class TestDefaults:
    def test_defaults(self) -> None:
        settings = ClientSettings()
        assert settings.backend_url == "http://localhost:5000"
        assert settings.request_delay_ms == 500
        assert settings.request_timeout_ms == 15_000
        assert settings.max_transport_retries == 1
        assert settings.reconnection_attempts == 5
        assert settings.reconnection_delay_ms == 1_000

    def test_endpoints(self) -> None:
        settings = ClientSettings(backend_url="http://host:5000/")
        assert settings.base_url == "http://host:5000"
        assert settings.api_url("engine-move") == "http://host:5000/api/engine-move"
        assert settings.push_origin == "http://host:5000"
        assert settings.push_path == "socket.io"

    def test_push_path_keeps_prefix(self) -> None:
        settings = ClientSettings(backend_url="https://example.org/chess/")
        assert settings.push_origin == "https://example.org"
        assert settings.push_path == "chess/socket.io"


class TestValidation:
    @pytest.mark.parametrize("url", ["localhost:5000", "ftp://host", "http://", ""])
    def test_bad_backend_url(self, url: str) -> None:
        with pytest.raises(ConfigError):
            ClientSettings(backend_url=url)

    def test_negative_values_rejected(self) -> None:
        with pytest.raises(ConfigError, match="request_delay_ms"):
            ClientSettings(request_delay_ms=-1)

    def test_zero_timeout_rejected(self) -> None:
        with pytest.raises(ConfigError):
            ClientSettings(request_timeout_ms=0)

    def test_unknown_log_level_rejected(self) -> None:
        with pytest.raises(ConfigError):
            ClientSettings(log_level="CHATTY")

    def test_config_error_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            ClientSettings(reconnection_attempts=-3)


class TestEnvironment:
    def test_from_empty_env_uses_defaults(self) -> None:
        assert ClientSettings.from_env({}) == ClientSettings()

    def test_from_env(self) -> None:
        settings = ClientSettings.from_env(
            {
                "KIBITZER_BACKEND_URL": " https://abc.ngrok.app ",
                "KIBITZER_REQUEST_DELAY_MS": "250",
                "KIBITZER_REQUEST_TIMEOUT_MS": "5000",
                "KIBITZER_MAX_TRANSPORT_RETRIES": "0",
                "KIBITZER_RECONNECT_ATTEMPTS": "10",
                "KIBITZER_RECONNECT_DELAY_MS": "2000",
                "KIBITZER_LOG_LEVEL": "debug",
            }
        )
        assert settings.backend_url == "https://abc.ngrok.app"
        assert settings.request_delay_ms == 250
        assert settings.request_timeout_ms == 5000
        assert settings.max_transport_retries == 0
        assert settings.reconnection_attempts == 10
        assert settings.reconnection_delay_ms == 2000
        assert settings.log_level == "DEBUG"

    def test_legacy_backend_variable(self) -> None:
        settings = ClientSettings.from_env(
            {"REACT_APP_BACKEND_URL": "http://old:5000"}
        )
        assert settings.backend_url == "http://old:5000"

    def test_own_variable_wins_over_legacy(self) -> None:
        settings = ClientSettings.from_env(
            {
                "KIBITZER_BACKEND_URL": "http://new:5000",
                "REACT_APP_BACKEND_URL": "http://old:5000",
            }
        )
        assert settings.backend_url == "http://new:5000"

    def test_non_integer_env_value(self) -> None:
        with pytest.raises(ConfigError, match="KIBITZER_REQUEST_DELAY_MS"):
            ClientSettings.from_env({"KIBITZER_REQUEST_DELAY_MS": "soon"})

    def test_with_overrides_skips_none(self) -> None:
        base = ClientSettings(request_delay_ms=100)
        settings = base.with_overrides(request_delay_ms=None, reconnection_attempts=1)
        assert settings.request_delay_ms == 100
        assert settings.reconnection_attempts == 1


class TestCommandLine:
    def test_flags_override_environment(self) -> None:
        settings = load_settings(
            [
                "--backend-url",
                "http://cli:1",
                "--timeout-ms",
                "900",
                "--log-level",
                "warning",
            ],
            environ={
                "KIBITZER_BACKEND_URL": "http://env:2",
                "KIBITZER_REQUEST_DELAY_MS": "50",
            },
        )
        assert settings.backend_url == "http://cli:1"
        assert settings.request_timeout_ms == 900
        assert settings.request_delay_ms == 50
        assert settings.log_level == "WARNING"

    def test_invalid_value_exits_with_usage_error(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit) as excinfo:
            load_settings(["--request-delay-ms", "-5"], environ={})
        assert excinfo.value.code == 2
        assert "request_delay_ms" in capsys.readouterr().err

    def test_invalid_environment_exits_with_usage_error(self) -> None:
        with pytest.raises(SystemExit) as excinfo:
            load_settings([], environ={"KIBITZER_BACKEND_URL": "nope"})
        assert excinfo.value.code == 2
