"""Unit tests for the tourneybot.runtime module."""

from __future__ import annotations

import typing as typ
from http import HTTPStatus
from unittest import mock

import falcon.asgi
import falcon.testing
import pytest

from tourneybot import runtime

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Clear TourneyBot variables so tests control the environment."""
    for name in (
        "TOURNEYBOT_PASSWORD",
        "TOURNEYBOT_STORE",
        "TOURNEYBOT_DATABASE_URL",
        "TOURNEYBOT_DATA_DIR",
        "TOURNEYBOT_HOST",
        "TOURNEYBOT_PORT",
        "TOURNEYBOT_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def file_env(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Configure a password and a file store under tmp_path."""
    data_dir = tmp_path / "data"
    clean_env.setenv("TOURNEYBOT_PASSWORD", "s3cr3t")
    clean_env.setenv("TOURNEYBOT_STORE", "file")
    clean_env.setenv("TOURNEYBOT_DATA_DIR", str(data_dir))
    return data_dir


class TestCreateApp:
    """Tests for the Granian application factory."""

    def test_health_only_without_password(self, clean_env: pytest.MonkeyPatch) -> None:
        """create_app serves only health endpoints when no password is set."""
        app = runtime.create_app()
        client = falcon.testing.TestClient(app)

        assert isinstance(app, falcon.asgi.App)
        assert client.simulate_get("/health").json == {"status": "ok"}
        assert (
            client.simulate_get("/events/summer-2024").status_code
            == HTTPStatus.NOT_FOUND
        )

    def test_event_endpoints_with_password(self, file_env: Path) -> None:
        """create_app registers the event API when a password is set."""
        client = falcon.testing.TestClient(runtime.create_app())

        result = client.simulate_post("/password-check", json={"password": "s3cr3t"})

        assert result.status_code == HTTPStatus.OK
        assert result.json == {"valid": True}

    def test_invalid_config_exits(self, clean_env: pytest.MonkeyPatch) -> None:
        """Invalid environment variables terminate with status 1."""
        clean_env.setenv("TOURNEYBOT_PORT", "not-a-port")

        with pytest.raises(SystemExit) as excinfo:
            runtime.create_app()

        assert excinfo.value.code == 1


class TestMain:
    """Tests for the server entrypoint."""

    def test_prepares_storage_and_serves(self, file_env: Path) -> None:
        """main creates the data directory then hands off to Granian."""
        with (
            mock.patch("granian.Granian") as granian_cls,
            mock.patch.object(
                runtime, "configure_logging", return_value=("INFO", False)
            ),
        ):
            runtime.main()

        assert file_env.is_dir(), "data directory should be created"
        granian_cls.assert_called_once()
        args, kwargs = granian_cls.call_args
        assert args == ("tourneybot.runtime:create_app",)
        assert kwargs["port"] == 8080
        assert kwargs["factory"] is True
        granian_cls.return_value.serve.assert_called_once_with()

    def test_warns_on_invalid_log_level(self, file_env: Path) -> None:
        """An unknown log level is reported and INFO is used instead."""
        with (
            mock.patch("granian.Granian"),
            mock.patch.object(
                runtime, "configure_logging", return_value=("INFO", True)
            ),
            mock.patch.object(runtime, "log_warning") as warning,
        ):
            runtime.main()

        templates = [call.args[1] for call in warning.call_args_list]
        assert any("TOURNEYBOT_LOG_LEVEL" in template for template in templates)
