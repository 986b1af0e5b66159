from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from messenger.config import USAGE, Settings
from messenger.main import (
    EXIT_CONNECTION_FAILED,
    EXIT_OK,
    EXIT_USAGE,
    GREETING,
    run,
    start,
)


@pytest.fixture
def settings() -> Settings:
    return Settings(dbname="messenger", port=5432, user="alice")


@pytest.fixture
def patched_database(mock_db: AsyncMock) -> Any:
    """Replace engine and session creation with mocks around ``mock_db``."""
    session_cm = MagicMock()
    session_cm.__aenter__ = AsyncMock(return_value=mock_db)
    session_cm.__aexit__ = AsyncMock(return_value=False)

    with (
        patch("messenger.main.create_engine") as mock_engine,
        patch(
            "messenger.main.create_session_factory",
            return_value=MagicMock(return_value=session_cm),
        ),
        patch("messenger.main.check_connection", new_callable=AsyncMock) as mock_check,
        patch("messenger.main.close_engine", new_callable=AsyncMock) as mock_close,
    ):
        yield {
            "engine": mock_engine.return_value,
            "check": mock_check,
            "close": mock_close,
        }


class TestStart:
    """Tests for the connect, run, disconnect sequence."""

    @pytest.mark.asyncio
    async def test_runs_session(
        self, settings: Settings, patched_database: Any, scripted_view: Any
    ) -> None:
        view = scripted_view([])

        with patch("messenger.main.MessengerApp") as mock_app_cls:
            mock_app_cls.return_value.run = AsyncMock()
            code = await start(settings, view)

        assert code == EXIT_OK
        mock_app_cls.return_value.run.assert_awaited_once()
        assert "Connection URL: postgresql+asyncpg://alice@localhost:5432/messenger" in view.lines
        assert "Disconnecting from database...Done" in view.lines
        assert view.lines[-1] == "Bye !"
        patched_database["close"].assert_awaited_once_with(patched_database["engine"])

    @pytest.mark.asyncio
    async def test_closed_stdin_ends_session(
        self, settings: Settings, patched_database: Any, scripted_view: Any
    ) -> None:
        view = scripted_view([])

        code = await start(settings, view)

        assert code == EXIT_OK
        assert "Disconnecting from database...Done" in view.lines
        patched_database["close"].assert_awaited_once()

    @pytest.mark.asyncio
    async def test_connection_failure(
        self,
        settings: Settings,
        patched_database: Any,
        scripted_view: Any,
    ) -> None:
        patched_database["check"].side_effect = OperationalError(
            "SELECT 1", {}, Exception("connection refused")
        )
        view = scripted_view([])

        code = await start(settings, view)

        assert code == EXIT_CONNECTION_FAILED
        assert view.errors[0].startswith("Error - Unable to Connect to Database")
        assert view.errors[1] == "Make sure you started postgres on this machine"
        assert "Done" not in view.lines
        patched_database["close"].assert_awaited_once()


class TestRun:
    """Tests for argument handling around the session."""

    def test_usage_error(self, capsys: Any) -> None:
        assert run(["messenger"]) == EXIT_USAGE
        assert USAGE in capsys.readouterr().err

    def test_runs_start_with_settings(self, capsys: Any) -> None:
        with (
            patch("messenger.main.configure_logging") as mock_logging,
            patch(
                "messenger.main.start", new_callable=AsyncMock, return_value=EXIT_OK
            ) as mock_start,
        ):
            assert run(["messenger", "5432", "alice"]) == EXIT_OK

        mock_logging.assert_called_once()
        settings = mock_start.call_args.args[0]
        assert settings.dbname == "messenger"
        assert settings.port == 5432
        assert GREETING in capsys.readouterr().out

    def test_invalid_log_level_is_a_usage_error(self, monkeypatch: Any, capsys: Any) -> None:
        monkeypatch.setenv("LOG_LEVEL", "verbose")
        with patch("messenger.main.start", new_callable=AsyncMock) as mock_start:
            assert run(["messenger", "5432", "alice"]) == EXIT_USAGE

        mock_start.assert_not_called()
        assert USAGE in capsys.readouterr().err
