from collections.abc import Generator
from unittest.mock import MagicMock, patch

import pytest

from sandbox_sync.main import main


@pytest.fixture()
def runner_cls() -> Generator[MagicMock, None, None]:
    with patch("sandbox_sync.main.SandboxRunner") as mock_cls, patch("sandbox_sync.main.Log"):
        yield mock_cls


class TestMain:
    def test_no_command_prints_usage(self, runner_cls: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([]) == 1
        assert "SANDBOX_SALT" in capsys.readouterr().out
        runner_cls.assert_not_called()

    def test_unknown_command_prints_usage(self, runner_cls: MagicMock) -> None:
        assert main(["migrate"]) == 1
        runner_cls.assert_not_called()

    def test_setup_dispatch(self, runner_cls: MagicMock) -> None:
        assert main(["setup"]) == 0
        runner_cls.return_value.setup.assert_called_once()
        runner_cls.return_value.sync.assert_not_called()

    def test_sync_dispatch(self, runner_cls: MagicMock) -> None:
        assert main(["sync"]) == 0
        runner_cls.return_value.sync.assert_called_once()

    def test_failure_returns_nonzero(self, runner_cls: MagicMock) -> None:
        runner_cls.return_value.sync.side_effect = RuntimeError("connection refused")
        assert main(["sync"]) == 1

    def test_invalid_settings_return_nonzero(
        self, runner_cls: MagicMock, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("DATABASE_PORT", "not_a_number")
        assert main(["setup"]) == 1
        runner_cls.assert_not_called()

    def test_log_level_flag_overrides_settings(self, runner_cls: MagicMock) -> None:
        with patch("sandbox_sync.main.Log") as mock_log:
            main(["setup", "--log-level", "DEBUG"])
        mock_log.configure.assert_called_once_with("DEBUG")

    def test_invalid_log_level_returns_nonzero(self, runner_cls: MagicMock) -> None:
        with patch("sandbox_sync.main.Log") as mock_log:
            mock_log.configure.side_effect = [ValueError("Unknown level: 'LOUD'"), None]
            assert main(["sync", "--log-level", "LOUD"]) == 1
        assert "Fatal error" in mock_log.error.call_args.args[0]
        runner_cls.assert_not_called()
