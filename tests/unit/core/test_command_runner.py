"""Tests for CommandRunner (subprocess is mocked)."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import Mock, patch

from freezeforge.core.runner import CommandResult, CommandRunner


class TestCommandRunner:
    @patch("freezeforge.core.runner.subprocess.run")
    def test_run_closes_stdin_and_streams(self, mock_run: Mock, tmp_path: Path) -> None:
        """
        GIVEN a command to run
        WHEN run() is called without capture
        THEN stdin is DEVNULL, output is not captured and no timeout is set
        """
        mock_run.return_value = Mock(returncode=0, stdout=None, stderr=None)

        result = CommandRunner().run(["pyinstaller", "--noconfirm", "a.spec"], cwd=tmp_path)

        args, kwargs = mock_run.call_args
        assert args[0] == ["pyinstaller", "--noconfirm", "a.spec"]
        assert kwargs["stdin"] is subprocess.DEVNULL
        assert kwargs["capture_output"] is False
        assert kwargs["cwd"] == str(tmp_path)
        assert "timeout" not in kwargs
        assert result.ok
        assert result.stdout == ""

    @patch("freezeforge.core.runner.subprocess.run")
    def test_nonzero_exit_is_returned(self, mock_run: Mock) -> None:
        mock_run.return_value = Mock(returncode=3, stdout="", stderr="conflict")

        result = CommandRunner().run(["pip", "install", "x"], capture=True)

        assert result == CommandResult(["pip", "install", "x"], 3, "", "conflict")
        assert not result.ok

    @patch("freezeforge.core.runner.subprocess.run", side_effect=FileNotFoundError())
    def test_missing_executable(self, mock_run: Mock) -> None:
        result = CommandRunner().run(["/nowhere/pip", "install"])

        assert result.returncode == 127

    @patch("freezeforge.core.runner.subprocess.run")
    def test_extra_env_merged(self, mock_run: Mock) -> None:
        mock_run.return_value = Mock(returncode=0, stdout="", stderr="")

        CommandRunner(env={"PIP_NO_INPUT": "1"}).run(["pip", "install", "x"])

        env = mock_run.call_args.kwargs["env"]
        assert env["PIP_NO_INPUT"] == "1"
        assert "PATH" in env

    @patch("freezeforge.core.runner.shutil.which", return_value=None)
    def test_which_missing(self, mock_which: Mock) -> None:
        assert CommandRunner().which("python3") is None
        mock_which.assert_called_once_with("python3")
