"""Tests for tagcut.platform.process."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

from tagcut.core.result import Err, Ok
from tagcut.platform.process import ProcessError, run


class TestProcessError:
    def test_str_truncates_long_commands(self) -> None:
        error = ProcessError(
            command=("git", "-C", "/repo", "push", "origin", "HEAD"),
            returncode=1,
            stdout="",
            stderr="",
        )
        assert str(error) == "git -C /repo ... failed (exit 1)"

    def test_detail_prefers_last_stderr_line(self) -> None:
        error = ProcessError(
            command=("git", "push"),
            returncode=1,
            stdout="",
            stderr="To origin\n ! [rejected] main -> main (fetch first)\n",
        )
        assert error.detail == "! [rejected] main -> main (fetch first)"

    def test_detail_falls_back_to_summary(self) -> None:
        error = ProcessError(command=("git", "commit"), returncode=1, stdout="", stderr="")
        assert error.detail == "git commit failed (exit 1)"


class TestRun:
    def test_success_returns_stdout(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "print('hello')"], cwd=tmp_path)

        assert isinstance(result, Ok)
        assert "hello" in result.value

    def test_failure_returns_error(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "import sys; sys.exit(42)"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == 42

    def test_command_not_found(self, tmp_path: Path) -> None:
        result = run(["nonexistent_command_12345"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == -1

    @patch("subprocess.run")
    def test_timeout_is_reported(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.side_effect = subprocess.TimeoutExpired(cmd=["git", "push"], timeout=5.0)

        result = run(["git", "push"], cwd=tmp_path, timeout=5.0)

        assert isinstance(result, Err)
        assert result.error.returncode == -1
        assert "timed out after 5.0s" in result.error.stderr
