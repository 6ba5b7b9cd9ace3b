"""Tests for the subprocess runner (infra/subprocess_runner.py).

Children are ``sys.executable -c ...`` so no external binaries are
required.

Coverage:
* Zero exit succeeds.
* Nonzero exit raises ``CommandFailedError`` with the return code.
* Missing executable raises ``CommandFailedError`` without return code.
* Timeout raises ``CommandTimeoutError``.
* Child stdin is not the parent's stdin.
"""

from __future__ import annotations

import subprocess
from unittest.mock import patch

import pytest

from throttle_run.exceptions import CommandFailedError, CommandTimeoutError
from throttle_run.infra.subprocess_runner import SubprocessCommandRunner


class TestSubprocessCommandRunner:
    def test_success(self, python_exe: str) -> None:
        SubprocessCommandRunner().run([python_exe, "-c", "pass"])

    def test_nonzero_exit(self, python_exe: str) -> None:
        with pytest.raises(CommandFailedError, match="exit status 3") as exc_info:
            SubprocessCommandRunner().run([python_exe, "-c", "raise SystemExit(3)"])
        assert exc_info.value.returncode == 3

    def test_missing_executable(self) -> None:
        with pytest.raises(CommandFailedError) as exc_info:
            SubprocessCommandRunner().run(["throttle-run-no-such-binary", "x"])
        assert exc_info.value.returncode is None
        assert "throttle-run-no-such-binary" in str(exc_info.value)

    def test_timeout(self, python_exe: str) -> None:
        runner = SubprocessCommandRunner(timeout=0.2)
        with pytest.raises(CommandTimeoutError, match="timed out"):
            runner.run([python_exe, "-c", "import time; time.sleep(10)"])

    def test_child_stdin_is_devnull(self, python_exe: str) -> None:
        script = "import sys; sys.exit(0 if sys.stdin.read() == '' else 1)"
        SubprocessCommandRunner().run([python_exe, "-c", script])

    def test_child_writes_to_inherited_stdout(
        self, python_exe: str, capfd: pytest.CaptureFixture[str],
    ) -> None:
        SubprocessCommandRunner().run([python_exe, "-c", "print('from child')"])
        assert "from child" in capfd.readouterr().out

    def test_passes_argv_verbatim(self) -> None:
        completed = subprocess.CompletedProcess(args=["echo", "a b"], returncode=0)
        with patch(
            "throttle_run.infra.subprocess_runner.subprocess.run",
            return_value=completed,
        ) as mock_run:
            SubprocessCommandRunner(timeout=5).run(("echo", "a b"))

        mock_run.assert_called_once_with(
            ["echo", "a b"],
            stdin=subprocess.DEVNULL,
            check=False,
            timeout=5,
        )
