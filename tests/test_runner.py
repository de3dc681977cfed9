"""Tests for ShellRunner against real child processes."""

import pytest

from projctl.errors import ToolInvocationError
from projctl.runner import ShellRunner
from projctl.types import CommandResult, ProbeResult


@pytest.fixture
def runner():
    return ShellRunner()


class TestRun:
    """Tests for ShellRunner.run."""

    def test_success_returns_zero(self, runner):
        assert runner.run("true") == 0

    def test_non_zero_exit_raises_with_code(self, runner):
        with pytest.raises(ToolInvocationError) as exc:
            runner.run("sh", ["-c", "exit 3"])

        assert exc.value.returncode == 3
        assert exc.value.signal is None
        assert "exited with code 3" in str(exc.value)
        assert "sh -c exit 3" in str(exc.value)

    def test_signal_termination_is_reported(self, runner):
        with pytest.raises(ToolInvocationError) as exc:
            runner.run("sh", ["-c", "kill -9 $$"])

        assert exc.value.returncode is None
        assert exc.value.signal == 9
        assert "terminated by signal 9" in str(exc.value)

    def test_missing_program_raises(self, runner):
        with pytest.raises(ToolInvocationError) as exc:
            runner.run("projctl-no-such-program-xyz")

        assert exc.value.returncode is None
        assert "could not be started" in str(exc.value)

    def test_runs_in_cwd(self, runner, tmp_path):
        runner.run("sh", ["-c", "touch marker"], cwd=tmp_path)

        assert (tmp_path / "marker").exists()

    def test_env_replaces_environment(self, runner, tmp_path):
        runner.run("sh", ["-c", 'echo "$PROJCTL_TEST" > out'], cwd=tmp_path, env={"PROJCTL_TEST": "hello", "PATH": "/usr/bin:/bin"})

        assert (tmp_path / "out").read_text() == "hello\n"


class TestCapture:
    """Tests for ShellRunner.capture and check."""

    def test_captures_stdout_and_stderr(self, runner):
        result = runner.capture("sh", ["-c", "echo out; echo err >&2"])

        assert result.ok
        assert result.stdout == "out\n"
        assert result.stderr == "err\n"
        assert result.program == "sh"

    def test_failure_is_returned_not_raised(self, runner):
        result = runner.capture("sh", ["-c", "echo nope >&2; exit 2"])

        assert not result.ok
        assert result.returncode == 2

    def test_invalid_utf8_is_replaced(self, runner):
        result = runner.capture("printf", ["ok\\377\\n"])

        assert result.stdout.startswith("ok")
        assert "�" in result.stdout

    def test_check_passes_success_through(self, runner):
        result = runner.capture("true")

        assert runner.check(result) is result

    def test_check_raises_with_stderr(self, runner):
        result = runner.capture("sh", ["-c", "echo broken >&2; exit 1"])

        with pytest.raises(ToolInvocationError) as exc:
            runner.check(result)

        assert exc.value.stderr == "broken\n"
        assert str(exc.value).endswith(": broken")

    def test_check_on_constructed_result(self, runner):
        result = CommandResult(program="tmux", args=("list-panes",), returncode=1, stdout="", stderr="")

        with pytest.raises(ToolInvocationError, match="`tmux list-panes` exited with code 1"):
            runner.check(result)


class TestProbe:
    """Tests for ShellRunner.probe and succeeds."""

    def test_yes_and_no(self, runner):
        assert runner.probe("true") is ProbeResult.YES
        assert runner.probe("false") is ProbeResult.NO

    def test_probe_is_truthy_only_for_yes(self):
        assert ProbeResult.YES
        assert not ProbeResult.NO

    def test_succeeds(self, runner):
        assert runner.succeeds("sh", ["-c", "exit 0"]) is True
        assert runner.succeeds("sh", ["-c", "exit 1"]) is False

    def test_probe_of_missing_program_raises(self, runner):
        with pytest.raises(ToolInvocationError):
            runner.probe("projctl-no-such-program-xyz")
