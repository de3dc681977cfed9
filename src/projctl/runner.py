"""Shell command runner - the single place projctl spawns external programs.

PUBLIC API:
  - ShellRunner: Run, capture, or probe an external program
"""

import logging
import subprocess
from pathlib import Path
from typing import Mapping, Optional, Sequence

from .errors import ToolInvocationError
from .types import CommandResult, ProbeResult

logger = logging.getLogger(__name__)

type Cwd = Optional[str | Path]


class ShellRunner:
    """Synchronous runner for external programs.

    Every call is a single blocking invocation in the current user's
    environment. Nothing is retried.
    """

    def run(
        self,
        program: str,
        args: Sequence[str] = (),
        cwd: Cwd = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> int:
        """Run a program with inherited stdio.

        Args:
            program: Program name or path.
            args: Program arguments.
            cwd: Working directory for the child.
            env: Full environment for the child (inherits when None).

        Returns:
            Exit status (always 0).

        Raises:
            ToolInvocationError: If the program cannot start or exits non-zero.
        """
        completed = self._spawn(program, args, cwd, env)
        self._check(program, args, completed.returncode)
        return completed.returncode

    def capture(
        self,
        program: str,
        args: Sequence[str] = (),
        cwd: Cwd = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> CommandResult:
        """Run a program and capture its output.

        Output is decoded leniently; undecodable bytes are replaced. A non-zero
        exit is reported in the result, not raised.

        Raises:
            ToolInvocationError: If the program cannot start.
        """
        completed = self._spawn(program, args, cwd, env, capture=True)
        return CommandResult(
            program=program,
            args=tuple(args),
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )

    def probe(self, program: str, args: Sequence[str] = (), cwd: Cwd = None) -> ProbeResult:
        """Run a program as a yes/no question with all output suppressed.

        Raises:
            ToolInvocationError: If the program cannot start.
        """
        completed = self._spawn(program, args, cwd, None, silent=True)
        return ProbeResult.from_returncode(completed.returncode)

    def succeeds(self, program: str, args: Sequence[str] = (), cwd: Cwd = None) -> bool:
        """Whether a program exits zero, with all output suppressed."""
        return bool(self.probe(program, args, cwd))

    def _spawn(
        self,
        program: str,
        args: Sequence[str],
        cwd: Cwd,
        env: Optional[Mapping[str, str]],
        capture: bool = False,
        silent: bool = False,
    ) -> subprocess.CompletedProcess:
        cmd = [program, *args]
        logger.debug(f"Running {cmd} (cwd={cwd})")

        kwargs: dict = {"cwd": cwd, "env": dict(env) if env is not None else None}
        if capture:
            kwargs.update(capture_output=True, text=True, errors="replace")
        elif silent:
            kwargs.update(stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)

        try:
            return subprocess.run(cmd, **kwargs)
        except OSError as e:
            raise ToolInvocationError(program, args, reason=f"could not be started ({e.strerror or e})") from e

    @staticmethod
    def _check(program: str, args: Sequence[str], returncode: int, stderr: str = "") -> None:
        if returncode == 0:
            return
        if returncode < 0:
            raise ToolInvocationError(program, args, signal=-returncode, stderr=stderr)
        raise ToolInvocationError(program, args, returncode=returncode, stderr=stderr)

    def check(self, result: CommandResult) -> CommandResult:
        """Raise for a captured result that did not succeed.

        Raises:
            ToolInvocationError: If the result has a non-zero exit status.
        """
        self._check(result.program, result.args, result.returncode, result.stderr)
        return result
