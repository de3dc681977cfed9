"""Error types and shared error responses for projctl.

PUBLIC API:
  - ProjctlError: Base exception for everything projctl raises on purpose
  - ToolInvocationError: External program missing, failed, or killed by a signal
  - SessionStateError: Control query against a session that does not exist
  - PreconditionError: Invalid combination of caller flags
  - ProjectError: Registry or current-project failure
  - ConfigError: Unreadable or invalid configuration
  - markdown_error_response: Create error response for markdown display
  - table_error_response: Create error response for table display
  - string_error_response: Create error response for string display
"""

from typing import Any, Optional, Sequence


class ProjctlError(Exception):
    """Base exception for projctl."""

    pass


class ToolInvocationError(ProjctlError):
    """Raised when an external program cannot run or does not succeed.

    Attributes:
        program: Program name as invoked.
        args: Arguments passed to the program.
        returncode: Exit code, or None when killed by a signal or never started.
        signal: Signal number that terminated the program, if any.
        stderr: Captured stderr when output was captured.
    """

    def __init__(
        self,
        program: str,
        args: Sequence[str] = (),
        returncode: Optional[int] = None,
        signal: Optional[int] = None,
        stderr: str = "",
        reason: Optional[str] = None,
    ):
        self.program = program
        self.args = tuple(args)
        self.returncode = returncode
        self.signal = signal
        self.stderr = stderr
        self.reason = reason
        super().__init__(self._format())

    @property
    def command_line(self) -> str:
        """Command as a single display string."""
        return " ".join([self.program, *self.args])

    @property
    def exit_detail(self) -> str:
        """How the program ended."""
        if self.reason:
            return self.reason
        if self.returncode is not None:
            return f"exited with code {self.returncode}"
        if self.signal is not None:
            return f"terminated by signal {self.signal}"
        return "terminated by signal"

    def _format(self) -> str:
        message = f"`{self.command_line}` {self.exit_detail}"
        if self.stderr.strip():
            message += f": {self.stderr.strip()}"
        return message


class SessionStateError(ToolInvocationError):
    """Raised when a control query targets a session that does not exist."""

    pass


class PreconditionError(ProjctlError):
    """Raised when mutually exclusive options are combined."""

    pass


class ProjectError(ProjctlError):
    """Raised for unknown, duplicate, or missing projects."""

    pass


class ConfigError(ProjctlError):
    """Raised when the configuration file cannot be used."""

    pass


def markdown_error_response(message: str) -> dict[str, Any]:
    """Create error response for markdown display commands.

    Args:
        message: The error message to display

    Returns:
        Markdown display dict with error element
    """
    return {"elements": [{"type": "text", "content": f"Error: {message}"}], "frontmatter": {"status": "error"}}


def table_error_response(message: str) -> list[dict[str, Any]]:
    """Create error response for table display commands.

    Args:
        message: The error message (will be logged)

    Returns:
        Empty list (tables show nothing on error)
    """
    from logging import getLogger

    logger = getLogger(__name__)
    logger.warning(f"Command failed: {message}")
    return []


def string_error_response(message: str) -> str:
    """Create error response for string display commands."""
    return f"Error: {message}"
