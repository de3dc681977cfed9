"""Type definitions for projctl.

Session, window and pane targets are plain tmux target strings. Everything
the orchestrator learns about tmux is transient and described here.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Literal, NamedTuple, Optional


type SessionName = str  # e.g., "shop-servers"
type WindowTarget = str  # e.g., "shop-servers:docker"
type PaneTarget = str  # e.g., "%42" or "shop-servers:docker.1"

# Orchestrator outcomes
type ServersAction = Literal["created", "reset", "refreshed", "attached", "killed", "nothing-to-kill"]


@dataclass(frozen=True)
class CommandResult:
    """Result of a captured external command."""

    program: str
    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ProbeResult(Enum):
    """Answer of a best-effort existence probe.

    A probe either answers yes or no. Failing to start the program at all is
    not an answer and raises instead.
    """

    YES = "yes"
    NO = "no"

    def __bool__(self) -> bool:
        return self is ProbeResult.YES

    @classmethod
    def from_returncode(cls, returncode: int) -> "ProbeResult":
        return cls.YES if returncode == 0 else cls.NO


class PaneSlot(NamedTuple):
    """A pane in creation order.

    Attributes:
        index: Pane index within its window.
        pane_id: Tmux pane ID (e.g., "%42").
    """

    index: int
    pane_id: str

    @classmethod
    def from_format_line(cls, line: str) -> "PaneSlot":
        """Parse a `#{pane_index}:#{pane_id}` line."""
        index, _, pane_id = line.strip().partition(":")
        return cls(index=int(index), pane_id=pane_id)


@dataclass(frozen=True)
class ProjectLayout:
    """Detected layout of a project directory.

    Attributes:
        root: Project root.
        frontend_dir: Frontend subdirectory, if one was found.
        backend_dir: Backend subdirectory, if one was found.
        compose_file: Compose file at the root, if any.
    """

    root: Path
    frontend_dir: Optional[Path] = None
    backend_dir: Optional[Path] = None
    compose_file: Optional[Path] = None


@dataclass
class ServersReport:
    """What a servers invocation did."""

    session: SessionName
    action: ServersAction
    windows: list[str] = field(default_factory=list)
    panes: list[str] = field(default_factory=list)
    seeded: list[str] = field(default_factory=list)

    @property
    def attached(self) -> bool:
        return self.action not in ("killed", "nothing-to-kill")

