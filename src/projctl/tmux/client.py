"""Tmux client bound to one isolated tmux server.

Every call goes through `tmux -L <label>` so projctl sessions live on their own
server and never show up in (or collide with) the user's default one.

PUBLIC API:
  - TmuxClient: Typed wrapper around the tmux control commands projctl uses
"""

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from ..errors import SessionStateError
from ..runner import ShellRunner
from ..types import PaneSlot, PaneTarget, ProbeResult, SessionName, WindowTarget

logger = logging.getLogger(__name__)

TMUX = "tmux"

# Stderr fragments tmux prints when a session target is missing
_MISSING_SESSION_MARKERS = ("can't find session", "no server running", "session not found")


class TmuxClient:
    """Control operations against the tmux server named by `label`.

    Attributes:
        runner: Shell runner used for every invocation.
        label: Socket name passed as `tmux -L <label>`.
    """

    def __init__(self, runner: ShellRunner, label: str):
        self.runner = runner
        self.label = label

    def _args(self, args: list[str]) -> list[str]:
        return ["-L", self.label, *args]

    def run(self, args: list[str], env: Optional[Mapping[str, str]] = None) -> None:
        """Run a tmux command, raising on non-zero exit."""
        self.runner.run(TMUX, self._args(args), env=env)

    def out(self, args: list[str]) -> str:
        """Run a tmux command and return its stripped stdout."""
        result = self.runner.check(self.runner.capture(TMUX, self._args(args)))
        return result.stdout.strip()

    def probe(self, args: list[str]) -> ProbeResult:
        """Ask tmux a yes/no question; failure is a valid "no"."""
        return self.runner.probe(TMUX, self._args(args))

    # Server and sessions

    def start_server(self) -> None:
        """Start the labelled server. Succeeds when it is already running."""
        self.run(["start-server"])

    def has_session(self, name: SessionName) -> ProbeResult:
        """Check if a session exists on this server."""
        return self.probe(["has-session", "-t", name])

    def kill_session(self, name: SessionName) -> None:
        self.run(["kill-session", "-t", name])

    def new_session(self, name: SessionName, first_window: str, cwd: Path) -> None:
        """Create a detached session whose first window is `first_window`."""
        self.run(["new-session", "-d", "-s", name, "-n", first_window, "-c", str(cwd)])

    # Windows

    def list_windows(self, session: SessionName) -> list[str]:
        """List window names in a session.

        Raises:
            SessionStateError: If the session does not exist.
            ToolInvocationError: If tmux fails for any other reason.
        """
        args = self._args(["list-windows", "-t", session, "-F", "#{window_name}"])
        result = self.runner.capture(TMUX, args)
        if not result.ok and any(m in result.stderr.lower() for m in _MISSING_SESSION_MARKERS):
            raise SessionStateError(TMUX, args, returncode=result.returncode, stderr=result.stderr)
        self.runner.check(result)
        return [line for line in result.stdout.splitlines() if line]

    def window_exists(self, session: SessionName, name: str) -> bool:
        """Check if a window named `name` exists in `session`."""
        return name in self.list_windows(session)

    def new_window(self, session: SessionName, name: str, cwd: Path) -> None:
        """Append a window to a session at the next free index."""
        self.run(["new-window", "-t", f"{session}:", "-n", name, "-c", str(cwd)])

    def select_window(self, target: WindowTarget) -> None:
        self.run(["select-window", "-t", target])

    # Panes

    def kill_all_panes(self, target: WindowTarget) -> None:
        """Kill every pane in a window except its active one."""
        self.run(["kill-pane", "-a", "-t", target])

    def set_layout(self, target: WindowTarget, layout: str = "tiled") -> None:
        self.run(["select-layout", "-t", target, layout])

    def split_horizontal(self, target: PaneTarget) -> None:
        self.run(["split-window", "-h", "-t", target])

    def split_vertical(self, target: PaneTarget) -> None:
        self.run(["split-window", "-v", "-t", target])

    def list_pane_ids(self, target: WindowTarget) -> list[PaneSlot]:
        """List panes of a window ordered by pane index."""
        stdout = self.out(["list-panes", "-t", target, "-F", "#{pane_index}:#{pane_id}"])
        slots = []
        for line in stdout.splitlines():
            try:
                slots.append(PaneSlot.from_format_line(line))
            except ValueError:
                logger.warning(f"Skipping malformed list-panes line: {line!r}")
        slots.sort(key=lambda s: s.index)
        return slots

    def send_keys(self, target: PaneTarget, text: str) -> None:
        """Type a command line into a pane and press Enter."""
        self.run(["send-keys", "-t", target, text, "C-m"])

    # Clients

    def is_inside(self, environ: Mapping[str, str]) -> bool:
        """Whether the calling terminal is a client of this labelled server.

        `$TMUX` looks like "/tmp/tmux-1000/projctl,4242,0"; the socket file
        is named after the label.
        """
        marker = environ.get("TMUX")
        if not marker:
            return False
        socket_path = marker.split(",", 1)[0]
        return os.path.basename(socket_path) == self.label

    def attach_or_switch(self, session: SessionName, environ: Optional[Mapping[str, str]] = None) -> None:
        """Bring the user's terminal into `session`.

        Switches the current client in place when already inside this server,
        otherwise attaches a new client. Inside some other tmux server the
        marker is dropped so tmux allows the nested client.
        """
        environ = os.environ if environ is None else environ
        if self.is_inside(environ):
            self.run(["switch-client", "-t", session])
            return

        env = None
        if "TMUX" in environ:
            env = {k: v for k, v in environ.items() if k != "TMUX"}
        self.run(["attach-session", "-t", session], env=env)
