"""Servers session orchestration - one tmux session of dev servers per project.

A session is either absent or present on the isolated projctl tmux server. The
requested mode decides what happens to it:

    kill    present -> killed            absent -> nothing to kill
    reset   present -> killed, then created as if absent
    refresh present -> windows ensured, docker panes rebuilt, all reseeded
    (none)  present -> attach only
    any     absent  -> created, windows ensured, docker panes built, seeded

Every step is a blocking tmux call. The first failure aborts the sequence and
leaves the session as it is; the next refresh repairs it.

PUBLIC API:
  - ServersMode: What to do with the session
  - ServersOrchestrator: Reconciles a project's session and attaches to it
"""

import logging
import os
import shutil
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional

from ..config import ServersConfig
from ..errors import PreconditionError, SessionStateError
from ..tmux import TmuxClient
from ..types import PaneTarget, ProjectLayout, ServersAction, ServersReport, SessionName
from .detect import Which, detect_dev_command, detect_layout
from .seed import NO_BACKEND_COMMAND, build_seed_line, docker_pane_commands

logger = logging.getLogger(__name__)


class ServersMode(Enum):
    PLAIN = "plain"
    REFRESH = "refresh"
    RESET = "reset"
    KILL = "kill"

    @classmethod
    def from_flags(cls, refresh: bool = False, reset: bool = False, kill: bool = False) -> "ServersMode":
        """Turn the three command line flags into a mode.

        Raises:
            PreconditionError: If more than one flag is set.
        """
        chosen = [mode for mode, flag in ((cls.REFRESH, refresh), (cls.RESET, reset), (cls.KILL, kill)) if flag]
        if len(chosen) > 1:
            names = ", ".join(f"--{m.value}" for m in chosen)
            raise PreconditionError(f"Options {names} are mutually exclusive")
        return chosen[0] if chosen else cls.PLAIN


class ServersOrchestrator:
    """Create, refresh, reset, kill, and attach to servers sessions.

    Attributes:
        tmux: Client bound to the isolated server.
        config: Window and pane conventions.
        which: Installed-tool probe used by dev command detection.
        environ: Environment consulted when attaching.
    """

    def __init__(
        self,
        tmux: TmuxClient,
        config: Optional[ServersConfig] = None,
        which: Which = shutil.which,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.tmux = tmux
        self.config = config or ServersConfig()
        self.which = which
        self.environ = os.environ if environ is None else environ

    def session_name(self, project_dir: Path) -> SessionName:
        return self.config.session_name(project_dir)

    def run(self, project_dir: Path, mode: ServersMode = ServersMode.PLAIN) -> ServersReport:
        """Bring the project's session to the state `mode` asks for.

        Args:
            project_dir: Absolute project root.
            mode: Requested transition.

        Returns:
            Report of the action taken.

        Raises:
            ToolInvocationError: If any tmux call fails.
        """
        session = self.session_name(project_dir)
        present = bool(self.tmux.has_session(session))

        if mode is ServersMode.KILL:
            if not present:
                logger.info(f"No session '{session}' to kill.")
                return ServersReport(session=session, action="nothing-to-kill")
            logger.info(f"Killing session '{session}'...")
            self.tmux.kill_session(session)
            return ServersReport(session=session, action="killed")

        action: ServersAction = "created"
        if mode is ServersMode.RESET and present:
            logger.info(f"Resetting session '{session}'...")
            self.tmux.kill_session(session)
            present = False
            action = "reset"

        if not present:
            logger.info(f"Creating session '{session}'...")
            report = self.bootstrap(session, project_dir)
            report.action = action
        elif mode is ServersMode.REFRESH:
            logger.info(f"Refreshing session '{session}' (reseed layout + commands).")
            report = self.reconcile(session, project_dir, self.config.windows)
            report.action = "refreshed"
        else:
            logger.info(f"Session '{session}' exists - attaching.")
            report = ServersReport(session=session, action="attached")

        self.tmux.attach_or_switch(session, self.environ)
        return report

    def bootstrap(self, session: SessionName, project_dir: Path) -> ServersReport:
        """Create the session and everything in it."""
        self.tmux.start_server()
        self.tmux.new_session(session, self.config.first_window, project_dir)
        return self.reconcile(session, project_dir, self.config.windows[1:])

    def reconcile(self, session: SessionName, project_dir: Path, windows: tuple[str, ...]) -> ServersReport:
        """Ensure windows, rebuild docker panes, and reseed everything."""
        created = [name for name in windows if self.ensure_window(session, name, project_dir)]
        panes = self.setup_docker_layout(session)
        seeded = self.seed(session, project_dir, panes)
        return ServersReport(session=session, action="refreshed", windows=created, panes=panes, seeded=seeded)

    def ensure_window(self, session: SessionName, name: str, cwd: Path) -> bool:
        """Create window `name` unless it already exists.

        Returns:
            True if the window was created.
        """
        if self.tmux.window_exists(session, name):
            return False
        self.tmux.new_window(session, name, cwd)
        return True

    def setup_docker_layout(self, session: SessionName) -> list[str]:
        """Rebuild the docker window from scratch.

        Other panes are killed, then the window is split back up to
        `docker_panes` panes: one horizontal split, then vertical splits of
        the first, second, ... pane. Pane identity does not survive a rebuild,
        so the returned IDs are only valid until the next one.

        Returns:
            Pane IDs ordered by pane index.

        Raises:
            SessionStateError: If the window does not end up with the expected pane count.
        """
        target = f"{session}:{self.config.docker_window}"
        count = self.config.docker_panes

        self.tmux.select_window(target)
        self.tmux.kill_all_panes(target)
        self.tmux.set_layout(target, "tiled")

        # pane-base-index may not be 0
        base = self.tmux.list_pane_ids(target)[0].index
        if count > 1:
            self.tmux.split_horizontal(target)
        for i in range(count - 2):
            self.tmux.split_vertical(f"{target}.{base + i}")
        if count > 1:
            self.tmux.set_layout(target, "tiled")

        slots = self.tmux.list_pane_ids(target)
        if len(slots) != count:
            raise SessionStateError(
                "tmux",
                ["list-panes", "-t", target],
                reason=f"left {len(slots)} panes in {target}, expected {count}",
            )
        return [slot.pane_id for slot in slots]

    def seed(self, session: SessionName, project_dir: Path, panes: list[str]) -> list[str]:
        """Send the dev commands into the frontend, backend, and docker panes.

        Returns:
            Targets that were seeded, in send order.
        """
        layout = detect_layout(project_dir)
        shell = self.environ.get("SHELL")
        seeded = []

        target = f"{session}:{self.config.frontend_window}"
        front_dir = layout.frontend_dir or project_dir
        self.send(target, front_dir, detect_dev_command(front_dir, which=self.which, shell=shell))
        seeded.append(target)

        target = f"{session}:{self.config.backend_window}"
        if layout.backend_dir:
            command = detect_dev_command(layout.backend_dir, which=self.which, shell=shell)
            self.send(target, layout.backend_dir, command)
        else:
            self.send(target, project_dir, NO_BACKEND_COMMAND)
        seeded.append(target)

        seeded.extend(self.seed_docker(layout, panes))
        return seeded

    def seed_docker(self, layout: ProjectLayout, panes: list[str]) -> list[str]:
        """Seed docker panes by position: compose, postgres, redis, shell."""
        for pane_id, command in zip(panes, docker_pane_commands(layout, len(panes))):
            self.send(pane_id, layout.root, command)
        return list(panes)

    def send(self, target: PaneTarget, cwd: Path, command: str) -> None:
        """Type `cd <cwd> && clear && <command>` into a window or pane."""
        self.tmux.send_keys(target, build_seed_line(cwd, command))
