"""Pytest configuration and fixtures for projctl tests."""

import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import pytest

from projctl.config import ServersConfig
from projctl.runner import ShellRunner
from projctl.servers import ServersOrchestrator
from projctl.tmux import TmuxClient


@dataclass
class FakeWindow:
    name: str
    panes: list[str] = field(default_factory=list)


class FakeTmuxServer:
    """In-memory tmux server understanding the commands projctl sends.

    Sessions hold ordered windows; windows hold ordered pane IDs. Pane indexes
    start at `pane_base_index`, like tmux's pane-base-index option.
    """

    def __init__(self, pane_base_index: int = 0):
        self.running = False
        self.sessions: dict[str, list[FakeWindow]] = {}
        self.pane_base_index = pane_base_index
        self.sent: list[tuple[str, str]] = []
        self.attached: list[tuple[str, str]] = []
        self._next_pane = 0

    def _new_pane(self) -> str:
        pane_id = f"%{self._next_pane}"
        self._next_pane += 1
        return pane_id

    # Fixtures

    def add_session(self, name: str, windows: list[str], panes: int = 1) -> None:
        self.running = True
        self.sessions[name] = [FakeWindow(w, [self._new_pane() for _ in range(panes)]) for w in windows]

    def window_names(self, session: str) -> list[str]:
        return [w.name for w in self.sessions[session]]

    def panes(self, session: str, window: str) -> list[str]:
        return self._window(session, window).panes

    # Target resolution

    def _window(self, session: str, window: str) -> FakeWindow:
        for w in self.sessions[session]:
            if w.name == window:
                return w
        raise KeyError(window)

    def _resolve(self, target: str) -> tuple[FakeWindow, Optional[int]]:
        """Resolve `%id`, `session:window` or `session:window.index` to (window, position)."""
        if target.startswith("%"):
            for windows in self.sessions.values():
                for w in windows:
                    if target in w.panes:
                        return w, w.panes.index(target)
            raise KeyError(target)
        session, _, rest = target.partition(":")
        window, _, index = rest.partition(".")
        w = self._window(session, window)
        if index:
            position = int(index) - self.pane_base_index
            if not 0 <= position < len(w.panes):
                raise KeyError(target)
            return w, position
        return w, None

    # Protocol

    def handle(self, args: list[str]) -> tuple[int, str, str]:
        command, rest = args[0], args[1:]
        opts: dict[str, str] = {}
        flags: set[str] = set()
        positional: list[str] = []
        i = 0
        while i < len(rest):
            arg = rest[i]
            if arg in ("-t", "-s", "-n", "-c", "-F"):
                opts[arg] = rest[i + 1]
                i += 2
                continue
            if arg.startswith("-") and len(arg) == 2:
                flags.add(arg)
            else:
                positional.append(arg)
            i += 1

        if command == "start-server":
            self.running = True
            return 0, "", ""

        target = opts.get("-t", "")

        if command == "has-session":
            return (0, "", "") if target in self.sessions else (1, "", f"can't find session: {target}\n")

        if command == "new-session":
            # tmux rewrites these characters in session names
            name = opts["-s"].replace(".", "_").replace(":", "_")
            if name in self.sessions:
                return 1, "", f"duplicate session: {name}\n"
            self.running = True
            self.sessions[name] = [FakeWindow(opts.get("-n", "0"), [self._new_pane()])]
            return 0, "", ""

        if command in ("kill-session", "list-windows", "new-window"):
            session = target.rstrip(":")
            if session not in self.sessions:
                return 1, "", f"can't find session: {session}\n"
            if command == "kill-session":
                del self.sessions[session]
                return 0, "", ""
            if command == "list-windows":
                return 0, "".join(f"{w.name}\n" for w in self.sessions[session]), ""
            self.sessions[session].append(FakeWindow(opts["-n"], [self._new_pane()]))
            return 0, "", ""

        if command in ("attach-session", "switch-client"):
            if target not in self.sessions:
                return 1, "", f"can't find session: {target}\n"
            self.attached.append((command, target))
            return 0, "", ""

        try:
            window, position = self._resolve(target)
        except KeyError:
            return 1, "", f"can't find pane: {target}\n"

        if command in ("select-window", "select-layout"):
            return 0, "", ""
        if command == "kill-pane":
            keep = window.panes[position or 0]
            window.panes[:] = [keep] if "-a" in flags else [p for p in window.panes if p != keep]
            return 0, "", ""
        if command == "split-window":
            window.panes.insert((position or 0) + 1, self._new_pane())
            return 0, "", ""
        if command == "list-panes":
            lines = [f"{i + self.pane_base_index}:{p}\n" for i, p in enumerate(window.panes)]
            return 0, "".join(lines), ""
        if command == "send-keys":
            self.sent.append((target, positional[0]))
            return 0, "", ""
        return 1, "", f"unknown command {command}\n"


class FakeRunner(ShellRunner):
    """ShellRunner whose child processes are simulated.

    tmux calls go to a FakeTmuxServer; other programs answer from `results`
    (program -> (returncode, stdout, stderr)), defaulting to success.
    """

    def __init__(self, server: Optional[FakeTmuxServer] = None):
        self.server = server or FakeTmuxServer()
        self.calls: list[dict] = []
        self.results: dict[str, tuple[int, str, str]] = {}
        self.fail_on: Optional[str] = None

    def _spawn(self, program, args, cwd, env, capture=False, silent=False):
        self.calls.append({"program": program, "args": list(args), "cwd": cwd, "env": env})
        if program == "tmux":
            tmux_args = list(args)[2:]  # drop -L <label>
            if self.fail_on and tmux_args[0] == self.fail_on:
                code, out, err = 1, "", "simulated failure\n"
            else:
                code, out, err = self.server.handle(tmux_args)
        else:
            code, out, err = self.results.get(program, (0, "", ""))
        return subprocess.CompletedProcess([program, *args], code, out if capture else None, err if capture else None)

    def tmux_calls(self) -> list[list[str]]:
        """tmux argument lists without the -L <label> prefix."""
        return [c["args"][2:] for c in self.calls if c["program"] == "tmux"]

    def tmux_commands(self) -> list[str]:
        return [args[0] for args in self.tmux_calls()]


@pytest.fixture
def tmux_server() -> FakeTmuxServer:
    return FakeTmuxServer()


@pytest.fixture
def fake_runner(tmux_server: FakeTmuxServer) -> FakeRunner:
    return FakeRunner(tmux_server)


@pytest.fixture
def servers_config() -> ServersConfig:
    return ServersConfig()


@pytest.fixture
def orchestrator(fake_runner: FakeRunner, servers_config: ServersConfig) -> ServersOrchestrator:
    """Orchestrator on the fake server, outside tmux, with no watchers installed."""
    return ServersOrchestrator(
        TmuxClient(fake_runner, servers_config.label),
        servers_config,
        which=lambda name: None,
        environ={"SHELL": "/bin/bash"},
    )


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    path = tmp_path / "work" / "shop"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point ~ at a temporary directory and clear projctl/tmux variables."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for var in ("PROJCTL_CONFIG", "TMUX", "PGUSER", "PGPASSWORD", "PGHOST", "PGPORT"):
        monkeypatch.delenv(var, raising=False)
    return home
