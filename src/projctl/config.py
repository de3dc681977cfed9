"""Configuration management for projctl.

Reads ~/.config/projctl/config.toml (or $PROJCTL_CONFIG) and merges it with
command line overrides and built-in defaults.

PUBLIC API:
  - ServersConfig: Naming and layout conventions for servers sessions
  - ResolvedConfig: Editor/git UI commands plus servers conventions
  - default_config_path: Location of the config file
  - load_config: Load raw configuration from file
"""

import logging
import os
import shlex
import shutil
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

from .errors import ConfigError
from .paths import expand_tilde

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = "~/.config/projctl/config.toml"
DEFAULT_EDITOR = "nvim"
DEFAULT_GIT_UI = "lazygit"

# Characters tmux rewrites when it creates a session
_TMUX_SESSION_NAME_FIXUPS = str.maketrans({".": "_", ":": "_"})


@dataclass(frozen=True)
class ServersConfig:
    """Conventions for the per-project servers session.

    Attributes:
        label: tmux socket name isolating projctl from the default server.
        windows: Window names; the first one is created with the session.
        frontend_window: Window seeded with the frontend dev command.
        backend_window: Window seeded with the backend dev command.
        docker_window: Window that gets the tiled docker panes.
        docker_panes: Number of panes in the docker window.
        session_suffix: Appended to the project basename to name the session.
    """

    label: str = "projctl"
    windows: tuple[str, ...] = ("frontend", "backend", "docker", "logs", "scratch")
    frontend_window: str = "frontend"
    backend_window: str = "backend"
    docker_window: str = "docker"
    docker_panes: int = 4
    session_suffix: str = "-servers"

    def __post_init__(self):
        if not self.label:
            raise ConfigError("servers.label must not be empty")
        if not self.windows:
            raise ConfigError("servers.windows must name at least one window")
        if len(set(self.windows)) != len(self.windows):
            raise ConfigError(f"servers.windows has duplicates: {list(self.windows)}")
        for role in ("frontend_window", "backend_window", "docker_window"):
            name = getattr(self, role)
            if name not in self.windows:
                raise ConfigError(f"servers.{role} '{name}' is not one of {list(self.windows)}")
        if self.docker_panes < 1:
            raise ConfigError("servers.docker_panes must be at least 1")

    @property
    def first_window(self) -> str:
        return self.windows[0]

    def session_name(self, project_dir: Path) -> str:
        """Session name for a project: `<basename><suffix>`.

        tmux stores session names with `.` and `:` replaced by `_`, so the
        name is returned in that form and later targets match the stored
        session. Projects sharing a basename (or differing only in those
        characters) share a session.
        """
        name = f"{project_dir.name}{self.session_suffix}"
        return name.translate(_TMUX_SESSION_NAME_FIXUPS)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ServersConfig":
        """Build from a `[servers]` table, keeping defaults for missing keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown servers settings: {', '.join(sorted(unknown))}")

        kwargs = dict(data)
        if "windows" in kwargs:
            if not isinstance(kwargs["windows"], list) or not all(isinstance(w, str) for w in kwargs["windows"]):
                raise ConfigError("servers.windows must be a list of names")
            kwargs["windows"] = tuple(kwargs["windows"])
        if "docker_panes" in kwargs and not isinstance(kwargs["docker_panes"], int):
            raise ConfigError("servers.docker_panes must be an integer")
        return cls(**kwargs)


def default_config_path() -> Path:
    """Get config file path, honouring $PROJCTL_CONFIG."""
    return expand_tilde(os.environ.get("PROJCTL_CONFIG", DEFAULT_CONFIG))


def load_config(path: Optional[Path] = None) -> dict:
    """Load raw configuration from file.

    A missing file is an empty configuration.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    if path is None:
        path = default_config_path()

    if not path.exists():
        return {}

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"parsing {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"reading {path}: {e}") from e


def _command_bin(command: str) -> Optional[str]:
    try:
        parts = shlex.split(command)
    except ValueError:
        parts = command.split()
    return parts[0] if parts else None


@dataclass
class ResolvedConfig:
    """Effective configuration after merging all sources."""

    editor: str = DEFAULT_EDITOR
    git_ui: str = DEFAULT_GIT_UI
    servers: ServersConfig = field(default_factory=ServersConfig)

    @classmethod
    def resolve(cls, data: dict, editor: Optional[str] = None, git_ui: Optional[str] = None) -> "ResolvedConfig":
        """Merge with precedence: command line > file > defaults.

        Args:
            data: Raw file configuration from load_config.
            editor: Editor command given on the command line.
            git_ui: Git UI command given on the command line.
        """
        for key in ("editor", "git_ui"):
            if key in data and not isinstance(data[key], str):
                raise ConfigError(f"{key} must be a string command line")

        servers = data.get("servers", {})
        if not isinstance(servers, dict):
            raise ConfigError("[servers] must be a table")

        resolved = cls(
            editor=editor or data.get("editor") or DEFAULT_EDITOR,
            git_ui=git_ui or data.get("git_ui") or DEFAULT_GIT_UI,
            servers=ServersConfig.from_dict(servers),
        )
        resolved.warn_missing_tools()
        return resolved

    def warn_missing_tools(self) -> None:
        """Log a warning for configured commands that are not on PATH."""
        for label, command in (("editor", self.editor), ("git_ui", self.git_ui)):
            binary = _command_bin(command)
            if binary and shutil.which(binary) is None:
                logger.warning(f"{label} command '{command}' not found in PATH")
