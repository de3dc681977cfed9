"""Commands that run programs inside the current project - run, edit, git, logs."""

import logging
import shlex
import shutil
from pathlib import Path
from typing import Any, Optional

from ..app import app
from ..errors import ConfigError, ProjctlError, ProjectError, markdown_error_response, string_error_response
from ..paths import current_project_dir
from ._helpers import done_response

logger = logging.getLogger(__name__)


def _split_command(command: str, label: str) -> tuple[str, list[str]]:
    """Split a configured command line into program and arguments."""
    try:
        parts = shlex.split(command)
    except ValueError as e:
        raise ConfigError(f"Cannot parse {label} command '{command}': {e}") from e
    if not parts:
        raise ConfigError(f"{label} command is empty")
    return parts[0], parts[1:]


@app.command(
    display="text",
    typer={"help": "Run a command inside the current project"},
    fastmcp={"enabled": False},
)
def run(state, cmd: list[str]) -> str:
    """Run a command in the current project and print its output.

    Args:
        state: Application state
        cmd: Program followed by its arguments
    """
    try:
        if not cmd:
            raise ProjectError("No command given")
        project_dir = current_project_dir()
        result = state.runner.check(state.runner.capture(cmd[0], cmd[1:], cwd=project_dir))
        return result.stdout
    except ProjctlError as e:
        return string_error_response(str(e))


@app.command(
    display="markdown",
    typer={"help": "Open editor in current project"},
    fastmcp={"enabled": False},
)
def edit(state, editor: Optional[str] = None, config: Optional[str] = None) -> dict[str, Any]:
    """Open the configured editor on the current project.

    Args:
        state: Application state
        editor: Editor command line overriding the config file
        config: Config file to read instead of the default one
    """
    try:
        project_dir = current_project_dir()
        resolved = state.config(editor=editor, config_file=config)
        program, args = _split_command(resolved.editor, "editor")
        state.runner.run(program, [*args, "."], cwd=project_dir)
        return done_response([f"Closed {program} in {project_dir}"])
    except ProjctlError as e:
        return markdown_error_response(str(e))


@app.command(
    display="markdown",
    typer={"help": "Open git UI in current project"},
    fastmcp={"enabled": False},
)
def git(state, git_ui: Optional[str] = None, config: Optional[str] = None) -> dict[str, Any]:
    """Open the configured git UI on the current project.

    The project directory is passed as `-p <dir>` after the configured
    arguments.
    """
    try:
        project_dir = current_project_dir()
        resolved = state.config(git_ui=git_ui, config_file=config)
        program, args = _split_command(resolved.git_ui, "git_ui")
        state.runner.run(program, [*args, "-p", str(project_dir)], cwd=project_dir)
        return done_response([f"Closed {program} in {project_dir}"])
    except ProjctlError as e:
        return markdown_error_response(str(e))


@app.command(
    display="markdown",
    typer={"help": "Open logs in current project (or given path)"},
    fastmcp={"enabled": False},
)
def logs(state, path: Optional[str] = None) -> dict[str, Any]:
    """Follow the `*.log` files in `<project>/logs`.

    Uses lnav when installed, otherwise tail -F.

    Args:
        state: Application state
        path: Directory to use instead of the current project, relative to cwd
    """
    try:
        if path is None:
            target = current_project_dir()
        else:
            target = (Path.cwd() / path).resolve()
            if not target.is_dir():
                raise ProjectError(f"Not a directory: {target}")

        log_dir = target / "logs"
        files = sorted(p.name for p in log_dir.glob("*.log")) if log_dir.is_dir() else []
        if not files:
            return done_response([f"No logs in {log_dir}."])

        if shutil.which("lnav"):
            state.runner.run("lnav", files, cwd=log_dir)
        else:
            state.runner.run("tail", ["-F", *files], cwd=log_dir)
        return done_response([f"Followed {len(files)} log file(s) in {log_dir}"])
    except ProjctlError as e:
        return markdown_error_response(str(e))
