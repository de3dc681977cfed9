"""Servers command - tmux session of dev servers for the current project."""

from typing import Any, Optional

from ..app import app
from ..errors import ProjctlError, markdown_error_response
from ..paths import current_project_dir
from ..servers import ServersMode
from ._helpers import servers_response


@app.command(
    display="markdown",
    typer={"help": "Setup/attach tmux servers session for current project"},
    fastmcp={"enabled": False},
)
def servers(
    state, refresh: bool = False, reset: bool = False, kill: bool = False, config: Optional[str] = None
) -> dict[str, Any]:
    """Create or attach to the current project's servers session.

    The session `<project>-servers` lives on a dedicated tmux server and has
    frontend, backend, docker, logs and scratch windows. The docker window is
    split into compose, postgres logs, redis logs and a spare shell.

    Args:
        state: Application state
        refresh: Recreate missing windows, rebuild docker panes, reseed commands
        reset: Kill the session and create it again
        kill: Kill the session
        config: Config file to read instead of the default one

    Returns:
        Markdown summary, shown once the terminal detaches
    """
    try:
        mode = ServersMode.from_flags(refresh=refresh, reset=reset, kill=kill)
        project_dir = current_project_dir()
        resolved = state.config(config_file=config)
        report = state.orchestrator(resolved.servers).run(project_dir, mode)
    except ProjctlError as e:
        return markdown_error_response(str(e))

    return servers_response(report)
