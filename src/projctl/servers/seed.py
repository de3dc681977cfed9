"""Seed command lines typed into freshly (re)built panes.

PUBLIC API:
  - shell_quote: Single-quote a path for a POSIX shell
  - build_seed_line: Compose `cd <dir> && clear && <command>`
  - compose_command: Pane command for the compose/watch docker pane
  - DOCKER_PANE_COMMANDS: Fixed commands for the remaining docker panes
"""

from pathlib import Path
from typing import Optional

from ..types import ProjectLayout

NO_BACKEND_COMMAND = "echo 'No backend dir found'; exec $SHELL"
SPARE_SHELL_COMMAND = "exec $SHELL"

POSTGRES_LOGS_COMMAND = (
    "docker ps --format '{{.Names}}' | grep -Ei 'postgres|pg' | head -n1 "
    "| xargs -r docker logs -f || echo 'No postgres'"
)
REDIS_LOGS_COMMAND = (
    "docker ps --format '{{.Names}}' | grep -Ei '^redis' | head -n1 "
    "| xargs -r docker logs -f || echo 'No redis'"
)
DOCKER_PS_WATCH_COMMAND = "watch -n 1 \"docker ps --format 'table {{.Names}}\\t{{.Image}}\\t{{.Status}}'\""

# Panes after the compose pane, by position
DOCKER_PANE_COMMANDS = (POSTGRES_LOGS_COMMAND, REDIS_LOGS_COMMAND, SPARE_SHELL_COMMAND)


def shell_quote(value: str | Path) -> str:
    """Wrap a value in single quotes, escaping embedded single quotes.

    Every quote becomes `'\\''` (close, escaped quote, reopen), so the result
    is one literal word for any POSIX shell.
    """
    text = str(value)
    return "'" + text.replace("'", "'\\''") + "'"


def build_seed_line(cwd: str | Path, command: str) -> str:
    """Build the line sent into a pane.

    Args:
        cwd: Directory to enter before running.
        command: Shell command to run there.

    Returns:
        `cd <quoted cwd> && clear && <command>`
    """
    return f"cd {shell_quote(cwd)} && clear && {command}"


def compose_command(compose_file: Optional[Path]) -> str:
    """Command for the first docker pane.

    With a compose file the stack is brought up and its services watched;
    otherwise all running containers are watched. The pane already sits in the
    project root, so the compose file is referenced by its fixed basename.
    """
    if compose_file is None:
        return DOCKER_PS_WATCH_COMMAND
    name = compose_file.name
    return f"docker compose -f {name} up -d && watch -n 1 'docker compose -f {name} ps'"


def docker_pane_commands(layout: ProjectLayout, count: int) -> list[str]:
    """Commands for `count` docker panes in positional order.

    Pane 0 runs compose/watch, 1 follows postgres logs, 2 follows redis logs,
    3 is a spare shell. Any extra panes also get a shell.
    """
    commands = [compose_command(layout.compose_file), *DOCKER_PANE_COMMANDS]
    commands.extend([SPARE_SHELL_COMMAND] * max(0, count - len(commands)))
    return commands[:count]
