"""Per-project tmux servers sessions.

PUBLIC API:
  - ServersOrchestrator: Create/refresh/reset/kill a project's session and attach
  - ServersMode: Requested transition
  - detect_dev_command: Guess a directory's dev server command
  - detect_layout: Guess frontend/backend dirs and compose file
  - build_seed_line: Compose the line typed into a pane
  - shell_quote: POSIX single-quote a value
"""

from .detect import (
    detect_backend_dir,
    detect_compose_file,
    detect_dev_command,
    detect_frontend_dir,
    detect_layout,
)
from .orchestrator import ServersMode, ServersOrchestrator
from .seed import build_seed_line, shell_quote

__all__ = [
    "ServersOrchestrator",
    "ServersMode",
    "detect_frontend_dir",
    "detect_backend_dir",
    "detect_compose_file",
    "detect_dev_command",
    "detect_layout",
    "build_seed_line",
    "shell_quote",
]
