"""Project context switcher with per-project tmux server sessions.

Tracks named project directories, remembers the current one, and runs
convenience actions against it: editor, git UI, logs, a database, and a tmux
session of dev servers on a dedicated tmux server. Built on ReplKit2, exposed
as a Typer command line.

PUBLIC API:
  - app: ReplKit2 application instance with projctl commands
"""

from .app import app

__version__ = "2.0.0"
__all__ = ["app"]
