"""projctl commands."""

from .projects import add, use, ls, remove, path
from .execution import run, edit, git, logs
from .servers import servers
from .db import db_create

__all__ = ["add", "use", "ls", "remove", "path", "run", "edit", "git", "logs", "servers", "db_create"]
