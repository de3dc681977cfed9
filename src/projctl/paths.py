"""Well-known locations and the current project pointer.

PUBLIC API:
  - expand_tilde: Expand ~ in a path string
  - projects_db_path: JSON project registry location
  - state_path: Current project pointer file location
  - projects_dir: Directory scanned for auto-detected projects
  - canon: Canonical absolute form of a path
  - same_path: Whether two paths name the same location
  - current_project_dir: Read the current project pointer
  - write_current_project: Point the current project at a directory
  - clear_current_project: Remove the pointer
  - autodetected_projects: Directories under projects_dir
  - autodetected_project: One auto-detected project by name
"""

import os
from pathlib import Path
from typing import Optional

from .errors import ProjectError

PROJECTS_DB = "~/.config/projctl/projects.json"
STATE = "~/.cache/current_project"
PROJECTS_DIR = "~/projects"


def expand_tilde(path: str) -> Path:
    return Path(os.path.expanduser(path))


def projects_db_path() -> Path:
    return expand_tilde(PROJECTS_DB)


def state_path() -> Path:
    return expand_tilde(STATE)


def projects_dir() -> Path:
    return expand_tilde(PROJECTS_DIR)


def canon(path: Path) -> Path:
    """Resolve a path, falling back to a cwd-joined absolute path."""
    try:
        return path.resolve(strict=True)
    except OSError:
        return path if path.is_absolute() else Path.cwd() / path


def same_path(a: Path, b: Path) -> bool:
    return canon(a) == canon(b)


def current_project_dir() -> Path:
    """Get the current project directory.

    Raises:
        ProjectError: If no project is current or its directory is gone.
    """
    pointer = state_path()
    try:
        text = pointer.read_text()
    except FileNotFoundError:
        raise ProjectError("No current project set. Hint: run `projctl use <name>`.") from None

    path = Path(text.strip())
    if not text.strip():
        raise ProjectError("No current project set. Hint: run `projctl use <name>`.")
    if not path.exists():
        raise ProjectError(f"Current project path does not exist: {path}")
    return path


def write_current_project(path: Path) -> None:
    pointer = state_path()
    pointer.parent.mkdir(parents=True, exist_ok=True)
    pointer.write_text(str(path))


def clear_current_project() -> None:
    state_path().unlink(missing_ok=True)


def autodetected_projects() -> list[tuple[str, Path]]:
    """All directories in projects_dir as (name, path), sorted by name."""
    root = projects_dir()
    if not root.is_dir():
        return []
    return sorted((p.name, p) for p in root.iterdir() if p.is_dir())


def autodetected_project(name: str) -> Optional[Path]:
    candidate = projects_dir() / name
    return candidate if candidate.is_dir() else None
