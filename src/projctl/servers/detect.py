"""Project layout and dev command detection.

Guesses where a project's frontend and backend live and how to start them,
using only conventional paths and marker files. Nothing here has side effects;
the returned commands only do something once typed into a pane.

PUBLIC API:
  - detect_frontend_dir: First conventional frontend directory that exists
  - detect_backend_dir: First conventional backend directory that exists
  - detect_compose_file: Compose file at the project root
  - detect_dev_command: Shell command line that starts a dev server
  - detect_layout: All of the above bundled as a ProjectLayout
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Callable, Optional, Sequence

from ..types import ProjectLayout

logger = logging.getLogger(__name__)

type Which = Callable[[str], Optional[str]]

FRONTEND_CANDIDATES = ("apps/web", "web", "frontend", "client", "packages/web")
BACKEND_CANDIDATES = ("apps/api", "api", "backend", "server", "services/api", "packages/api")
COMPOSE_CANDIDATES = ("compose.yml", "docker-compose.yml")

# Every dev command tees into logs/app.log relative to the directory it runs in
LOG_SUFFIX = "2>&1 | tee logs/app.log"


def _first_existing(root: Path, candidates: Sequence[str]) -> Optional[Path]:
    for sub in candidates:
        candidate = root / sub
        if candidate.exists():
            return candidate
    return None


def detect_frontend_dir(root: Path) -> Optional[Path]:
    """Find the frontend directory of a project.

    Args:
        root: Project root.

    Returns:
        First existing path among FRONTEND_CANDIDATES, or None.
    """
    return _first_existing(root, FRONTEND_CANDIDATES)


def detect_backend_dir(root: Path) -> Optional[Path]:
    """Find the backend directory of a project."""
    return _first_existing(root, BACKEND_CANDIDATES)


def detect_compose_file(root: Path) -> Optional[Path]:
    """Find a compose file at the project root."""
    return _first_existing(root, COMPOSE_CANDIDATES)


def _logged(command: str) -> str:
    return f"mkdir -p logs && {command} {LOG_SUFFIX}"


def detect_dev_command(directory: Path, which: Which = shutil.which, shell: Optional[str] = None) -> str:
    """Guess the command that runs a dev server in `directory`.

    Marker files are checked in a fixed order and the first match wins:
    package.json, Cargo.toml, go.mod, then pyproject.toml/requirements.txt.
    Where a watcher or faster runner is installed it is preferred.

    Args:
        directory: Directory the command will run in.
        which: Installed-tool probe, shutil.which by default.
        shell: Fallback interactive shell (defaults to $SHELL, then sh).

    Returns:
        Shell command line for a POSIX shell.
    """
    if (directory / "package.json").exists():
        return _logged("(pnpm run dev || npm run dev || yarn dev)")

    if (directory / "Cargo.toml").exists():
        if which("cargo-watch"):
            return _logged("cargo watch -x run")
        return _logged("cargo run")

    if (directory / "go.mod").exists():
        if which("air"):
            return _logged("air")
        return _logged("go run ./...")

    if (directory / "pyproject.toml").exists() or (directory / "requirements.txt").exists():
        if which("uv"):
            return _logged("uv run python -m app")
        return _logged("python -m app")

    logger.info(f"No dev command detected in {directory}")
    shell = shell or os.environ.get("SHELL") or "sh"
    return f"echo 'No dev command detected'; {shell}"


def detect_layout(root: Path) -> ProjectLayout:
    """Detect frontend, backend, and compose file for a project root."""
    return ProjectLayout(
        root=root,
        frontend_dir=detect_frontend_dir(root),
        backend_dir=detect_backend_dir(root),
        compose_file=detect_compose_file(root),
    )
