"""Project registry - named project directories in a JSON file.

The file is a flat object: `current` holds the current project name (or null)
and every other key maps a project name to its absolute path. It is always
rewritten whole.

PUBLIC API:
  - Projects: In-memory registry
  - ensure_projects_db: Create an empty registry file if missing
  - load_projects: Read the registry
  - save_projects: Write the registry
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .errors import ProjectError
from .paths import canon, projects_db_path, same_path

logger = logging.getLogger(__name__)


@dataclass
class Projects:
    """Registered projects.

    Attributes:
        current: Name of the current project, if any.
        projects: Project name to absolute path, in insertion order.
    """

    current: Optional[str] = None
    projects: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "Projects":
        if not isinstance(data, dict):
            raise ProjectError("Project registry must be a JSON object")
        current = data.get("current")
        projects = {name: path for name, path in data.items() if name != "current" and isinstance(path, str)}
        return cls(current=current, projects=projects)

    def to_dict(self) -> dict:
        return {"current": self.current, **self.projects}

    def get(self, name: str) -> Optional[Path]:
        path = self.projects.get(name)
        return Path(path) if path is not None else None

    def find_by_path(self, path: Path) -> Optional[str]:
        """Name of the project registered at `path`, compared canonically."""
        for name, registered in self.projects.items():
            if same_path(Path(registered), path):
                return name
        return None

    def add(self, name: str, path: Path, overwrite: bool = False) -> Path:
        """Register a project.

        Args:
            name: Project name.
            path: Project directory; stored canonicalized.
            overwrite: Replace the path of an existing name.

        Returns:
            The stored path.

        Raises:
            ProjectError: If the name exists (without overwrite) or the path is
                already registered under another name.
        """
        if name == "current":
            raise ProjectError("'current' is reserved and cannot be a project name")
        if name in self.projects and not overwrite:
            raise ProjectError(f"Project '{name}' already exists.")

        existing = self.find_by_path(path)
        if existing is not None and existing != name:
            raise ProjectError(f"That path is already tracked as '{existing}'.")

        abs_path = canon(path)
        self.projects[name] = str(abs_path)
        return abs_path

    def remove(self, name: str) -> Path:
        """Unregister a project, clearing `current` if it was current.

        Raises:
            ProjectError: If no project has that name.
        """
        if name not in self.projects:
            raise ProjectError(f"Project '{name}' not found")
        path = Path(self.projects.pop(name))
        if self.current == name:
            self.current = None
        return path


def ensure_projects_db() -> Path:
    """Create the registry file (and its directory) if it does not exist."""
    db_path = projects_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    if not db_path.exists():
        logger.debug(f"Creating empty project registry at {db_path}")
        save_projects(Projects())
    return db_path


def load_projects() -> Projects:
    """Read the registry.

    Raises:
        ProjectError: If the file is missing or not valid JSON.
    """
    db_path = projects_db_path()
    try:
        data = json.loads(db_path.read_text())
    except FileNotFoundError:
        raise ProjectError(f"Project registry not found at {db_path}") from None
    except json.JSONDecodeError as e:
        raise ProjectError(f"Project registry {db_path} is not valid JSON: {e}") from e
    return Projects.from_dict(data)


def save_projects(projects: Projects) -> None:
    db_path = projects_db_path()
    db_path.write_text(json.dumps(projects.to_dict(), indent=2) + "\n")
