"""Project registry commands - add, use, list, remove, path."""

import logging
from pathlib import Path
from typing import Any, Optional

import typer

from ..app import app
from ..errors import ProjctlError, ProjectError, markdown_error_response, string_error_response, table_error_response
from ..paths import (
    autodetected_project,
    autodetected_projects,
    canon,
    clear_current_project,
    current_project_dir,
    projects_dir,
    write_current_project,
)
from ..registry import Projects, ensure_projects_db, load_projects, save_projects
from ._helpers import done_response

logger = logging.getLogger(__name__)


def _load() -> Projects:
    ensure_projects_db()
    return load_projects()


def _current_path() -> Optional[Path]:
    try:
        return canon(current_project_dir())
    except ProjectError:
        return None


def _parse_selection(answer: str, count: int) -> list[int]:
    """Parse "1, 3" style picks into zero-based indexes."""
    picks = []
    for part in answer.replace(",", " ").split():
        if not part.isdigit() or not 1 <= int(part) <= count:
            raise ProjectError(f"Invalid selection: {part}")
        index = int(part) - 1
        if index not in picks:
            picks.append(index)
    return picks


def _insert(projects: Projects, name: str, path: Path) -> str:
    """Register an auto-detected project, asking before overwriting a name.

    Returns:
        Line describing what happened.
    """
    if name in projects.projects:
        if not typer.confirm(f"Project '{name}' exists. Overwrite path?", default=False):
            return f"Skipped '{name}'"
        projects.add(name, path, overwrite=True)
        return f"Updated '{name}' -> {path}"

    existing = projects.find_by_path(path)
    if existing is not None:
        return f"Skipping '{name}': path already tracked as '{existing}'."

    projects.add(name, path)
    return f"Added '{name}'"


def _switch_to(name: str, path: Path, persist: bool = True) -> str:
    if persist:
        projects = _load()
        projects.current = name
        save_projects(projects)
    write_current_project(path)
    return f"Switched to project '{name}' ({path})"


@app.command(
    display="markdown",
    typer={"help": "Add a named project"},
    fastmcp={"enabled": False},
)
def add(state, name: Optional[str] = None, path: Optional[str] = None) -> dict[str, Any]:
    """Add a project to the registry.

    Args:
        state: Application state (unused)
        name: Auto-detected project name, or the name for `path`
        path: Arbitrary project directory to register as `name`

    With neither argument, pick from auto-detected projects in ~/projects.
    """
    try:
        projects = _load()

        if name is None and path is not None:
            raise ProjectError("Path given but no name. Use projctl add <name> <path>")

        if name is not None and path is not None:
            abs_path = projects.add(name, Path(path))
            save_projects(projects)
            return done_response([f"Added project {name} -> {abs_path}"])

        if name is not None:
            found = dict(autodetected_projects()).get(name)
            if found is None:
                raise ProjectError(f"Auto-detected project '{name}' not found under {projects_dir()}")
            line = _insert(projects, name, found)
            save_projects(projects)
            return done_response([line])

        candidates = [(n, p) for n, p in autodetected_projects() if projects.find_by_path(p) is None]
        if not candidates:
            return done_response([f"No auto-detected projects to add in `{projects_dir()}`."])

        for i, (n, p) in enumerate(candidates, 1):
            typer.echo(f"{i:>3}. {n}   ({p})")
        answer = typer.prompt("Select projects to add (numbers, comma separated)", default="", show_default=False)
        picks = _parse_selection(answer, len(candidates))
        if not picks:
            return done_response(["Nothing selected."])

        lines = [_insert(projects, *candidates[i]) for i in picks]
        save_projects(projects)
        return done_response(lines)
    except ProjctlError as e:
        return markdown_error_response(str(e))


@app.command(
    display="markdown",
    typer={"help": "Switch to a new project"},
    fastmcp={"enabled": False},
)
def use(state, name: Optional[str] = None) -> dict[str, Any]:
    """Make a project current.

    Args:
        state: Application state (unused)
        name: Project name; omit to pick interactively

    An auto-detected project that is not registered yet can be added on the
    way; declining still switches to it without registering.
    """
    try:
        projects = _load()

        if name is not None:
            registered = projects.get(name)
            if registered is not None:
                return done_response([_switch_to(name, registered)])

            auto = autodetected_project(name)
            if auto is None:
                raise ProjectError(f"Project '{name}' not found. Hint: run `projctl add` to add it.")

            if typer.confirm(f"'{name}' is auto-detected but not added. Add now?", default=True):
                line = _insert(projects, name, auto)
                save_projects(projects)
                return done_response([line, _switch_to(name, auto, persist=name in projects.projects)])
            return done_response([_switch_to(name, auto, persist=False)])

        items = list(projects.projects.items())
        if not items:
            return done_response(
                [f"No added projects. Hint: run `projctl add` to add from '{projects_dir()}'."]
            )

        current = _current_path()
        default = next((i for i, (_, p) in enumerate(items, 1) if canon(Path(p)) == current), 1)
        for i, (n, p) in enumerate(items, 1):
            typer.echo(f"{i:>3}. {n}    {p}")
        choice = typer.prompt("Select project", default=default, type=int)
        if not 1 <= choice <= len(items):
            raise ProjectError(f"Invalid selection: {choice}")

        selected, path = items[choice - 1]
        return done_response([_switch_to(selected, Path(path))])
    except ProjctlError as e:
        return markdown_error_response(str(e))


@app.command(
    display="table",
    headers=["Current", "Name", "Path"],
    typer={"name": "list", "help": "List all added projects"},
    fastmcp={"enabled": False},
)
def ls(state) -> list[dict]:
    """List registered projects, marking the current one."""
    try:
        projects = _load()
    except ProjctlError as e:
        return table_error_response(str(e))

    current = _current_path()
    rows = []
    for name, path in projects.projects.items():
        is_current = current is not None and canon(Path(path)) == current
        rows.append({"Current": "●" if is_current else "", "Name": name, "Path": path})

    if not rows:
        logger.info("No projects added yet")
    logger.info(f"Hint: run `projctl add` to add auto-detected projects from `{projects_dir()}`.")
    return rows


@app.command(
    display="markdown",
    typer={"help": "Remove a named project"},
    fastmcp={"enabled": False},
)
def remove(state, name: str) -> dict[str, Any]:
    """Remove a project from the registry.

    Removing the current project also clears the current project pointer.
    """
    try:
        projects = _load()
        was_current = projects.current == name
        projects.remove(name)
        save_projects(projects)
        if was_current:
            clear_current_project()
        return done_response([f"Removed project '{name}'"])
    except ProjctlError as e:
        return markdown_error_response(str(e))


@app.command(
    display="text",
    typer={"help": "Print current project path (or named project's path)"},
    fastmcp={"enabled": False},
)
def path(state, name: Optional[str] = None) -> str:
    """Print a project's directory."""
    try:
        if name is None:
            return str(current_project_dir())
        registered = _load().get(name)
        if registered is None:
            raise ProjectError(f"Project '{name}' not found")
        return str(registered)
    except ProjctlError as e:
        return string_error_response(str(e))

