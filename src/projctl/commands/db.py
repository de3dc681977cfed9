"""Database command - create a Postgres database with psql."""

import os
from typing import Any, Mapping

from ..app import app
from ..errors import ProjctlError, ProjectError, markdown_error_response
from ._helpers import done_response


def _psql_args(name: str, environ: Mapping[str, str]) -> list[str]:
    """Build psql arguments from PG* variables with local defaults."""
    user = environ.get("PGUSER", "postgres")
    host = environ.get("PGHOST", "localhost")
    port = environ.get("PGPORT", "5432")
    identifier = name.replace('"', '""')
    return ["-U", user, "-h", host, "-p", port, "-c", f'CREATE DATABASE "{identifier}"']


@app.command(
    display="markdown",
    typer={"name": "db-create", "help": "Create a Postgres DB"},
    fastmcp={"enabled": False},
)
def db_create(state, name: str) -> dict[str, Any]:
    """Create a Postgres database.

    Connection settings come from PGUSER, PGPASSWORD, PGHOST and PGPORT,
    defaulting to postgres/postgres on localhost:5432.
    """
    environ = os.environ
    try:
        if not name:
            raise ProjectError("Database name must not be empty")
        env = {**environ, "PGPASSWORD": environ.get("PGPASSWORD", "postgres")}
        result = state.runner.capture("psql", _psql_args(name, environ), env=env)
        state.runner.check(result)
        return done_response([f"Created database '{name}'"])
    except ProjctlError as e:
        return markdown_error_response(f"Failed to create DB: {e}")
