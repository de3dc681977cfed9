"""Shared response builders for commands.

PUBLIC API:
  - done_response: Markdown response listing what a command did
  - servers_response: Markdown response for a servers invocation
"""

from typing import Any

from ..types import ServersReport

__all__ = ["done_response", "servers_response"]

_SERVERS_HEADINGS = {
    "created": "Created session",
    "reset": "Reset session",
    "refreshed": "Refreshed session",
    "attached": "Attached to session",
    "killed": "Killed session",
    "nothing-to-kill": "No session to kill",
}


def done_response(lines: list[str], status: str = "success") -> dict[str, Any]:
    """Build a plain markdown response from message lines.

    Args:
        lines: One text element per line
        status: Frontmatter status

    Returns:
        Markdown display dict
    """
    return {
        "elements": [{"type": "text", "content": line} for line in lines],
        "frontmatter": {"status": status},
    }


def servers_response(report: ServersReport) -> dict[str, Any]:
    """Summarize a servers invocation after the user detaches."""
    elements: list[dict[str, Any]] = [
        {"type": "heading", "content": f"{_SERVERS_HEADINGS[report.action]} `{report.session}`", "level": 2}
    ]

    if report.windows:
        elements.append({"type": "text", "content": "Created windows:"})
        elements.append({"type": "list", "items": [f"`{w}`" for w in report.windows], "ordered": False})

    if report.seeded:
        elements.append({"type": "text", "content": "Seeded:"})
        elements.append({"type": "list", "items": [f"`{t}`" for t in report.seeded], "ordered": False})

    return {
        "elements": elements,
        "frontmatter": {
            "status": "success",
            "session": report.session,
            "action": report.action,
            "panes": len(report.panes),
        },
    }
