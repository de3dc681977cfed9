"""Project context switcher command line.

Entry point for projctl. Every invocation is a single command line call
(`projctl use shop`, `projctl servers --refresh`, ...).
"""

import logging
import os

from .app import app

logging.basicConfig(
    level=os.environ.get("PROJCTL_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%H:%M:%S",
)


def main():
    """Run projctl as a command line tool."""
    app.cli()


if __name__ == "__main__":
    main()
