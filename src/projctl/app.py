"""projctl ReplKit2 application.

Main application object for the project context switcher. Commands register
themselves on import through the @app.command decorator and are exposed as a
Typer command line via app.cli().
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from replkit2 import App

from .config import ResolvedConfig, ServersConfig, load_config
from .paths import expand_tilde
from .runner import ShellRunner
from .servers import ServersOrchestrator
from .tmux import TmuxClient


@dataclass
class ProjctlState:
    """Application state shared by all commands.

    Attributes:
        runner: Runner for every external program projctl starts.
        config_path: Config file to read; None means the default location.
    """

    runner: ShellRunner = field(default_factory=ShellRunner)
    config_path: Optional[Path] = None

    def config(
        self,
        editor: Optional[str] = None,
        git_ui: Optional[str] = None,
        config_file: Optional[str] = None,
    ) -> ResolvedConfig:
        """Load and resolve configuration with command line overrides.

        Args:
            editor: Editor command from the command line
            git_ui: Git UI command from the command line
            config_file: Config file from --config; beats config_path and $PROJCTL_CONFIG
        """
        path = expand_tilde(config_file) if config_file else self.config_path
        return ResolvedConfig.resolve(load_config(path), editor=editor, git_ui=git_ui)

    def orchestrator(self, servers: ServersConfig) -> ServersOrchestrator:
        return ServersOrchestrator(TmuxClient(self.runner, servers.label), servers)


# Must be created before command imports for decorator registration
app = App("projctl", ProjctlState)


# Command imports trigger @app.command decorator registration
from .commands import projects  # noqa: E402, F401
from .commands import execution  # noqa: E402, F401
from .commands import servers  # noqa: E402, F401
from .commands import db  # noqa: E402, F401
