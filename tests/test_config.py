"""Tests for configuration loading and resolution."""

import logging
from pathlib import Path

import pytest

from projctl.config import ResolvedConfig, ServersConfig, default_config_path, load_config
from projctl.errors import ConfigError


class TestServersConfig:
    """Tests for ServersConfig defaults and validation."""

    def test_defaults(self):
        config = ServersConfig()

        assert config.label == "projctl"
        assert config.windows == ("frontend", "backend", "docker", "logs", "scratch")
        assert config.first_window == "frontend"
        assert config.docker_panes == 4
        assert config.session_name(Path("/w/shop")) == "shop-servers"

    def test_from_dict_overrides(self):
        config = ServersConfig.from_dict({"label": "ctl", "docker_panes": 2, "session_suffix": "-dev"})

        assert config.label == "ctl"
        assert config.docker_panes == 2
        assert config.session_name(Path("/w/shop")) == "shop-dev"
        assert config.windows == ServersConfig().windows

    def test_session_name_rewrites_dots_and_colons(self):
        config = ServersConfig(session_suffix=".dev")

        assert config.session_name(Path("/w/my.app")) == "my_app_dev"
        assert config.session_name(Path("/w/a:b")) == "a_b_dev"

    def test_windows_list_becomes_tuple(self):
        config = ServersConfig.from_dict(
            {"windows": ["docker", "frontend", "backend"], "frontend_window": "frontend"}
        )

        assert config.windows == ("docker", "frontend", "backend")
        assert config.first_window == "docker"

    @pytest.mark.parametrize(
        "data,message",
        [
            ({"colour": "red"}, "Unknown servers settings: colour"),
            ({"windows": "frontend"}, "list of names"),
            ({"windows": []}, "at least one window"),
            ({"windows": ["frontend", "frontend", "backend", "docker"]}, "duplicates"),
            ({"windows": ["frontend", "backend"]}, "docker_window 'docker'"),
            ({"docker_panes": 0}, "at least 1"),
            ({"docker_panes": "4"}, "must be an integer"),
            ({"label": ""}, "label must not be empty"),
        ],
    )
    def test_invalid(self, data, message):
        with pytest.raises(ConfigError, match=message):
            ServersConfig.from_dict(data)


class TestLoadConfig:
    """Tests for locating and reading the config file."""

    def test_default_path(self, home):
        assert default_config_path() == home / ".config" / "projctl" / "config.toml"

    def test_env_override(self, home, monkeypatch):
        monkeypatch.setenv("PROJCTL_CONFIG", "~/elsewhere.toml")

        assert default_config_path() == home / "elsewhere.toml"

    def test_missing_file_is_empty(self, tmp_path):
        assert load_config(tmp_path / "none.toml") == {}

    def test_reads_toml(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('editor = "code -w"\n\n[servers]\ndocker_panes = 2\n')

        assert load_config(path) == {"editor": "code -w", "servers": {"docker_panes": 2}}

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("editor = \n")

        with pytest.raises(ConfigError, match="parsing"):
            load_config(path)


class TestResolvedConfig:
    """Tests for merging command line, file and defaults."""

    def test_defaults(self):
        config = ResolvedConfig.resolve({})

        assert config.editor == "nvim"
        assert config.git_ui == "lazygit"
        assert config.servers == ServersConfig()

    def test_file_beats_defaults(self):
        config = ResolvedConfig.resolve({"editor": "hx", "git_ui": "gitui"})

        assert (config.editor, config.git_ui) == ("hx", "gitui")

    def test_command_line_beats_file(self):
        config = ResolvedConfig.resolve({"editor": "hx"}, editor="vim", git_ui="tig")

        assert (config.editor, config.git_ui) == ("vim", "tig")

    def test_servers_table(self):
        config = ResolvedConfig.resolve({"servers": {"label": "other"}})

        assert config.servers.label == "other"

    @pytest.mark.parametrize("data", [{"editor": 3}, {"servers": "yes"}])
    def test_invalid_types(self, data):
        with pytest.raises(ConfigError):
            ResolvedConfig.resolve(data)

    def test_missing_tools_only_warn(self, monkeypatch, caplog):
        monkeypatch.setattr("projctl.config.shutil.which", lambda name: None)

        with caplog.at_level(logging.WARNING, logger="projctl.config"):
            config = ResolvedConfig.resolve({"editor": "no-such-editor --wait"})

        assert config.editor == "no-such-editor --wait"
        assert "editor command 'no-such-editor --wait' not found in PATH" in caplog.text
        assert "git_ui command 'lazygit' not found in PATH" in caplog.text
