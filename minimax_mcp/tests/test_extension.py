"""End-to-end tests for the extension lifecycle."""

import json
from unittest.mock import patch

import pytest

from minimax_mcp.extension import MiniMaxExtension
from minimax_mcp.plugins.types import ToolStatus
from minimax_mcp.ui import LEVEL_INFO, LEVEL_WARNING


KEY = "sk-extension-key-12345678"


@pytest.fixture
def dirs(tmp_path):
    workspace = tmp_path / "project"
    home = tmp_path / "home"
    workspace.mkdir()
    home.mkdir()
    return workspace, home


@pytest.fixture
def clean_env():
    with patch.dict('os.environ', {'MINIMAX_TRACE_LOG': ''}, clear=True):
        yield


def _extension(dirs, ui, **kwargs):
    workspace, home = dirs
    return MiniMaxExtension(ui=ui, workspace=workspace, home=home, **kwargs)


class TestSessionStart:

    def test_unconfigured_warns(self, dirs, fake_ui, clean_env):
        extension = _extension(dirs, fake_ui)
        extension.on_session_start()

        assert fake_ui.notifications == [
            ("MiniMax API key not configured. Use /minimax-configure", LEVEL_WARNING)
        ]

    def test_configured_from_env(self, dirs, fake_ui, clean_env):
        with patch.dict('os.environ', {'MINIMAX_API_KEY': KEY}):
            extension = _extension(dirs, fake_ui)
        extension.on_session_start()

        assert extension.config.configured is True
        assert fake_ui.notifications == [
            ("MiniMax MCP tools available (web_search, understand_image)", LEVEL_INFO)
        ]

    def test_configured_from_project_settings(self, dirs, fake_ui, clean_env):
        workspace, _ = dirs
        settings = workspace / ".pi" / "settings.json"
        settings.parent.mkdir()
        settings.write_text(json.dumps({"minimax": {"key": KEY}}))

        extension = _extension(dirs, fake_ui)

        assert extension.config.api_key == KEY

    def test_env_file_loaded(self, dirs, fake_ui, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(f"MINIMAX_API_KEY={KEY}\nMINIMAX_API_HOST=https://env.file.host/\n")

        extension = _extension(dirs, fake_ui, env_file=str(env_file))

        assert extension.config.api_key == KEY
        assert extension.config.api_host == "https://env.file.host"

    def test_missing_env_file_ignored(self, dirs, fake_ui, clean_env, tmp_path):
        extension = _extension(dirs, fake_ui, env_file=str(tmp_path / "missing.env"))
        assert extension.config.configured is False

    def test_no_ui_is_silent(self, dirs, clean_env):
        _extension(dirs, None).on_session_start()


class TestTools:

    def test_schemas(self, dirs, fake_ui, clean_env):
        extension = _extension(dirs, fake_ui)
        assert [s.name for s in extension.get_tool_schemas()] == ['understand_image', 'web_search']

    def test_unknown_tool(self, dirs, fake_ui, clean_env):
        extension = _extension(dirs, fake_ui)
        with pytest.raises(ValueError, match="Unknown tool"):
            extension.execute_tool("minimax_auth", {})

    def test_plugin_configs_applied(self, dirs, fake_ui, clean_env):
        extension = _extension(dirs, fake_ui, plugin_configs={'web_search': {'timeout': 3}})
        assert extension.registry.get_plugin('web_search')._timeout == 3

    def test_configure_then_search(self, dirs, fake_ui, clean_env, mock_api):
        extension = _extension(dirs, fake_ui)
        mock_api.respond(200, {"results": [{"title": "Hit", "url": "https://hit"}]})

        refused = extension.execute_tool("web_search", {"query": "python"})
        assert refused.is_error is True
        assert mock_api.requests == []

        extension.run_command("minimax-configure", f"--key={KEY}")
        result = extension.execute_tool("web_search", {"query": "python"})

        assert result.status == ToolStatus.COMPLETE
        assert "1. Hit" in result.text
        assert mock_api.requests[0].headers["Authorization"] == f"Bearer {KEY}"

    def test_rejected_key_requires_reconfigure(self, dirs, fake_ui, clean_env, mock_api):
        with patch.dict('os.environ', {'MINIMAX_API_KEY': KEY}):
            extension = _extension(dirs, fake_ui)
        mock_api.respond(403, text="forbidden")

        extension.execute_tool("web_search", {"query": "python"})
        image = extension.execute_tool(
            "understand_image", {"prompt": "What?", "image_url": "https://e.com/a.png"}
        )

        assert extension.config.configured is False
        assert "not configured" in image.text
        assert len(mock_api.requests) == 1


class TestCommands:

    def test_unknown_command(self, dirs, fake_ui, clean_env):
        extension = _extension(dirs, fake_ui)
        with pytest.raises(ValueError, match="Unknown command"):
            extension.run_command("minimax-nope")

    def test_status(self, dirs, fake_ui, clean_env):
        with patch.dict('os.environ', {'MINIMAX_API_KEY': KEY}):
            extension = _extension(dirs, fake_ui)
            extension.run_command("minimax-status")
        assert "MiniMax MCP Configured" in fake_ui.last_message

    def test_clear(self, dirs, fake_ui, clean_env):
        with patch.dict('os.environ', {'MINIMAX_API_KEY': KEY}):
            extension = _extension(dirs, fake_ui)
        extension.run_command("minimax-configure", "--clear")
        assert extension.config.configured is False

    def test_completions(self, dirs, fake_ui, clean_env):
        extension = _extension(dirs, fake_ui)
        values = [c.value for c in extension.get_command_completions("minimax-configure", "--c")]
        assert values == ["--clear"]
        assert extension.get_command_completions("minimax-status", "") == []

    def test_shutdown(self, dirs, fake_ui, clean_env):
        extension = _extension(dirs, fake_ui)
        extension.shutdown()
        assert extension.registry.list_enabled() == []
