"""OpenCode adapter."""

from pathlib import Path
from typing import Any

from codealive_installer.clients.base import JsonConfigClient, build_server_env
from codealive_installer.constants import MCP_ARGS, MCP_COMMAND


class OpenCodeClient(JsonConfigClient):
    """OpenCode lists MCP servers under ``mcp`` with the command as an array."""

    name = "OpenCode"
    server_property = "mcp"

    def config_path(self) -> Path:
        if self.host.is_windows:
            return self.host.app_data_dir() / "opencode" / "opencode.json"
        return self.host.home / ".config" / "opencode" / "opencode.json"

    def build_entry(self, api_key: str) -> dict[str, Any]:
        return {
            "type": "local",
            "command": [MCP_COMMAND, *MCP_ARGS],
            "enabled": True,
            "environment": build_server_env(api_key, self.settings),
        }
