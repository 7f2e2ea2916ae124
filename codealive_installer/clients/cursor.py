"""Cursor adapter."""

from pathlib import Path

from codealive_installer.clients.base import JsonConfigClient
from codealive_installer.host import Platform


class CursorClient(JsonConfigClient):
    """Cursor keeps global MCP servers in mcp.json under ``mcpServers``."""

    name = "Cursor"

    def config_path(self) -> Path:
        if self.host.platform is Platform.WINDOWS:
            return self.host.app_data_dir() / "Cursor" / "mcp.json"
        if self.host.platform is Platform.LINUX:
            return self.host.home / ".config" / "cursor" / "mcp.json"
        return self.host.home / ".cursor" / "mcp.json"
