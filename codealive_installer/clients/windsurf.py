"""Windsurf adapter."""

from pathlib import Path

from codealive_installer.clients.base import JsonConfigClient
from codealive_installer.host import Platform


class WindsurfClient(JsonConfigClient):
    name = "Windsurf"

    def config_path(self) -> Path:
        if self.host.platform is Platform.WINDOWS:
            return self.host.app_data_dir() / "Codeium" / "windsurf" / "mcp_config.json"
        if self.host.platform is Platform.LINUX:
            return self.host.home / ".config" / "windsurf" / "mcp.json"
        return self.host.home / ".codeium" / "windsurf" / "mcp_config.json"
