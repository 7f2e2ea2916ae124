"""Zed adapter.

Zed stores MCP servers as "context servers" inside its main settings.json,
which usually carries user comments, so edits must preserve formatting.
"""

from pathlib import Path
from typing import Any

from codealive_installer.clients.base import JsonConfigClient


class ZedClient(JsonConfigClient):
    name = "Zed"
    server_property = "context_servers"

    def config_path(self) -> Path:
        return self.host.xdg_config_home() / "zed" / "settings.json"

    def build_entry(self, api_key: str) -> dict[str, Any]:
        return {"source": "custom", **super().build_entry(api_key)}

    def is_client_supported(self) -> bool:
        # No Windows build; ~/.config alone says nothing about Zed
        if self.host.is_windows:
            return False
        return self.config_path().parent.exists()
