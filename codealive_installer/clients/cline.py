"""Cline adapter (VS Code extension)."""

from pathlib import Path
from typing import Any

from codealive_installer.clients.base import JsonConfigClient
from codealive_installer.clients.vscode import extension_settings_path

EXTENSION_ID = "saoudrizwan.claude-dev"


class ClineClient(JsonConfigClient):
    name = "Cline"

    def config_path(self) -> Path:
        return extension_settings_path(self.host, EXTENSION_ID, "cline_mcp_settings.json")

    def build_entry(self, api_key: str) -> dict[str, Any]:
        # Cline skips servers without an explicit disabled flag
        return {**super().build_entry(api_key), "disabled": False}
