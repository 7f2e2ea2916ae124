"""Roo Code adapter (VS Code extension, a Cline fork)."""

from pathlib import Path
from typing import Any

from codealive_installer.clients.base import JsonConfigClient
from codealive_installer.clients.vscode import extension_settings_path

EXTENSION_ID = "rooveterinaryinc.roo-cline"


class RooCodeClient(JsonConfigClient):
    name = "Roo Code"

    def config_path(self) -> Path:
        return extension_settings_path(self.host, EXTENSION_ID, "mcp_settings.json")

    def build_entry(self, api_key: str) -> dict[str, Any]:
        return {**super().build_entry(api_key), "disabled": False}
