"""Antigravity adapter."""

from pathlib import Path

from codealive_installer.clients.base import JsonConfigClient


class AntigravityClient(JsonConfigClient):
    name = "Antigravity"

    def config_path(self) -> Path:
        # Same location on every platform
        return self.host.home / ".gemini" / "antigravity" / "mcp_config.json"
