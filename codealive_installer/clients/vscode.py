"""VS Code adapter.

VS Code itself reads user-level MCP servers from ``User/mcp.json``. The
Cline and Roo Code extensions keep their own settings in the editor's
globalStorage directory, located with extension_settings_path.
"""

from pathlib import Path
from typing import Any

from codealive_installer.clients.base import JsonConfigClient
from codealive_installer.host import Host


def vscode_user_dir(host: Host) -> Path:
    """The ``Code/User`` directory for the current platform."""
    return host.user_data_dir() / "Code" / "User"


def extension_settings_path(host: Host, extension_id: str, filename: str) -> Path:
    """Path of a settings file stored by a VS Code extension.

    Args:
        host: Machine description
        extension_id: Marketplace identifier (e.g., "saoudrizwan.claude-dev")
        filename: Settings file name inside the extension's settings directory
    """
    return vscode_user_dir(host) / "globalStorage" / extension_id / "settings" / filename


class VSCodeClient(JsonConfigClient):
    name = "VS Code"
    server_property = "servers"

    def config_path(self) -> Path:
        return vscode_user_dir(self.host) / "mcp.json"

    def build_entry(self, api_key: str) -> dict[str, Any]:
        return {"type": "stdio", **super().build_entry(api_key)}
