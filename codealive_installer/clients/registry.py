"""Registry of supported coding agents.

Agents are listed in a fixed order, which is also the order they are shown
to the user and installed in.
"""

import logging

from codealive_installer.clients.antigravity import AntigravityClient
from codealive_installer.clients.base import MCPClient
from codealive_installer.clients.claude_code import ClaudeCodeClient
from codealive_installer.clients.cline import ClineClient
from codealive_installer.clients.codex import CodexClient
from codealive_installer.clients.cursor import CursorClient
from codealive_installer.clients.opencode import OpenCodeClient
from codealive_installer.clients.roo_code import RooCodeClient
from codealive_installer.clients.vscode import VSCodeClient
from codealive_installer.clients.windsurf import WindsurfClient
from codealive_installer.clients.zed import ZedClient
from codealive_installer.host import Host
from codealive_installer.settings import Settings

logger = logging.getLogger(__name__)

ALL_CLIENTS: tuple[type, ...] = (
    ClaudeCodeClient,
    CursorClient,
    VSCodeClient,
    WindsurfClient,
    ClineClient,
    RooCodeClient,
    ZedClient,
    OpenCodeClient,
    CodexClient,
    AntigravityClient,
)


def get_all_clients(settings: Settings | None = None, host: Host | None = None) -> list[MCPClient]:
    """Instantiate every adapter in display order.

    Args:
        settings: Installer settings shared by all adapters
        host: Machine description (defaults to the running machine)

    Returns:
        Fresh adapter instances
    """
    settings = settings or Settings()
    host = host or Host.current()
    return [client_class(settings, host) for client_class in ALL_CLIENTS]


def get_supported_clients(
    settings: Settings | None = None, host: Host | None = None
) -> list[MCPClient]:
    """Adapters whose agent appears to be installed on this machine."""
    supported = []
    for client in get_all_clients(settings, host):
        found = client.is_client_supported()
        logger.debug("%s: %s", client.name, "detected" if found else "not detected")
        if found:
            supported.append(client)
    return supported
