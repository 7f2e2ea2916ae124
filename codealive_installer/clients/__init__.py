"""Coding agent adapters.

Public exports:
- MCPClient: Protocol every adapter implements
- InstallResult: Outcome of an add or remove operation
- JsonConfigClient: Base for agents configured through a JSON file
- CliClient: Base for agents configured through their own CLI
- get_all_clients: All adapters in display order
- get_supported_clients: Adapters whose agent is installed
"""

from codealive_installer.clients.base import (
    InstallResult,
    JsonConfigClient,
    MCPClient,
    build_server_env,
)
from codealive_installer.clients.cli_client import CliClient
from codealive_installer.clients.registry import (
    ALL_CLIENTS,
    get_all_clients,
    get_supported_clients,
)

__all__ = [
    "ALL_CLIENTS",
    "CliClient",
    "InstallResult",
    "JsonConfigClient",
    "MCPClient",
    "build_server_env",
    "get_all_clients",
    "get_supported_clients",
]
