"""Base classes and protocols for MCP client adapters.

Each supported coding agent gets an adapter exposing the same four
operations: detect the agent, check for an existing CodeAlive registration,
register the server and remove it again. Most agents keep their MCP servers
in a JSON file; those share JsonConfigClient and only differ in where the file
lives and how the server entry looks.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from codealive_installer import jsonc
from codealive_installer.constants import (
    API_KEY_ENV,
    BASE_URL_ENV,
    MCP_ARGS,
    MCP_COMMAND,
    MCP_SERVER_NAME,
)
from codealive_installer.exceptions import ConfigError
from codealive_installer.host import Host
from codealive_installer.settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallResult:
    """Outcome of an add or remove operation.

    Attributes:
        success: Whether the operation succeeded
        error: Human-readable failure message
        error_kind: Name of the exception class behind the failure, if any
    """

    success: bool
    error: str | None = None
    error_kind: str | None = None

    @classmethod
    def ok(cls) -> "InstallResult":
        return cls(success=True)

    @classmethod
    def failure(cls, problem: Exception | str) -> "InstallResult":
        """Build a failed result from an exception or a message."""
        if isinstance(problem, Exception):
            kind = type(problem).__name__
            return cls(success=False, error=str(problem) or kind, error_kind=kind)
        return cls(success=False, error=problem)


@runtime_checkable
class MCPClient(Protocol):
    """Protocol for coding agent adapters.

    Uses structural typing so JSON-config and CLI-driven adapters need no
    common base class.
    """

    @property
    def name(self) -> str:
        """Display name of the agent (e.g., "Cursor")."""
        ...

    def is_client_supported(self) -> bool:
        """Check whether the agent appears to be installed."""
        ...

    def is_server_installed(self) -> bool:
        """Check whether the CodeAlive server is already registered."""
        ...

    def add_server(self, api_key: str) -> InstallResult:
        """Register the CodeAlive server, replacing any previous entry."""
        ...

    def remove_server(self) -> InstallResult:
        """Remove the CodeAlive server registration."""
        ...


def build_server_env(api_key: str, settings: Settings) -> dict[str, str]:
    """Environment passed to the MCP server process.

    The base URL is only included for self-hosted deployments.

    Examples:
        >>> build_server_env("k", Settings())
        {'CODEALIVE_API_KEY': 'k'}
    """
    env = {API_KEY_ENV: api_key}
    if settings.base_url:
        env[BASE_URL_ENV] = settings.base_url
    return env


def build_base_entry(api_key: str, settings: Settings) -> dict[str, Any]:
    """The {command, args, env} entry understood by most agents."""
    return {
        "command": MCP_COMMAND,
        "args": list(MCP_ARGS),
        "env": build_server_env(api_key, settings),
    }


class JsonConfigClient:
    """Adapter for agents that read MCP servers from a JSON config file.

    Subclasses set ``name`` and ``server_property``, implement
    ``config_path`` and override ``build_entry`` when the agent expects a
    different entry shape.
    """

    name: str = ""
    server_property: str = "mcpServers"

    def __init__(self, settings: Settings | None = None, host: Host | None = None) -> None:
        self.settings = settings or Settings()
        self.host = host or Host.current()

    def config_path(self) -> Path:
        """Absolute path of the agent's MCP config file."""
        raise NotImplementedError

    def build_entry(self, api_key: str) -> dict[str, Any]:
        return build_base_entry(api_key, self.settings)

    def is_client_supported(self) -> bool:
        # The config file itself may not exist yet on a fresh install
        parent = self.config_path().parent
        return parent.exists() or parent.parent.exists()

    def is_server_installed(self) -> bool:
        path = self.config_path()
        try:
            config = jsonc.parse(jsonc.read(path))
        except ConfigError as e:
            logger.debug("Ignoring unreadable config %s: %s", path, e)
            return False
        if not isinstance(config, dict):
            return False
        servers = config.get(self.server_property)
        return isinstance(servers, dict) and MCP_SERVER_NAME in servers

    def add_server(self, api_key: str) -> InstallResult:
        path = self.config_path()
        try:
            text = jsonc.read(path)
            updated = jsonc.upsert(
                text,
                [self.server_property, MCP_SERVER_NAME],
                self.build_entry(api_key),
            )
            jsonc.write(path, updated)
        except ConfigError as e:
            logger.debug("Failed to update %s: %s", path, e)
            return InstallResult.failure(e)
        logger.debug("Registered %s in %s", MCP_SERVER_NAME, path)
        return InstallResult.ok()

    def remove_server(self) -> InstallResult:
        path = self.config_path()
        if not path.exists():
            return InstallResult.failure(ConfigError("Config not found"))
        try:
            text = jsonc.read(path)
            updated = jsonc.remove(text, [self.server_property, MCP_SERVER_NAME])
            if updated != text:
                jsonc.write(path, updated)
        except ConfigError as e:
            logger.debug("Failed to update %s: %s", path, e)
            return InstallResult.failure(e)
        return InstallResult.ok()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={self.config_path()})"
