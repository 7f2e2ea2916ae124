"""Adapters for agents that manage MCP servers through their own CLI."""

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from codealive_installer.clients.base import InstallResult, build_server_env
from codealive_installer.constants import (
    LIST_TIMEOUT,
    LOCATE_TIMEOUT,
    MCP_SERVER_NAME,
    MUTATE_TIMEOUT,
)
from codealive_installer.exceptions import BinaryNotFoundError, ProcessInvocationError
from codealive_installer.host import Host
from codealive_installer.settings import Settings

logger = logging.getLogger(__name__)

# Global install locations checked after the per-user ones
SYSTEM_BIN_DIRS = (Path("/usr/local/bin"), Path("/opt/homebrew/bin"))


def find_binary(name: str, candidates: Sequence[Path], host: Host) -> str | None:
    """Locate an executable.

    Checks the candidate paths in order, then asks ``which`` (or ``where``
    on Windows).

    Args:
        name: Executable name (e.g., "claude")
        candidates: Absolute paths to try first
        host: Machine description, used to pick the locator command

    Returns:
        Path to the executable, or None if it cannot be found
    """
    for candidate in candidates:
        if candidate.is_file():
            return str(candidate)

    locator = "where" if host.is_windows else "which"
    try:
        result = subprocess.run(
            [locator, name],
            capture_output=True,
            text=True,
            timeout=LOCATE_TIMEOUT,
        )
    except (OSError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    lines = [line.strip() for line in result.stdout.splitlines() if line.strip()]
    return lines[0] if lines else name


def run_command(args: Sequence[str], timeout: float) -> subprocess.CompletedProcess:
    """Run a command, capturing its output.

    Raises:
        ProcessInvocationError: If the command cannot be started, times out
            or exits with a non-zero status
    """
    logger.debug("Running %s", " ".join(args))
    try:
        result = subprocess.run(
            list(args),
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise ProcessInvocationError(f"{Path(args[0]).name} timed out after {timeout}s") from e
    except OSError as e:
        raise ProcessInvocationError(str(e)) from e

    if result.returncode != 0:
        message = (
            (result.stderr or "").strip()
            or (result.stdout or "").strip()
            or f"Exit code {result.returncode}"
        )
        raise ProcessInvocationError(message)
    return result


class CliClient:
    """Adapter for agents whose CLI has ``mcp list/add/remove`` subcommands.

    Subclasses set ``name`` and ``binary_name``, and provide the candidate
    install paths and the add/remove arguments.
    """

    name: str = ""
    binary_name: str = ""

    def __init__(self, settings: Settings | None = None, host: Host | None = None) -> None:
        self.settings = settings or Settings()
        self.host = host or Host.current()
        self._binary: str | None = None

    def candidate_paths(self) -> list[Path]:
        return [directory / self.binary_name for directory in SYSTEM_BIN_DIRS]

    def find_binary(self) -> str | None:
        """Resolve the agent's executable, remembering the first hit."""
        if self._binary is None:
            self._binary = find_binary(self.binary_name, self.candidate_paths(), self.host)
            if self._binary:
                logger.debug("Found %s at %s", self.name, self._binary)
        return self._binary

    def require_binary(self) -> str:
        binary = self.find_binary()
        if binary is None:
            raise BinaryNotFoundError(f"{self.name} CLI not found")
        return binary

    def env_assignments(self, api_key: str) -> list[str]:
        return [f"{key}={value}" for key, value in build_server_env(api_key, self.settings).items()]

    def list_args(self) -> list[str]:
        return ["mcp", "list"]

    def add_args(self, api_key: str) -> list[str]:
        raise NotImplementedError

    def remove_args(self) -> list[str]:
        raise NotImplementedError

    def is_client_supported(self) -> bool:
        return self.find_binary() is not None

    def is_server_installed(self) -> bool:
        binary = self.find_binary()
        if binary is None:
            return False
        try:
            result = run_command([binary, *self.list_args()], LIST_TIMEOUT)
        except ProcessInvocationError as e:
            logger.debug("%s mcp list failed: %s", self.name, e)
            return False
        return MCP_SERVER_NAME in (result.stdout or "")

    def add_server(self, api_key: str) -> InstallResult:
        try:
            binary = self.require_binary()
            try:
                run_command([binary, *self.remove_args()], LIST_TIMEOUT)
            except ProcessInvocationError as e:
                # Usually means there was nothing to remove
                logger.debug("Pre-install removal failed for %s: %s", self.name, e)
            run_command([binary, *self.add_args(api_key)], MUTATE_TIMEOUT)
        except (BinaryNotFoundError, ProcessInvocationError) as e:
            return InstallResult.failure(e)
        return InstallResult.ok()

    def remove_server(self) -> InstallResult:
        try:
            binary = self.require_binary()
            run_command([binary, *self.remove_args()], LIST_TIMEOUT)
        except (BinaryNotFoundError, ProcessInvocationError) as e:
            return InstallResult.failure(e)
        return InstallResult.ok()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(binary={self._binary})"
