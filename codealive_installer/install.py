"""Installation steps: MCP server, CodeAlive skill and Claude Code plugin."""

import logging
import shutil
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass, field

from rich.markup import escape

from codealive_installer.clients import InstallResult, MCPClient, get_all_clients
from codealive_installer.clients.claude_code import ClaudeCodeClient
from codealive_installer.clients.cli_client import run_command
from codealive_installer.constants import (
    PLUGIN_ID,
    PLUGIN_REPO,
    PLUGIN_TIMEOUT,
    SKILL_REPO,
    SKILL_TIMEOUT,
)
from codealive_installer.exceptions import BinaryNotFoundError, ProcessInvocationError
from codealive_installer.host import Host
from codealive_installer.settings import Settings
from codealive_installer.ui import UI, Choice

logger = logging.getLogger(__name__)

PLUGIN_INSTALL_STEP = f"  /plugin install {PLUGIN_ID}"
PLUGIN_MANUAL_STEPS = f"  /plugin marketplace add {PLUGIN_REPO}\n{PLUGIN_INSTALL_STEP}"


@dataclass
class InstallReport:
    """Per-agent outcome of an MCP installation run."""

    succeeded: list[str] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)  # (agent name, error message)

    @property
    def has_errors(self) -> bool:
        return len(self.failed) > 0


def _select_clients(
    clients: Sequence[MCPClient],
    detected: set[str],
    settings: Settings,
    ui: UI,
) -> list[MCPClient]:
    if settings.ci:
        selected = [client for client in clients if client.name in detected]
        if selected:
            ui.info(f"Auto-selecting: {', '.join(client.name for client in selected)}")
        else:
            ui.warn("No coding agents detected on this system.")
        return selected

    choices = [
        Choice(
            value=client.name,
            label=client.name,
            hint="detected" if client.name in detected else "not detected",
        )
        for client in clients
    ]
    names = ui.multiselect(
        "Select coding agents to install CodeAlive MCP to:",
        choices,
        initial=[client.name for client in clients if client.name in detected],
        required=False,
    )
    selected = [client for client in clients if client.name in names]
    if not selected:
        ui.info("No agents selected.")
    return selected


def install_mcp(
    api_key: str,
    settings: Settings,
    ui: UI,
    clients: Sequence[MCPClient] | None = None,
    host: Host | None = None,
) -> InstallReport:
    """Register the CodeAlive MCP server with the chosen coding agents.

    Detects installed agents, lets the user pick (or picks every detected
    agent in CI mode), offers to skip agents that are already configured
    and installs sequentially. Failures are collected per agent.

    Args:
        api_key: Verified CodeAlive API key
        settings: Installer settings
        ui: Console front end
        clients: Adapters to consider (defaults to every known agent)
        host: Machine description used when building default adapters

    Returns:
        InstallReport with succeeded and failed agents
    """
    if clients is None:
        clients = get_all_clients(settings, host)

    detected = {client.name for client in clients if client.is_client_supported()}
    logger.debug("Detected agents: %s", ", ".join(sorted(detected)) or "none")

    report = InstallReport()
    selected = _select_clients(clients, detected, settings, ui)
    if not selected:
        return report

    if not settings.ci:
        installed = [client for client in selected if client.is_server_installed()]
        if installed:
            listing = "\n".join(f"  - {client.name}" for client in installed)
            ui.warn(f"CodeAlive already configured for:\n{listing}")
            if not ui.confirm("Reinstall to update configuration?", default=True):
                selected = [client for client in selected if client not in installed]
                if not selected:
                    ui.info("Nothing to install.")
                    return report

    with ui.spinner("Installing CodeAlive MCP server..."):
        for client in selected:
            result = client.add_server(api_key)
            if result.success:
                report.succeeded.append(client.name)
            else:
                report.failed.append((client.name, result.error or "Unknown error"))
                logger.debug("%s failed (%s): %s", client.name, result.error_kind, result.error)

    ui.info("Installation complete.")
    if report.succeeded:
        lines = "\n".join(f"  [green]+[/green] {name}" for name in report.succeeded)
        ui.success(f"Installed to:\n{lines}")
    if report.failed:
        lines = "\n".join(
            f"  [red]x[/red] {name}: {escape(error)}" for name, error in report.failed
        )
        ui.warn(f"Failed:\n{lines}")
    return report


def install_skill(ui: UI) -> InstallResult:
    """Install the CodeAlive skill with ``npx skills add``.

    The installer's own prompts are shown to the user, so output is not
    captured.
    """
    ui.info("Installing CodeAlive skill...")
    npx = shutil.which("npx")
    if npx is None:
        return InstallResult.failure(BinaryNotFoundError("npx not found. Install Node.js first."))

    try:
        result = subprocess.run([npx, "skills", "add", SKILL_REPO], timeout=SKILL_TIMEOUT)
    except subprocess.TimeoutExpired:
        return InstallResult.failure(
            ProcessInvocationError(f"npx timed out after {SKILL_TIMEOUT}s")
        )
    except OSError as e:
        return InstallResult.failure(ProcessInvocationError(str(e)))

    if result.returncode == 0:
        return InstallResult.ok()
    return InstallResult.failure(ProcessInvocationError(f"Exit code {result.returncode}"))


def install_plugin(
    ui: UI,
    settings: Settings,
    host: Host,
    claude: ClaudeCodeClient | None = None,
) -> bool:
    """Install the CodeAlive plugin into Claude Code.

    Adds the plugin marketplace and installs the plugin through the
    ``claude`` CLI. Without the CLI, or when a step fails, the equivalent
    slash commands are shown instead.

    Returns:
        True if the plugin is installed
    """
    claude = claude or ClaudeCodeClient(settings, host)
    binary = claude.find_binary()
    if binary is None:
        ui.note(f"Run these commands inside Claude Code:\n\n{PLUGIN_MANUAL_STEPS}", "Claude Code Plugin")
        return False

    try:
        with ui.spinner("Adding CodeAlive plugin marketplace..."):
            run_command([binary, "plugin", "marketplace", "add", PLUGIN_REPO], PLUGIN_TIMEOUT)
    except ProcessInvocationError as e:
        # Claude Code reports an existing marketplace as an error
        if "already" in str(e):
            ui.info("Marketplace already added.")
        else:
            ui.warn(f"Could not add marketplace automatically. {escape(str(e))}")
            ui.note(f"Run these commands inside Claude Code:\n\n{PLUGIN_MANUAL_STEPS}", "Manual Installation")
            return False

    try:
        with ui.spinner("Installing CodeAlive plugin..."):
            run_command([binary, "plugin", "install", PLUGIN_ID], PLUGIN_TIMEOUT)
    except ProcessInvocationError as e:
        if "already" in str(e):
            ui.success("Claude Code plugin already installed.")
            return True
        ui.warn(f"Could not install plugin automatically. {escape(str(e))}")
        ui.note(f"Run this command inside Claude Code:\n\n{PLUGIN_INSTALL_STEP}", "Manual Installation")
        return False

    ui.success("Installed CodeAlive plugin with skill, auth hooks, and code explorer subagent.")
    return True
