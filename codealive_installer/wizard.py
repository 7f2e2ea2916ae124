"""The interactive setup wizard."""

import logging
from dataclasses import dataclass, replace

from rich.markup import escape

from codealive_installer.auth import get_api_key, get_api_key_ci
from codealive_installer.host import Host
from codealive_installer.install import install_mcp, install_plugin, install_skill
from codealive_installer.settings import Settings
from codealive_installer.ui import UI, Choice

logger = logging.getLogger(__name__)

ACTION_PLUGIN = "plugin"
ACTION_SKILL = "skill"
ACTION_MCP = "mcp"

ACTION_CHOICES = (
    Choice(ACTION_PLUGIN, "Claude Code Plugin", "Recommended for Claude Code: skill, hooks and subagent"),
    Choice(ACTION_SKILL, "CodeAlive Skill", "Universal: works with Cursor, Copilot, Windsurf and 30+ agents"),
    Choice(ACTION_MCP, "CodeAlive MCP Server", "Direct tool access via Model Context Protocol"),
)

EXAMPLE_PROMPTS = (
    "How is authentication implemented?",
    "Show me error handling patterns across services",
    "Find similar features to guide my implementation",
)


@dataclass(frozen=True)
class WizardOptions:
    """Options collected from the command line.

    Attributes:
        api_key: Key passed with --api-key
        debug: Enable debug logging
        ci: Skip prompts and install the MCP server to detected agents
    """

    api_key: str | None = None
    debug: bool = False
    ci: bool = False


def _done_message(settings: Settings) -> str:
    prompts = "\n".join(f'  [yellow]"{prompt}"[/yellow]' for prompt in EXAMPLE_PROMPTS)
    return (
        "[green]Done![/green] Start your coding agent and try:\n\n"
        f"{prompts}\n\n"
        f"[dim]Docs:[/dim] [cyan]{escape(settings.app_url)}[/cyan]"
    )


def run_wizard(options: WizardOptions, ui: UI, settings: Settings, host: Host) -> None:
    """Run the installer end to end.

    Asks what to install, obtains an API key when the MCP server is among
    the choices, then installs the plugin, the skill and the MCP server in
    that order.

    Raises:
        ApiKeyError: If no valid API key can be obtained
        CancelledByUser: If the user cancels a prompt
    """
    settings = replace(settings, debug=options.debug, ci=options.ci)
    ui.intro("CodeAlive Installer")

    if options.ci:
        actions = [ACTION_MCP]
    else:
        actions = ui.multiselect(
            "What would you like to install?",
            ACTION_CHOICES,
            required=True,
        )
    logger.debug("Selected actions: %s", ", ".join(actions))

    api_key = None
    if ACTION_MCP in actions:
        if options.ci:
            api_key = get_api_key_ci(options.api_key, settings, host, ui)
        else:
            api_key = get_api_key(options.api_key, settings, host, ui)

    installed_plugin = False
    installed_skill = False
    installed_mcp = False

    if ACTION_PLUGIN in actions:
        installed_plugin = install_plugin(ui, settings, host)

    if ACTION_SKILL in actions:
        result = install_skill(ui)
        if result.success:
            ui.success("CodeAlive skill installed.")
            installed_skill = True
        else:
            ui.warn(f"Skill installation failed: {escape(result.error or 'unknown error')}")

    if ACTION_MCP in actions and api_key:
        report = install_mcp(api_key, settings, ui, host=host)
        installed_mcp = len(report.succeeded) > 0

    if installed_plugin or installed_skill or installed_mcp:
        ui.outro(_done_message(settings))
    elif ACTION_PLUGIN in actions:
        ui.outro("[dim]Follow the plugin instructions above.[/dim]")
    else:
        ui.outro("[dim]No changes made.[/dim]")
