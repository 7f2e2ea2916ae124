"""CLI entry point for codealive-installer."""

import logging
from typing import Annotated, Optional

import typer
from rich.console import Console

from codealive_installer import __version__
from codealive_installer.exceptions import CancelledByUser, InstallerError
from codealive_installer.host import Host
from codealive_installer.log import configure_logging
from codealive_installer.settings import Settings
from codealive_installer.ui import UI
from codealive_installer.wizard import WizardOptions, run_wizard

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="codealive-installer",
    help="Install the CodeAlive MCP server, skill and plugin for your coding agents.",
    add_completion=False,
)

console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"codealive-installer {__version__}")
        raise typer.Exit()


@app.command()
def main(
    api_key: Annotated[
        Optional[str],
        typer.Option(
            "--api-key", "-k",
            help="CodeAlive API key.",
        ),
    ] = None,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            help="Enable debug logging.",
        ),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option(
            "--ci",
            help="Skip prompts and install the MCP server to detected agents.",
        ),
    ] = False,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = None,
) -> None:
    """Install CodeAlive into your coding agents.

    Examples:
        codealive-installer
        codealive-installer --api-key <key>
        CODEALIVE_API_KEY=<key> codealive-installer --ci
    """
    configure_logging(debug)
    settings = Settings.from_env(debug=debug, ci=ci)
    ui = UI(console)
    options = WizardOptions(api_key=api_key, debug=debug, ci=ci)

    try:
        run_wizard(options, ui, settings, Host.current())
    except CancelledByUser:
        ui.cancel("Setup cancelled.")
        raise typer.Exit(0)
    except InstallerError as e:
        ui.error(str(e))
        raise typer.Exit(1)
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        ui.error(str(e) or type(e).__name__)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
