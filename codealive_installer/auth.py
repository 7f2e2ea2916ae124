"""API key verification and acquisition."""

import logging
from dataclasses import dataclass

import httpx
import typer

from codealive_installer.constants import VERIFY_TIMEOUT
from codealive_installer.credentials import get_store_name, read_key, store_key
from codealive_installer.exceptions import ApiKeyError
from codealive_installer.host import Host
from codealive_installer.settings import Settings
from codealive_installer.ui import UI

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerifyResult:
    """Outcome of an API key check.

    Attributes:
        valid: Whether the key was accepted
        message: Human-readable summary for the user
        datasource_count: Data sources visible to the key, when valid
    """

    valid: bool
    message: str
    datasource_count: int | None = None


def verify_key(
    api_key: str,
    settings: Settings,
    client: httpx.Client | None = None,
) -> VerifyResult:
    """Check an API key against the CodeAlive API.

    Network failures are reported in the result rather than raised.

    Args:
        api_key: Key to verify
        settings: Installer settings (provides the endpoint)
        client: HTTP client to use; a short-lived one is created if omitted

    Returns:
        VerifyResult describing the outcome
    """
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }
    try:
        if client is None:
            with httpx.Client(timeout=VERIFY_TIMEOUT) as own_client:
                response = own_client.get(settings.verify_endpoint, headers=headers)
        else:
            response = client.get(settings.verify_endpoint, headers=headers, timeout=VERIFY_TIMEOUT)
    except httpx.TimeoutException:
        return VerifyResult(valid=False, message="Connection timed out.")
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        return VerifyResult(valid=False, message=f"Cannot connect: {e}")

    if response.status_code == 401:
        return VerifyResult(valid=False, message="API key is invalid or expired.")
    if not response.is_success:
        return VerifyResult(valid=False, message=f"API returned HTTP {response.status_code}.")

    try:
        data = response.json()
    except ValueError:
        logger.debug("Verification response is not JSON")
        data = None
    count = len(data) if isinstance(data, list) else 0
    plural = "" if count == 1 else "s"
    return VerifyResult(
        valid=True,
        message=f"Connected. {count} data source{plural} available.",
        datasource_count=count,
    )


def _ensure_stored(api_key: str, host: Host, ui: UI) -> None:
    if store_key(api_key, host):
        ui.success(f"Key saved to {get_store_name(host)}.")
    else:
        logger.debug("Could not save key to credential store")


def get_api_key(
    provided: str | None,
    settings: Settings,
    host: Host,
    ui: UI,
    client: httpx.Client | None = None,
) -> str:
    """Obtain a verified API key interactively.

    Tries the key passed on the command line, then a stored key, and
    finally asks the user to paste one. Keys verified from the command
    line or the prompt are saved to the credential store.

    Raises:
        ApiKeyError: If the pasted key fails verification
        CancelledByUser: If a prompt is cancelled
    """
    if provided:
        with ui.spinner("Verifying provided API key..."):
            result = verify_key(provided, settings, client)
        if result.valid:
            ui.success(f"Key verified. {result.message}")
            _ensure_stored(provided, host, ui)
            return provided
        ui.warn(f"Provided key is invalid. {result.message}")

    existing = read_key(settings, host)
    if existing:
        with ui.spinner("Checking stored API key..."):
            result = verify_key(existing, settings, client)
        if result.valid:
            ui.success(f"Stored key is valid. {result.message}")
            return existing
        ui.warn(f"Stored key is no longer valid. {result.message}")

    return _prompt_for_api_key(settings, host, ui, client)


def _prompt_for_api_key(
    settings: Settings,
    host: Host,
    ui: UI,
    client: httpx.Client | None,
) -> str:
    url = settings.api_keys_url
    ui.info("You need a CodeAlive API key to continue.")

    if ui.confirm(f"Open [cyan]{url}[/cyan] in your browser?", default=True):
        if typer.launch(url) == 0:
            ui.info("Browser opened. Copy your API key from the page.")
        else:
            ui.warn(f"Could not open browser. Go to: [cyan]{url}[/cyan]")
    else:
        ui.info(f"Get your key at: [cyan]{url}[/cyan]")

    api_key = ui.password("Paste your API key", required_message="API key is required.")

    with ui.spinner("Verifying API key..."):
        result = verify_key(api_key, settings, client)
    if not result.valid:
        raise ApiKeyError(f"Verification failed: {result.message}")

    ui.success(f"Verified! {result.message}")
    _ensure_stored(api_key, host, ui)
    return api_key


def get_api_key_ci(
    provided: str | None,
    settings: Settings,
    host: Host,
    ui: UI,
    client: httpx.Client | None = None,
) -> str:
    """Obtain a verified API key without prompting.

    Raises:
        ApiKeyError: If no key is available or it fails verification
    """
    key = provided or read_key(settings, host)
    if not key:
        raise ApiKeyError("No API key found. Pass --api-key or set CODEALIVE_API_KEY env var.")

    result = verify_key(key, settings, client)
    if not result.valid:
        raise ApiKeyError(f"API key verification failed: {result.message}")

    ui.success(f"Key verified. {result.message}")
    _ensure_stored(key, host, ui)
    return key
