"""API key storage in the operating system's credential store.

Uses the command-line front end of each platform's store: ``security`` on
macOS, ``secret-tool`` (libsecret) on Linux and PowerShell / ``cmdkey`` on
Windows. A missing tool or an empty store is never an error; the key is
simply reported as not found.
"""

import getpass
import logging
import subprocess

from codealive_installer.constants import (
    CREDENTIAL_READ_TIMEOUT,
    CREDENTIAL_WRITE_TIMEOUT,
    SERVICE_NAME,
)
from codealive_installer.host import Host, Platform
from codealive_installer.settings import Settings

logger = logging.getLogger(__name__)

STORE_NAMES = {
    Platform.MACOS: "macOS Keychain",
    Platform.LINUX: "secret-tool",
    Platform.WINDOWS: "Windows Credential Manager",
}


def get_store_name(host: Host) -> str:
    """Human-readable name of the credential store on this platform."""
    return STORE_NAMES.get(host.platform, "credential store")


def _lookup_command(host: Host) -> list[str]:
    if host.platform is Platform.MACOS:
        return [
            "security",
            "find-generic-password",
            "-a",
            getpass.getuser(),
            "-s",
            SERVICE_NAME,
            "-w",
        ]
    if host.platform is Platform.WINDOWS:
        return [
            "powershell",
            "-Command",
            f"(Get-StoredCredential -Target '{SERVICE_NAME}').GetNetworkCredential().Password",
        ]
    return ["secret-tool", "lookup", "service", SERVICE_NAME]


def read_key(settings: Settings, host: Host) -> str | None:
    """Find a previously configured API key.

    The CODEALIVE_API_KEY environment variable wins over the credential
    store.

    Args:
        settings: Installer settings (carries the environment key)
        host: Machine description, selects the credential store

    Returns:
        The key, or None if none is available
    """
    if settings.api_key:
        logger.debug("Found API key in environment")
        return settings.api_key

    store = get_store_name(host)
    try:
        result = subprocess.run(
            _lookup_command(host),
            capture_output=True,
            text=True,
            timeout=CREDENTIAL_READ_TIMEOUT,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug("Cannot query %s: %s", store, e)
        return None

    key = (result.stdout or "").strip() if result.returncode == 0 else ""
    if not key:
        logger.debug("No key in %s", store)
        return None
    logger.debug("Found API key in %s", store)
    return key


def store_key(api_key: str, host: Host) -> bool:
    """Save an API key to the credential store.

    Returns:
        True if the key was stored
    """
    try:
        if host.platform is Platform.MACOS:
            user = getpass.getuser()
            # Replacing an entry requires deleting it first; a missing one is fine
            subprocess.run(
                ["security", "delete-generic-password", "-a", user, "-s", SERVICE_NAME],
                capture_output=True,
                timeout=CREDENTIAL_READ_TIMEOUT,
            )
            subprocess.run(
                [
                    "security",
                    "add-generic-password",
                    "-a",
                    user,
                    "-s",
                    SERVICE_NAME,
                    "-w",
                    api_key,
                ],
                capture_output=True,
                timeout=CREDENTIAL_READ_TIMEOUT,
                check=True,
            )
        elif host.platform is Platform.WINDOWS:
            subprocess.run(
                ["cmdkey", f"/generic:{SERVICE_NAME}", "/user:codealive", f"/pass:{api_key}"],
                capture_output=True,
                timeout=CREDENTIAL_WRITE_TIMEOUT,
                check=True,
            )
        else:
            subprocess.run(
                ["secret-tool", "store", "--label=CodeAlive API Key", "service", SERVICE_NAME],
                input=api_key,
                capture_output=True,
                text=True,
                timeout=CREDENTIAL_WRITE_TIMEOUT,
                check=True,
            )
    except (OSError, subprocess.CalledProcessError, subprocess.TimeoutExpired) as e:
        logger.debug("Failed to store key in %s: %s", get_store_name(host), e)
        return False

    logger.debug("Stored key in %s", get_store_name(host))
    return True
