"""User-facing configuration for a single installer run.

Settings are resolved once from the environment and the CLI flags, then
passed explicitly to every component that needs them.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from codealive_installer.constants import API_KEY_ENV, BASE_URL_ENV, DEFAULT_APP_URL


@dataclass(frozen=True)
class Settings:
    """Resolved installer settings.

    Attributes:
        api_key: API key supplied through the environment, if any
        base_url: Self-hosted CodeAlive URL, if any. Forwarded into the
            environment of every written MCP server entry.
        debug: Whether debug logging is enabled
        ci: Whether the installer runs without prompts
    """

    api_key: str | None = None
    base_url: str | None = None
    debug: bool = False
    ci: bool = False

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        debug: bool = False,
        ci: bool = False,
    ) -> "Settings":
        """Build settings from environment variables.

        Empty variables are treated as unset.

        Args:
            environ: Environment mapping (defaults to os.environ)
            debug: Value of the --debug flag
            ci: Value of the --ci flag

        Returns:
            Settings instance
        """
        if environ is None:
            environ = os.environ
        return cls(
            api_key=environ.get(API_KEY_ENV) or None,
            base_url=environ.get(BASE_URL_ENV) or None,
            debug=debug,
            ci=ci,
        )

    @property
    def app_url(self) -> str:
        """CodeAlive web app URL."""
        return (self.base_url or DEFAULT_APP_URL).rstrip("/")

    @property
    def api_keys_url(self) -> str:
        """Page where users create API keys."""
        return f"{self.app_url}/settings/api-keys"

    @property
    def verify_endpoint(self) -> str:
        """Endpoint used to verify an API key."""
        return f"{self.app_url}/api/datasources/alive"
