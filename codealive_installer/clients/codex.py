"""OpenAI Codex CLI adapter."""

from pathlib import Path

from codealive_installer.clients.cli_client import CliClient
from codealive_installer.constants import MCP_ARGS, MCP_COMMAND, MCP_SERVER_NAME


class CodexClient(CliClient):
    """Codex has no scopes; servers always land in ~/.codex/config.toml."""

    name = "Codex"
    binary_name = "codex"

    def candidate_paths(self) -> list[Path]:
        home = self.host.home
        return [
            home / ".npm" / "bin" / "codex",
            home / ".bun" / "bin" / "codex",
            *super().candidate_paths(),
        ]

    def add_args(self, api_key: str) -> list[str]:
        args = ["mcp", "add", MCP_SERVER_NAME]
        for assignment in self.env_assignments(api_key):
            args.extend(["--env", assignment])
        return [*args, "--", MCP_COMMAND, *MCP_ARGS]

    def remove_args(self) -> list[str]:
        return ["mcp", "remove", MCP_SERVER_NAME]
