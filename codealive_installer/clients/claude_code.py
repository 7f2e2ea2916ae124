"""Claude Code adapter.

Claude Code owns its MCP configuration, so servers are registered through
``claude mcp add`` at user scope instead of by editing files.
"""

from pathlib import Path

from codealive_installer.clients.cli_client import CliClient
from codealive_installer.constants import MCP_ARGS, MCP_COMMAND, MCP_SERVER_NAME


class ClaudeCodeClient(CliClient):
    name = "Claude Code"
    binary_name = "claude"

    def candidate_paths(self) -> list[Path]:
        home = self.host.home
        return [
            home / ".claude" / "local" / "claude",
            home / ".bun" / "bin" / "claude",
            home / ".npm" / "bin" / "claude",
            home / ".yarn" / "bin" / "claude",
            *super().candidate_paths(),
        ]

    def add_args(self, api_key: str) -> list[str]:
        args = ["mcp", "add", MCP_SERVER_NAME]
        for assignment in self.env_assignments(api_key):
            args.extend(["-e", assignment])
        return [*args, "-s", "user", "--", MCP_COMMAND, *MCP_ARGS]

    def remove_args(self) -> list[str]:
        return ["mcp", "remove", "--scope", "user", MCP_SERVER_NAME]
