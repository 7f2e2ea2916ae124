"""Centralized constants for the codealive_installer package."""

DEFAULT_APP_URL = "https://app.codealive.ai"

# Environment variables
API_KEY_ENV = "CODEALIVE_API_KEY"
BASE_URL_ENV = "CODEALIVE_BASE_URL"

# OS credential store service name
SERVICE_NAME = "codealive-api-key"

# MCP server registration
MCP_SERVER_NAME = "codealive"
MCP_COMMAND = "uvx"
MCP_ARGS = ("codealive-mcp",)

# Skill and Claude Code plugin sources
SKILL_REPO = "CodeAlive-AI/codealive-skills@codealive-context-engine"
PLUGIN_REPO = "CodeAlive-AI/codealive-skills"
PLUGIN_ID = "codealive@codealive-marketplace"

# Timeouts in seconds
VERIFY_TIMEOUT = 15.0
LOCATE_TIMEOUT = 3
LIST_TIMEOUT = 10
MUTATE_TIMEOUT = 15
CREDENTIAL_READ_TIMEOUT = 5
CREDENTIAL_WRITE_TIMEOUT = 10
PLUGIN_TIMEOUT = 30
SKILL_TIMEOUT = 120
