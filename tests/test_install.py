"""Tests for the installation steps."""

import subprocess
from unittest.mock import patch

from codealive_installer.clients import InstallResult
from codealive_installer.clients.claude_code import ClaudeCodeClient
from codealive_installer.install import install_mcp, install_plugin, install_skill
from codealive_installer.settings import Settings

CLI_RUN = "codealive_installer.clients.cli_client.subprocess.run"


class FakeClient:
    """Adapter double recording add_server calls."""

    def __init__(self, name, supported=True, installed=False, result=None):
        self.name = name
        self.supported = supported
        self.installed = installed
        self.result = result or InstallResult.ok()
        self.added: list[str] = []
        self.installed_checks = 0

    def is_client_supported(self):
        return self.supported

    def is_server_installed(self):
        self.installed_checks += 1
        return self.installed

    def add_server(self, api_key):
        self.added.append(api_key)
        return self.result

    def remove_server(self):
        return InstallResult.ok()


def _completed(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestInstallMcpCi:
    """Test install_mcp in CI mode."""

    def test_auto_selects_detected(self, ui):
        """Only detected agents are installed, without prompting."""
        cursor = FakeClient("Cursor")
        zed = FakeClient("Zed", supported=False)

        report = install_mcp("key", Settings(ci=True), ui, clients=[cursor, zed])

        assert report.succeeded == ["Cursor"]
        assert cursor.added == ["key"]
        assert zed.added == []
        assert ui.prompts == []
        assert "Auto-selecting: Cursor" in ui.text("info")

    def test_nothing_detected(self, ui):
        report = install_mcp("key", Settings(ci=True), ui, clients=[FakeClient("Zed", supported=False)])
        assert report.succeeded == []
        assert "No coding agents detected" in ui.text("warn")

    def test_does_not_ask_about_reinstall(self, ui):
        """CI mode always overwrites existing registrations."""
        cursor = FakeClient("Cursor", installed=True)
        install_mcp("key", Settings(ci=True), ui, clients=[cursor])
        assert cursor.added == ["key"]
        assert cursor.installed_checks == 0


class TestInstallMcpInteractive:
    """Test install_mcp with prompts."""

    def test_detected_agents_preselected(self, ui):
        """All agents are offered; detected ones are hinted and preselected."""
        cursor = FakeClient("Cursor")
        zed = FakeClient("Zed", supported=False)

        report = install_mcp("key", Settings(), ui, clients=[cursor, zed])

        offered = ui.multiselects[0]
        assert [(c.value, c.hint) for c in offered["choices"]] == [
            ("Cursor", "detected"),
            ("Zed", "not detected"),
        ]
        assert offered["initial"] == ["Cursor"]
        assert report.succeeded == ["Cursor"]

    def test_user_can_pick_undetected_agent(self, ui):
        zed = FakeClient("Zed", supported=False)
        ui.selections = [["Zed"]]
        report = install_mcp("key", Settings(), ui, clients=[FakeClient("Cursor"), zed])
        assert report.succeeded == ["Zed"]

    def test_nothing_selected(self, ui):
        ui.selections = [[]]
        report = install_mcp("key", Settings(), ui, clients=[FakeClient("Cursor")])
        assert report.succeeded == []
        assert "No agents selected." in ui.text("info")

    def test_decline_reinstall(self, ui):
        """Declining skips agents that are already configured."""
        cursor = FakeClient("Cursor", installed=True)
        vscode = FakeClient("VS Code")
        ui.confirms = [False]

        report = install_mcp("key", Settings(), ui, clients=[cursor, vscode])

        assert "- Cursor" in ui.text("warn")
        assert cursor.added == []
        assert report.succeeded == ["VS Code"]

    def test_decline_reinstall_leaves_nothing(self, ui):
        ui.confirms = [False]
        report = install_mcp("key", Settings(), ui, clients=[FakeClient("Cursor", installed=True)])
        assert report.succeeded == []
        assert "Nothing to install." in ui.text("info")

    def test_accept_reinstall(self, ui):
        cursor = FakeClient("Cursor", installed=True)
        ui.confirms = [True]
        report = install_mcp("key", Settings(), ui, clients=[cursor])
        assert report.succeeded == ["Cursor"]

    def test_failures_are_collected(self, ui):
        """One failing agent does not stop the others."""
        broken = FakeClient("Cursor", result=InstallResult.failure("Config root is not a JSON object"))
        silent = FakeClient("Zed", result=InstallResult(success=False))
        works = FakeClient("VS Code")

        report = install_mcp("key", Settings(), ui, clients=[broken, silent, works])

        assert report.succeeded == ["VS Code"]
        assert report.failed == [
            ("Cursor", "Config root is not a JSON object"),
            ("Zed", "Unknown error"),
        ]
        assert report.has_errors
        assert "Cursor: Config root is not a JSON object" in ui.text("warn")
        assert "VS Code" in ui.text("success")

    def test_installs_in_registry_order(self, ui):
        calls = []

        class Recording(FakeClient):
            def add_server(self, api_key):
                calls.append(self.name)
                return super().add_server(api_key)

        clients = [Recording("A"), Recording("B"), Recording("C")]
        install_mcp("key", Settings(), ui, clients=clients)
        assert calls == ["A", "B", "C"]


class TestInstallSkill:
    """Test install_skill."""

    def test_success(self, ui):
        with patch("codealive_installer.install.shutil.which", return_value="/usr/bin/npx"), \
                patch("codealive_installer.install.subprocess.run", return_value=_completed()) as mock_run:
            result = install_skill(ui)
        assert result.success
        args, kwargs = mock_run.call_args
        assert args[0] == ["/usr/bin/npx", "skills", "add", "CodeAlive-AI/codealive-skills@codealive-context-engine"]
        assert kwargs["timeout"] == 120
        assert "capture_output" not in kwargs

    def test_exit_code(self, ui):
        with patch("codealive_installer.install.shutil.which", return_value="/usr/bin/npx"), \
                patch("codealive_installer.install.subprocess.run", return_value=_completed(returncode=1)):
            result = install_skill(ui)
        assert result.error == "Exit code 1"

    def test_timeout(self, ui):
        with patch("codealive_installer.install.shutil.which", return_value="/usr/bin/npx"), \
                patch("codealive_installer.install.subprocess.run", side_effect=subprocess.TimeoutExpired("npx", 120)):
            result = install_skill(ui)
        assert not result.success
        assert "timed out" in result.error

    def test_missing_npx(self, ui):
        with patch("codealive_installer.install.shutil.which", return_value=None), \
                patch("codealive_installer.install.subprocess.run") as mock_run:
            result = install_skill(ui)
        assert result.error_kind == "BinaryNotFoundError"
        mock_run.assert_not_called()


class TestInstallPlugin:
    """Test install_plugin."""

    def test_manual_instructions_without_cli(self, ui, linux_host):
        with patch(CLI_RUN, side_effect=FileNotFoundError("which")):
            assert not install_plugin(ui, Settings(), linux_host)
        notes = ui.text("note")
        assert "/plugin marketplace add CodeAlive-AI/codealive-skills" in notes
        assert "/plugin install codealive@codealive-marketplace" in notes

    def test_success(self, ui, linux_host, claude_binary):
        with patch(CLI_RUN, return_value=_completed()) as mock_run:
            assert install_plugin(ui, Settings(), linux_host)
        marketplace, install = mock_run.call_args_list
        assert marketplace.args[0] == [
            claude_binary, "plugin", "marketplace", "add", "CodeAlive-AI/codealive-skills",
        ]
        assert install.args[0] == [claude_binary, "plugin", "install", "codealive@codealive-marketplace"]
        assert install.kwargs["timeout"] == 30

    def test_uses_given_client(self, ui, linux_host, claude_binary):
        claude = ClaudeCodeClient(Settings(), linux_host)
        with patch(CLI_RUN, return_value=_completed()):
            assert install_plugin(ui, Settings(), linux_host, claude=claude)

    def test_marketplace_already_added(self, ui, linux_host, claude_binary):
        outcomes = [
            _completed(returncode=1, stderr="Marketplace 'codealive-marketplace' is already installed"),
            _completed(),
        ]
        with patch(CLI_RUN, side_effect=outcomes):
            assert install_plugin(ui, Settings(), linux_host)
        assert "Marketplace already added." in ui.text("info")

    def test_marketplace_failure(self, ui, linux_host, claude_binary):
        with patch(CLI_RUN, return_value=_completed(returncode=1, stderr="network down")) as mock_run:
            assert not install_plugin(ui, Settings(), linux_host)
        assert mock_run.call_count == 1
        assert "network down" in ui.text("warn")
        assert "Manual Installation" in ui.text("note")

    def test_plugin_already_installed(self, ui, linux_host, claude_binary):
        outcomes = [_completed(), _completed(returncode=1, stderr="Plugin is already installed")]
        with patch(CLI_RUN, side_effect=outcomes):
            assert install_plugin(ui, Settings(), linux_host)
        assert "already installed" in ui.text("success")

    def test_plugin_install_failure(self, ui, linux_host, claude_binary):
        outcomes = [_completed(), _completed(returncode=1, stderr="plugin not found")]
        with patch(CLI_RUN, side_effect=outcomes):
            assert not install_plugin(ui, Settings(), linux_host)
        assert "/plugin install codealive@codealive-marketplace" in ui.text("note")
