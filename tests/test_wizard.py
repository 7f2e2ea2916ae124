"""Tests for the setup wizard."""

from unittest.mock import patch

import pytest

from codealive_installer.clients import InstallResult
from codealive_installer.exceptions import ApiKeyError
from codealive_installer.install import InstallReport
from codealive_installer.settings import Settings
from codealive_installer.wizard import WizardOptions, run_wizard


@pytest.fixture
def steps():
    """Patch every wizard step, recording the order they run in."""
    calls = []

    def record(name, value):
        def step(*args, **kwargs):
            calls.append(name)
            return value
        return step

    with patch("codealive_installer.wizard.get_api_key", side_effect=record("auth", "key")) as auth, \
            patch("codealive_installer.wizard.get_api_key_ci", side_effect=record("auth_ci", "key")) as auth_ci, \
            patch("codealive_installer.wizard.install_plugin", side_effect=record("plugin", True)) as plugin, \
            patch("codealive_installer.wizard.install_skill", side_effect=record("skill", InstallResult.ok())) as skill, \
            patch(
                "codealive_installer.wizard.install_mcp",
                side_effect=record("mcp", InstallReport(succeeded=["Cursor"])),
            ) as mcp:
        yield {
            "calls": calls,
            "auth": auth,
            "auth_ci": auth_ci,
            "plugin": plugin,
            "skill": skill,
            "mcp": mcp,
        }


class TestRunWizard:
    """Test run_wizard."""

    def test_ci_installs_mcp_only(self, ui, linux_host, steps):
        """CI mode skips the action prompt and uses the non-interactive key flow."""
        run_wizard(WizardOptions(api_key="k", ci=True), ui, Settings(), linux_host)

        assert steps["calls"] == ["auth_ci", "mcp"]
        assert ui.prompts == []
        args = steps["auth_ci"].call_args.args
        assert args[0] == "k"
        mcp_args = steps["mcp"].call_args
        assert mcp_args.args[0] == "key"
        assert mcp_args.args[1].ci is True
        assert "Done!" in ui.text("outro")

    def test_ci_key_error_propagates(self, ui, linux_host, steps):
        steps["auth_ci"].side_effect = ApiKeyError("No API key found.")
        with pytest.raises(ApiKeyError):
            run_wizard(WizardOptions(ci=True), ui, Settings(), linux_host)
        assert "mcp" not in steps["calls"]

    def test_all_actions_in_order(self, ui, linux_host, steps):
        """The key is obtained first, then plugin, skill and MCP run in order."""
        ui.selections = [["plugin", "skill", "mcp"]]
        run_wizard(WizardOptions(), ui, Settings(), linux_host)
        assert steps["calls"] == ["auth", "plugin", "skill", "mcp"]

    def test_action_prompt_requires_a_choice(self, ui, linux_host, steps):
        ui.selections = [["skill"]]
        run_wizard(WizardOptions(), ui, Settings(), linux_host)
        prompt = ui.multiselects[0]
        assert [choice.value for choice in prompt["choices"]] == ["plugin", "skill", "mcp"]

    def test_no_key_without_mcp(self, ui, linux_host, steps):
        """Plugin and skill installs do not need an API key."""
        ui.selections = [["plugin", "skill"]]
        run_wizard(WizardOptions(), ui, Settings(), linux_host)
        steps["auth"].assert_not_called()
        steps["mcp"].assert_not_called()
        assert "CodeAlive skill installed." in ui.text("success")

    def test_skill_failure(self, ui, linux_host, steps):
        steps["skill"].side_effect = None
        steps["skill"].return_value = InstallResult.failure("Exit code 1")
        ui.selections = [["skill"]]
        run_wizard(WizardOptions(), ui, Settings(), linux_host)
        assert "Skill installation failed: Exit code 1" in ui.text("warn")
        assert "No changes made." in ui.text("outro")

    def test_plugin_manual_outro(self, ui, linux_host, steps):
        steps["plugin"].side_effect = None
        steps["plugin"].return_value = False
        ui.selections = [["plugin"]]
        run_wizard(WizardOptions(), ui, Settings(), linux_host)
        assert "Follow the plugin instructions above." in ui.text("outro")

    def test_nothing_installed(self, ui, linux_host, steps):
        steps["mcp"].side_effect = None
        steps["mcp"].return_value = InstallReport(failed=[("Cursor", "boom")])
        ui.selections = [["mcp"]]
        run_wizard(WizardOptions(), ui, Settings(), linux_host)
        assert "No changes made." in ui.text("outro")

    def test_outro_links_to_app(self, ui, linux_host, steps):
        ui.selections = [["mcp"]]
        run_wizard(WizardOptions(), ui, Settings(base_url="https://ca.example.com"), linux_host)
        outro = ui.text("outro")
        assert "How is authentication implemented?" in outro
        assert "https://ca.example.com" in outro
