"""Test configuration and fixtures."""

from contextlib import contextmanager
from pathlib import Path

import pytest

from codealive_installer.clients import cli_client
from codealive_installer.host import Host, Platform
from codealive_installer.settings import Settings


class FakeUI:
    """Scripted stand-in for codealive_installer.ui.UI.

    Answers are consumed in order. An exception instance in an answer list
    is raised instead of returned. Without a scripted answer, prompts return
    their default.
    """

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []
        self.confirms: list = []
        self.passwords: list = []
        self.selections: list = []
        self.prompts: list[str] = []
        self.multiselects: list[dict] = []

    def _next(self, answers: list, default):
        if not answers:
            return default
        answer = answers.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer

    def intro(self, title: str) -> None:
        self.messages.append(("intro", title))

    def outro(self, message: str) -> None:
        self.messages.append(("outro", message))

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def warn(self, message: str) -> None:
        self.messages.append(("warn", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def note(self, message: str, title: str) -> None:
        self.messages.append(("note", f"{title}: {message}"))

    def cancel(self, message: str = "Setup cancelled.") -> None:
        self.messages.append(("cancel", message))

    @contextmanager
    def spinner(self, text: str):
        self.messages.append(("spinner", text))
        yield

    def confirm(self, message: str, default: bool = True) -> bool:
        self.prompts.append(message)
        return self._next(self.confirms, default)

    def password(self, message: str, required_message: str = "") -> str:
        self.prompts.append(message)
        answer = self._next(self.passwords, None)
        if answer is None:
            raise AssertionError(f"Unexpected password prompt: {message}")
        return answer

    def multiselect(self, message, choices, initial=(), required=False) -> list[str]:
        self.prompts.append(message)
        self.multiselects.append(
            {"message": message, "choices": list(choices), "initial": list(initial)}
        )
        return self._next(self.selections, list(initial))

    def text(self, kind: str) -> str:
        """All messages of one kind, newline separated."""
        return "\n".join(message for k, message in self.messages if k == kind)


@pytest.fixture(autouse=True)
def no_system_binaries(monkeypatch):
    """Keep CLI adapters from finding agents installed on the test machine."""
    monkeypatch.setattr(cli_client, "SYSTEM_BIN_DIRS", ())


@pytest.fixture
def home(tmp_path: Path) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def linux_host(home: Path) -> Host:
    return Host(platform=Platform.LINUX, home=home, environ={})


@pytest.fixture
def mac_host(home: Path) -> Host:
    return Host(platform=Platform.MACOS, home=home, environ={})


@pytest.fixture
def windows_host(home: Path, tmp_path: Path) -> Host:
    return Host(
        platform=Platform.WINDOWS,
        home=home,
        environ={"APPDATA": str(tmp_path / "appdata")},
    )


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def ui() -> FakeUI:
    return FakeUI()


@pytest.fixture
def claude_binary(home: Path) -> str:
    """A fake claude executable in a per-user install location."""
    binary = home / ".claude" / "local" / "claude"
    binary.parent.mkdir(parents=True)
    binary.write_text("#!/bin/sh\n")
    return str(binary)
