"""Facts about the machine the installer runs on.

Agent config locations depend on the operating system and on a couple of
environment variables. They are captured in a Host value so adapters can be
pointed at a fake home directory or platform.
"""

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class Platform(Enum):
    """Platforms with distinct config directory conventions."""

    MACOS = "darwin"
    LINUX = "linux"
    WINDOWS = "win32"


def detect_platform(sys_platform: str | None = None) -> Platform:
    """Map a sys.platform value to a Platform.

    Unrecognized platforms follow the Linux conventions.

    Examples:
        >>> detect_platform("darwin")
        <Platform.MACOS: 'darwin'>
        >>> detect_platform("freebsd14")
        <Platform.LINUX: 'linux'>
    """
    value = sys.platform if sys_platform is None else sys_platform
    if value == "darwin":
        return Platform.MACOS
    if value == "win32":
        return Platform.WINDOWS
    return Platform.LINUX


@dataclass(frozen=True)
class Host:
    """The running machine as seen by the agent adapters.

    Attributes:
        platform: Normalized platform
        home: User home directory
        environ: Environment used for APPDATA and XDG_CONFIG_HOME lookups
    """

    platform: Platform
    home: Path
    environ: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def current(cls) -> "Host":
        """Snapshot the current process."""
        return cls(
            platform=detect_platform(),
            home=Path.home(),
            environ=dict(os.environ),
        )

    @property
    def is_windows(self) -> bool:
        return self.platform is Platform.WINDOWS

    def app_data_dir(self) -> Path:
        """Roaming application data directory (Windows convention)."""
        appdata = self.environ.get("APPDATA")
        if appdata:
            return Path(appdata)
        return self.home / "AppData" / "Roaming"

    def xdg_config_home(self) -> Path:
        """XDG config directory (Linux convention)."""
        xdg = self.environ.get("XDG_CONFIG_HOME")
        if xdg:
            return Path(xdg)
        return self.home / ".config"

    def application_support_dir(self) -> Path:
        """Application Support directory (macOS convention)."""
        return self.home / "Library" / "Application Support"

    def user_data_dir(self) -> Path:
        """Per-platform directory where desktop editors keep user data.

        macOS uses Application Support, Windows uses APPDATA and everything
        else uses ~/.config.
        """
        if self.platform is Platform.MACOS:
            return self.application_support_dir()
        if self.platform is Platform.WINDOWS:
            return self.app_data_dir()
        return self.home / ".config"
