"""
Auto-start Registration

Adds or removes the run-at-login entry for the current user. On Windows
this is a value under the HKCU Run key; elsewhere an XDG autostart
desktop entry.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Optional

try:
    import winreg
    WINREG_AVAILABLE = True
except ImportError:
    WINREG_AVAILABLE = False
    winreg = None

from vmsuspend.common.exceptions import AutostartError
from vmsuspend.utils.atomic_write import atomic_write_text

logger = logging.getLogger(__name__)

RUN_KEY = r"Software\Microsoft\Windows\CurrentVersion\Run"


def executable_command() -> str:
    """Command line that relaunches this application."""
    if getattr(sys, "frozen", False):
        return str(Path(sys.executable).resolve())
    return subprocess.list2cmdline([sys.executable, "-m", "vmsuspend"])


class RegistryBackend:
    """Run-at-login value under HKEY_CURRENT_USER."""

    def __init__(self, registry=None):
        self._reg = registry or winreg
        if self._reg is None:
            raise RuntimeError("winreg is only available on Windows")

    def get(self, name: str) -> Optional[str]:
        try:
            with self._reg.OpenKey(self._reg.HKEY_CURRENT_USER, RUN_KEY, 0,
                                   self._reg.KEY_READ) as key:
                value, _ = self._reg.QueryValueEx(key, name)
                return value
        except FileNotFoundError:
            return None

    def set(self, name: str, command: str) -> None:
        with self._reg.CreateKeyEx(self._reg.HKEY_CURRENT_USER, RUN_KEY, 0,
                                   self._reg.KEY_SET_VALUE) as key:
            self._reg.SetValueEx(key, name, 0, self._reg.REG_SZ, command)

    def delete(self, name: str) -> bool:
        try:
            with self._reg.OpenKey(self._reg.HKEY_CURRENT_USER, RUN_KEY, 0,
                                   self._reg.KEY_SET_VALUE) as key:
                self._reg.DeleteValue(key, name)
            return True
        except FileNotFoundError:
            return False


class DesktopEntryBackend:
    """XDG autostart ``.desktop`` file."""

    def __init__(self, autostart_dir: Optional[Path] = None):
        if autostart_dir is None:
            xdg = os.environ.get("XDG_CONFIG_HOME")
            root = Path(xdg) if xdg else Path.home() / ".config"
            autostart_dir = root / "autostart"
        self.autostart_dir = Path(autostart_dir)

    def _entry(self, name: str) -> Path:
        return self.autostart_dir / f"{name}.desktop"

    def get(self, name: str) -> Optional[str]:
        entry = self._entry(name)
        if not entry.exists():
            return None
        for line in entry.read_text(encoding="utf-8").splitlines():
            if line.startswith("Exec="):
                return line[len("Exec="):]
        return None

    def set(self, name: str, command: str) -> None:
        atomic_write_text(self._entry(name), "\n".join([
            "[Desktop Entry]",
            "Type=Application",
            f"Name={name}",
            f"Exec={command}",
            "Comment=Suspend VMware virtual machines before the host sleeps",
            "X-GNOME-Autostart-enabled=true",
            "",
        ]))

    def delete(self, name: str) -> bool:
        entry = self._entry(name)
        if not entry.exists():
            return False
        entry.unlink()
        return True


def default_backend():
    if sys.platform == "win32":
        return RegistryBackend()
    return DesktopEntryBackend()


class AutostartManager:
    """
    Idempotent run-at-login registration.

    Registering twice has the same effect as once, and removing an entry
    that does not exist is a no-op.
    """

    def __init__(
        self,
        app_name: str,
        command: Optional[str] = None,
        backend=None,
    ):
        self.app_name = app_name
        self.command = command or executable_command()
        self._backend = backend or default_backend()

    def is_registered(self) -> bool:
        try:
            return self._backend.get(self.app_name) == self.command
        except OSError as e:
            raise AutostartError(self.app_name, "read", cause=e) from e

    def register(self) -> bool:
        """
        Point the entry at this executable.

        Returns:
            True if the entry was written, False if it was already current.
        """
        try:
            if self._backend.get(self.app_name) == self.command:
                return False
            self._backend.set(self.app_name, self.command)
        except OSError as e:
            raise AutostartError(self.app_name, "register", cause=e) from e

        logger.info("Added application to automatic startup.")
        return True

    def unregister(self) -> bool:
        """
        Remove the entry.

        Returns:
            True if an entry was removed, False if there was none.
        """
        try:
            removed = self._backend.delete(self.app_name)
        except OSError as e:
            raise AutostartError(self.app_name, "remove", cause=e) from e

        if removed:
            logger.info("Removed application from automatic startup.")
        return removed
