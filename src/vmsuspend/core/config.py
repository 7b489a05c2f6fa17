"""
Application Configuration - settings record, file locations and persistence.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List, Dict, Any

from vmsuspend.common.exceptions import InvalidConfigError, VMRunNotFoundError
from vmsuspend.utils.atomic_write import atomic_write_json

logger = logging.getLogger(__name__)

DEFAULT_APP_NAME = "LogikVmwareWinHostSuspendTrayApp"

CONFIG_FILENAME = "appsettings.json"
LOG_FILENAME = "log.txt"

# JSON keys of the settings file
KEY_VM_PATHS = "VMPaths"
KEY_APP_NAME = "StartupAppName"

WINDOWS_VMRUN_PATHS = [
    r"C:\Program Files (x86)\VMware\VMware Workstation\vmrun.exe",
    r"C:\Program Files\VMware\VMware Workstation\vmrun.exe",
]
POSIX_VMRUN_PATH = "/usr/bin/vmrun"


@dataclass
class AppConfig:
    """Persistent settings: the VMs to suspend and the auto-start entry name."""
    vm_paths: List[str] = field(default_factory=list)
    startup_app_name: str = DEFAULT_APP_NAME

    def to_dict(self) -> Dict[str, Any]:
        return {
            KEY_VM_PATHS: list(self.vm_paths),
            KEY_APP_NAME: self.startup_app_name,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "AppConfig":
        """
        Build a config from decoded JSON.

        Raises:
            InvalidConfigError: If the document is not an object or
                VMPaths is not a list.
        """
        if not isinstance(data, dict):
            raise InvalidConfigError(CONFIG_FILENAME, "top-level value is not an object")

        paths = data.get(KEY_VM_PATHS, [])
        if not isinstance(paths, list):
            raise InvalidConfigError(CONFIG_FILENAME, f"{KEY_VM_PATHS} is not a list")

        name = data.get(KEY_APP_NAME)
        if not isinstance(name, str) or not name:
            name = DEFAULT_APP_NAME

        return cls(
            vm_paths=[p for p in paths if isinstance(p, str)],
            startup_app_name=name,
        )


def load_config(path: Path) -> AppConfig:
    """
    Load settings from disk.

    A missing, unreadable or malformed file yields the defaults (an empty
    VM list). Nothing is raised.
    """
    path = Path(path)
    if not path.exists():
        logger.debug(f"No settings file at {path}, using defaults")
        return AppConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8-sig"))
        return AppConfig.from_dict(data)
    except (OSError, ValueError, RecursionError, InvalidConfigError) as e:
        logger.warning(f"Ignoring unusable settings file {path}: {e}")
        return AppConfig()


def save_config(config: AppConfig, path: Path) -> None:
    """Overwrite the settings file with ``config``."""
    atomic_write_json(path, config.to_dict())


@dataclass
class AppPaths:
    """Fixed file locations used by the application."""
    base_dir: Path

    @property
    def config_file(self) -> Path:
        return self.base_dir / CONFIG_FILENAME

    @property
    def log_file(self) -> Path:
        return self.base_dir / LOG_FILENAME

    @classmethod
    def resolve(cls) -> "AppPaths":
        """
        Locate the directory holding settings and log.

        Order: $VMSUSPEND_HOME, the frozen executable's directory, then the
        per-user configuration directory.
        """
        override = os.environ.get("VMSUSPEND_HOME")
        if override:
            return cls(Path(override).expanduser())

        if getattr(sys, "frozen", False):
            return cls(Path(sys.executable).resolve().parent)

        if sys.platform == "win32":
            appdata = os.environ.get("APPDATA")
            root = Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
            return cls(root / "VmwareHostSuspend")

        xdg = os.environ.get("XDG_CONFIG_HOME")
        root = Path(xdg) if xdg else Path.home() / ".config"
        return cls(root / "vmware-host-suspend")


def find_vmrun(platform: Optional[str] = None) -> str:
    """
    Locate the VMware ``vmrun`` control tool.

    Returns the configured or default location even if it does not exist on
    disk, so that a missing install shows up as a per-VM launch error in the
    activity log rather than at startup. Use ``require_vmrun`` for a strict
    lookup.
    """
    override = os.environ.get("VMRUN_PATH")
    if override:
        return override

    platform = platform or sys.platform
    if platform == "win32":
        for candidate in WINDOWS_VMRUN_PATHS:
            if Path(candidate).exists():
                return candidate
        return WINDOWS_VMRUN_PATHS[0]

    return shutil.which("vmrun") or POSIX_VMRUN_PATH


def require_vmrun(platform: Optional[str] = None) -> str:
    """Like ``find_vmrun`` but raise if the tool is not installed."""
    vmrun = find_vmrun(platform)
    if not Path(vmrun).exists() and not shutil.which(vmrun):
        raise VMRunNotFoundError(vmrun)
    return vmrun
