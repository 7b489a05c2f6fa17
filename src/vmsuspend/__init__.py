"""
VMware Host Suspend Helper

Soft-suspends VMware virtual machines through vmrun when the host is about
to sleep.
"""

from .core.config import AppConfig, AppPaths, load_config, save_config, find_vmrun
from .core.vmrun import VMRunController, SuspendResult, build_suspend_command
from .core.autostart import AutostartManager
from .core.service import SuspendHelper

__version__ = "1.0.0"

__all__ = [
    "AppConfig",
    "AppPaths",
    "load_config",
    "save_config",
    "find_vmrun",
    "VMRunController",
    "SuspendResult",
    "build_suspend_command",
    "AutostartManager",
    "SuspendHelper",
]
