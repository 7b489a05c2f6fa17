"""
Suspend Helper Service

UI-independent core of the tray application: owns the settings, the vmrun
controller and the auto-start registration.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, List, Iterable

from vmsuspend.common.decorators import handle_errors
from vmsuspend.common.exceptions import AutostartError
from .autostart import AutostartManager
from .config import AppConfig, load_config, save_config
from .vmrun import VMRunController, SuspendResult

logger = logging.getLogger(__name__)


class SuspendHelper:
    """
    Reacts to host sleep by suspending the configured VMs.

    Settings are loaded once on construction and replaced wholesale by
    ``update_vm_paths``.
    """

    def __init__(
        self,
        config_path: Path,
        controller: Optional[VMRunController] = None,
        autostart: Optional[AutostartManager] = None,
    ):
        self.config_path = Path(config_path)
        self.config: AppConfig = load_config(self.config_path)
        self.controller = controller or VMRunController()
        self.autostart = autostart or AutostartManager(self.config.startup_app_name)

    @property
    def vm_paths(self) -> List[str]:
        return list(self.config.vm_paths)

    def suspend_vms(self) -> List[SuspendResult]:
        """Suspend every configured VM (manual trigger)."""
        return self.controller.suspend_all(self.config.vm_paths)

    def on_sleep(self) -> List[SuspendResult]:
        """Handler for the host's sleep notification."""
        logger.info("Sleep event detected.")
        return self.suspend_vms()

    def update_vm_paths(self, paths: Iterable[str]) -> bool:
        """
        Replace the VM list and persist it.

        An empty selection (cancelled picker) or a failed save leaves the
        settings untouched.

        Returns:
            True if the settings were changed
        """
        paths = [str(p) for p in paths]
        if not paths:
            return False

        updated = AppConfig(vm_paths=paths, startup_app_name=self.config.startup_app_name)
        try:
            save_config(updated, self.config_path)
        except OSError as e:
            logger.error(f"Could not save settings to {self.config_path}: {e}")
            return False

        self.config = updated
        logger.info(f"New VMs selected: {', '.join(paths)}")
        return True

    @handle_errors(AutostartError, default=False, log_level=logging.WARNING,
                   message="Auto-start registration failed",
                   log=logging.getLogger(__name__))
    def register_startup(self) -> bool:
        return self.autostart.register()

    @handle_errors(AutostartError, default=False, log_level=logging.WARNING,
                   message="Auto-start removal failed",
                   log=logging.getLogger(__name__))
    def unregister_startup(self) -> bool:
        return self.autostart.unregister()

    def shutdown(self, deregister: bool = False) -> None:
        """Log exit and optionally remove the auto-start entry."""
        if deregister:
            self.unregister_startup()
        logger.info("Closing application.")
