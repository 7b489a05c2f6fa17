"""
System tray icon for the VMware Host Suspend Helper.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, List, Callable

from PyQt6.QtWidgets import QApplication, QSystemTrayIcon, QMenu, QFileDialog, QStyle
from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtGui import QAction, QDesktopServices

from vmsuspend.core.service import SuspendHelper

logger = logging.getLogger(__name__)

TOOLTIP = "VMware Host Suspend Helper"
VMX_FILTER = "VMware VMX files (*.vmx)"
PICKER_TITLE = "Select one or more virtual machines"


def pick_vmx_files(start_dir: str = "") -> List[str]:
    """Multi-select file dialog for .vmx files. Empty list if cancelled."""
    files, _ = QFileDialog.getOpenFileNames(None, PICKER_TITLE, start_dir, VMX_FILTER)
    return files


class TrayApp(QObject):
    """Tray icon and context menu wired to a SuspendHelper."""

    def __init__(
        self,
        helper: SuspendHelper,
        log_path: Path,
        picker: Callable[[str], List[str]] = pick_vmx_files,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self.helper = helper
        self.log_path = Path(log_path)
        self._picker = picker

        self.menu = QMenu()
        self.suspend_action = self._add_action("Suspend VMs now", self.suspend_now)
        self.log_action = self._add_action("Open log", self.open_log)
        self.settings_action = self._add_action("Settings...", self.open_settings)
        self.menu.addSeparator()
        self.quit_action = self._add_action("Quit", self.quit)
        self.quit_deregister_action = self._add_action(
            "Quit and remove from startup", self.quit_and_deregister,
        )

        icon = QApplication.style().standardIcon(QStyle.StandardPixmap.SP_ComputerIcon)
        self.tray = QSystemTrayIcon(icon, self)
        self.tray.setToolTip(TOOLTIP)
        self.tray.setContextMenu(self.menu)

    def _add_action(self, text: str, handler: Callable[[], object]) -> QAction:
        action = QAction(text, self.menu)
        action.triggered.connect(lambda checked=False: handler())
        self.menu.addAction(action)
        return action

    def show(self):
        if not QSystemTrayIcon.isSystemTrayAvailable():
            logger.warning("No system tray available; the icon may not be visible")
        self.tray.show()

    def suspend_now(self):
        self.helper.suspend_vms()

    def open_log(self) -> bool:
        if not self.log_path.exists():
            logger.debug(f"Log file {self.log_path} does not exist yet")
            return False
        return QDesktopServices.openUrl(QUrl.fromLocalFile(str(self.log_path)))

    def open_settings(self) -> bool:
        current = self.helper.vm_paths
        start_dir = str(Path(current[0]).parent) if current else ""
        return self.helper.update_vm_paths(self._picker(start_dir))

    def quit(self):
        self.helper.shutdown()
        self._exit()

    def quit_and_deregister(self):
        self.helper.shutdown(deregister=True)
        self._exit()

    def _exit(self):
        self.tray.hide()
        app = QApplication.instance()
        if app is not None:
            app.quit()
