"""
Tests for the tray icon menu.

Runs on the Qt offscreen platform; the file picker and desktop services
are replaced so no dialogs or viewers open.
"""

import pytest
from pathlib import Path
from unittest.mock import MagicMock, patch

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

pytestmark = pytest.mark.gui


@pytest.fixture
def helper():
    helper = MagicMock()
    helper.vm_paths = []
    return helper


@pytest.fixture
def tray(qapp, helper, tmp_path):
    from vmsuspend.gui.tray import TrayApp

    picker = MagicMock(return_value=[])
    app = TrayApp(helper, tmp_path / "log.txt", picker=picker)
    yield app
    app.tray.hide()


class TestMenu:

    def test_menu_actions(self, tray):
        texts = [a.text() for a in tray.menu.actions() if not a.isSeparator()]
        assert texts == [
            "Suspend VMs now",
            "Open log",
            "Settings...",
            "Quit",
            "Quit and remove from startup",
        ]

    def test_tooltip(self, tray):
        assert tray.tray.toolTip() == "VMware Host Suspend Helper"

    def test_manual_suspend(self, tray, helper):
        tray.suspend_action.trigger()
        helper.suspend_vms.assert_called_once_with()


class TestOpenLog:

    def test_missing_log_not_opened(self, tray):
        with patch("vmsuspend.gui.tray.QDesktopServices") as desktop:
            assert tray.open_log() is False
            desktop.openUrl.assert_not_called()

    def test_existing_log_opened(self, tray, tmp_path):
        (tmp_path / "log.txt").write_text("2024-01-01 00:00:00 - started\n")

        with patch("vmsuspend.gui.tray.QDesktopServices") as desktop:
            tray.log_action.trigger()

        url = desktop.openUrl.call_args.args[0]
        assert Path(url.toLocalFile()) == tmp_path / "log.txt"


class TestSettings:

    def test_selected_files_passed_to_helper(self, tray, helper):
        tray._picker.return_value = ["/vms/a/a.vmx", "/vms/b/b.vmx"]

        tray.settings_action.trigger()

        helper.update_vm_paths.assert_called_once_with(["/vms/a/a.vmx", "/vms/b/b.vmx"])

    def test_picker_starts_in_current_vm_folder(self, tray, helper):
        helper.vm_paths = ["/vms/a/a.vmx"]

        tray.open_settings()

        assert Path(tray._picker.call_args.args[0]) == Path("/vms/a")

    def test_cancelled_picker(self, tray, helper):
        tray.open_settings()
        helper.update_vm_paths.assert_called_once_with([])


class TestQuit:

    def test_quit(self, tray, helper):
        with patch("vmsuspend.gui.tray.QApplication") as qapp_cls:
            tray.quit_action.trigger()

        helper.shutdown.assert_called_once_with()
        qapp_cls.instance.return_value.quit.assert_called_once_with()
        assert not tray.tray.isVisible()

    def test_quit_and_deregister(self, tray, helper):
        with patch("vmsuspend.gui.tray.QApplication") as qapp_cls:
            tray.quit_deregister_action.trigger()

        helper.shutdown.assert_called_once_with(deregister=True)
        qapp_cls.instance.return_value.quit.assert_called_once_with()
