"""
Pytest configuration and shared fixtures for the suspend helper tests.

Provides fakes for the registry, subprocess launching and the Qt application.
"""

import os
import pytest
from unittest.mock import MagicMock, patch
from pathlib import Path
from typing import Generator
import sys

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


# ============ Environment Fixtures ============

@pytest.fixture
def app_home(tmp_path: Path, monkeypatch) -> Path:
    """Point VMSUSPEND_HOME at a temporary directory."""
    home = tmp_path / "app"
    home.mkdir()
    monkeypatch.setenv("VMSUSPEND_HOME", str(home))
    return home


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """Settings file location inside a temporary directory."""
    return tmp_path / "appsettings.json"


@pytest.fixture
def sample_vmx_paths():
    return [
        r"D:\VMs\Windows 11\Windows 11.vmx",
        r"D:\VMs\Ubuntu\Ubuntu.vmx",
        r"E:\Lab\dc01\dc01.vmx",
    ]


# ============ Subprocess Fixtures ============

@pytest.fixture
def mock_subprocess_popen():
    """Mock subprocess.Popen for tests."""
    with patch('subprocess.Popen') as mock_popen:
        mock_proc = MagicMock()
        mock_proc.pid = 4242
        mock_proc.returncode = None
        mock_popen.return_value = mock_proc
        yield mock_popen


# ============ Registry Fixtures ============

class FakeKey:
    """Handle returned by FakeWinreg.OpenKey/CreateKeyEx."""

    def __init__(self, values: dict):
        self.values = values

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return False


class FakeWinreg:
    """In-memory stand-in for the subset of winreg used by the registry backend."""

    HKEY_CURRENT_USER = "HKCU"
    KEY_READ = 0x20019
    KEY_SET_VALUE = 0x0002
    REG_SZ = 1

    def __init__(self):
        self.keys = {}

    def OpenKey(self, root, sub_key, reserved=0, access=KEY_READ):
        if (root, sub_key) not in self.keys:
            raise FileNotFoundError(sub_key)
        return FakeKey(self.keys[(root, sub_key)])

    def CreateKeyEx(self, root, sub_key, reserved=0, access=KEY_SET_VALUE):
        return FakeKey(self.keys.setdefault((root, sub_key), {}))

    def QueryValueEx(self, key, name):
        if name not in key.values:
            raise FileNotFoundError(name)
        return key.values[name], self.REG_SZ

    def SetValueEx(self, key, name, reserved, type_, value):
        key.values[name] = value

    def DeleteValue(self, key, name):
        if name not in key.values:
            raise FileNotFoundError(name)
        del key.values[name]


@pytest.fixture
def fake_winreg():
    return FakeWinreg()


# ============ Qt Fixtures ============

@pytest.fixture(scope="session")
def qapp():
    """QApplication on the offscreen platform."""
    pytest.importorskip("PyQt6.QtWidgets")
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    app.setQuitOnLastWindowClosed(False)
    yield app


# ============ Marker Configuration ============

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "unit: fast unit tests with no external deps"
    )
    config.addinivalue_line(
        "markers", "gui: tests that need a Qt application"
    )
    config.addinivalue_line(
        "markers", "windows: tests that need a Windows host"
    )


def pytest_collection_modifyitems(config, items):
    """Skip tests based on environment."""
    skip_windows = pytest.mark.skip(reason="Requires Windows")

    for item in items:
        if "windows" in item.keywords and sys.platform != "win32":
            item.add_marker(skip_windows)
