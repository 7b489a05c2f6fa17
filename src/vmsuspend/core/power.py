"""
Power State Monitor

Turns the host's "about to sleep" notification into a Qt signal delivered
on the UI thread.

Backends:
- Windows: WM_POWERBROADCAST to a hidden window, read by a native event filter
- Linux: systemd-logind PrepareForSleep on the system D-Bus
"""

from __future__ import annotations

import ctypes
import logging
import sys
from enum import Enum
from typing import Optional

from PyQt6.QtCore import QObject, QAbstractNativeEventFilter, QCoreApplication, pyqtSignal, pyqtSlot
from PyQt6.QtWidgets import QWidget

try:
    from PyQt6.QtDBus import QDBusConnection
    QTDBUS_AVAILABLE = True
except ImportError:
    QTDBUS_AVAILABLE = False
    QDBusConnection = None

logger = logging.getLogger(__name__)

# Windows power broadcast constants
WM_POWERBROADCAST = 0x0218
PBT_APMPOWERSTATUSCHANGE = 0x000A
PBT_APMRESUMEAUTOMATIC = 0x0012
PBT_APMRESUMESUSPEND = 0x0007
PBT_APMSUSPEND = 0x0004

LOGIND_SERVICE = "org.freedesktop.login1"
LOGIND_PATH = "/org/freedesktop/login1"
LOGIND_INTERFACE = "org.freedesktop.login1.Manager"


class PowerMode(Enum):
    """Host power transitions."""
    RESUME = "resume"
    STATUS_CHANGE = "status_change"
    SUSPEND = "suspend"


_BROADCAST_MODES = {
    PBT_APMSUSPEND: PowerMode.SUSPEND,
    PBT_APMRESUMESUSPEND: PowerMode.RESUME,
    PBT_APMRESUMEAUTOMATIC: PowerMode.RESUME,
    PBT_APMPOWERSTATUSCHANGE: PowerMode.STATUS_CHANGE,
}


def mode_from_power_broadcast(wparam: int) -> Optional[PowerMode]:
    """Map a WM_POWERBROADCAST wParam to a PowerMode (None if ignored)."""
    return _BROADCAST_MODES.get(wparam)


def mode_from_prepare_for_sleep(start: bool) -> PowerMode:
    """logind sends True before sleeping and False after waking."""
    return PowerMode.SUSPEND if start else PowerMode.RESUME


class MSG(ctypes.Structure):
    """Win32 MSG layout, declared locally so it can be built on any platform."""
    _fields_ = [
        ("hwnd", ctypes.c_void_p),
        ("message", ctypes.c_uint),
        ("wParam", ctypes.c_size_t),
        ("lParam", ctypes.c_ssize_t),
        ("time", ctypes.c_uint32),
        ("pt_x", ctypes.c_int32),
        ("pt_y", ctypes.c_int32),
    ]


class WindowsPowerEventFilter(QAbstractNativeEventFilter):
    """Native event filter watching for WM_POWERBROADCAST."""

    def __init__(self, monitor: "PowerMonitor"):
        super().__init__()
        self._monitor = monitor

    def nativeEventFilter(self, eventType, message):
        if bytes(eventType) == b"windows_generic_MSG" and message:
            msg = MSG.from_address(int(message))
            if msg.message == WM_POWERBROADCAST:
                mode = mode_from_power_broadcast(msg.wParam)
                if mode is not None:
                    self._monitor.handle(mode)
        return False, 0


class PowerMonitor(QObject):
    """
    Emits ``suspending`` when the host is about to enter sleep.

    ``handle`` is the single dispatch point; backends call it directly from
    the event loop so slots run synchronously before the OS proceeds.
    """

    mode_changed = pyqtSignal(object)
    suspending = pyqtSignal()

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._filter: Optional[WindowsPowerEventFilter] = None
        self._window: Optional[QWidget] = None
        self.backend: Optional[str] = None

    def handle(self, mode: PowerMode) -> None:
        logger.debug(f"Power mode changed: {mode.value}")
        self.mode_changed.emit(mode)
        if mode == PowerMode.SUSPEND:
            self.suspending.emit()

    def start(self) -> bool:
        """
        Attach to the platform's power notification.

        Returns:
            True if a backend is listening
        """
        if sys.platform == "win32":
            return self._start_windows()
        if sys.platform.startswith("linux"):
            return self._start_logind()

        logger.warning(f"Sleep detection is not supported on {sys.platform}; "
                       "use the manual suspend action")
        return False

    def stop(self) -> None:
        if self._filter is not None:
            app = QCoreApplication.instance()
            if app is not None:
                app.removeNativeEventFilter(self._filter)
            self._filter = None
        if self._window is not None:
            self._window.deleteLater()
            self._window = None
        if self.backend == "logind" and QTDBUS_AVAILABLE:
            QDBusConnection.systemBus().disconnect(
                LOGIND_SERVICE, LOGIND_PATH, LOGIND_INTERFACE,
                "PrepareForSleep", self._on_prepare_for_sleep,
            )
        self.backend = None

    def _start_windows(self) -> bool:
        app = QCoreApplication.instance()
        if app is None:
            logger.warning("No Qt application instance, cannot watch power events")
            return False

        self._filter = WindowsPowerEventFilter(self)
        app.installNativeEventFilter(self._filter)

        # WM_POWERBROADCAST is sent only to top-level windows and the tray icon
        # has none of its own. A hidden native window routes it to the filter.
        self._window = QWidget()
        self._window.setWindowTitle("VMware Host Suspend power listener")
        self._window.winId()
        self.backend = "win32"
        logger.debug("Listening for WM_POWERBROADCAST")
        return True

    def _start_logind(self) -> bool:
        if not QTDBUS_AVAILABLE:
            logger.warning("PyQt6.QtDBus is unavailable, sleep detection disabled")
            return False

        bus = QDBusConnection.systemBus()
        if not bus.isConnected():
            logger.warning("Cannot connect to the system D-Bus, sleep detection disabled")
            return False

        connected = bus.connect(
            LOGIND_SERVICE, LOGIND_PATH, LOGIND_INTERFACE,
            "PrepareForSleep", self._on_prepare_for_sleep,
        )
        if not connected:
            logger.warning("Failed to subscribe to logind PrepareForSleep")
            return False

        self.backend = "logind"
        logger.debug("Listening for logind PrepareForSleep")
        return True

    @pyqtSlot(bool)
    def _on_prepare_for_sleep(self, start: bool) -> None:
        self.handle(mode_from_prepare_for_sleep(start))
