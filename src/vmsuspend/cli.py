#!/usr/bin/env python3
"""
VMware Host Suspend Helper

Tray application that soft-suspends VMware virtual machines when the host
is about to sleep.
"""

import argparse
import logging
import sys
from pathlib import Path

from vmsuspend.common.exceptions import VMRunNotFoundError
from vmsuspend.common.logging_config import setup_logging
from .core.config import AppPaths, require_vmrun
from .core.service import SuspendHelper
from .core.vmrun import VMRunController

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vmsuspend",
        description="Suspend VMware virtual machines before the host sleeps",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  vmsuspend                      # Run in the system tray
  vmsuspend --suspend-now        # Suspend configured VMs and exit
  vmsuspend --unregister         # Remove the auto-start entry and exit
  vmsuspend --no-autostart       # Run without registering for login
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--config", type=Path, help="Settings file (default: appsettings.json)")
    parser.add_argument("--log", type=Path, help="Activity log file (default: log.txt)")
    parser.add_argument("--suspend-now", action="store_true",
                        help="Suspend the configured VMs and exit")
    parser.add_argument("--no-autostart", action="store_true",
                        help="Don't register the application to start at login")
    parser.add_argument("--unregister", action="store_true",
                        help="Remove the auto-start entry and exit")
    return parser


def cmd_suspend_now(helper: SuspendHelper) -> int:
    """Headless one-shot suspend."""
    try:
        require_vmrun()
    except VMRunNotFoundError as e:
        logger.error(str(e))
        return 1

    results = helper.suspend_vms()
    return 0 if all(r.launched for r in results) else 1


def run_tray(helper: SuspendHelper, log_path: Path, register: bool) -> int:
    """Run the tray icon until the user quits."""
    from PyQt6.QtWidgets import QApplication

    from .core.power import PowerMonitor
    from .gui.tray import TrayApp

    app = QApplication(sys.argv)
    app.setApplicationName("VMware Host Suspend Helper")
    app.setQuitOnLastWindowClosed(False)

    if register:
        helper.register_startup()

    monitor = PowerMonitor()
    monitor.suspending.connect(helper.on_sleep)
    monitor.start()

    tray = TrayApp(helper, log_path)
    tray.show()

    logger.info("Application started.")
    try:
        return app.exec()
    finally:
        monitor.stop()


def main(argv=None) -> int:
    """Entry point for the suspend helper."""
    args = build_parser().parse_args(argv)

    paths = AppPaths.resolve()
    config_path = args.config or paths.config_file
    log_path = args.log or paths.log_file

    level = logging.DEBUG if args.verbose else logging.INFO
    setup_logging(level=level, log_file=log_path)

    helper = SuspendHelper(config_path, controller=VMRunController())

    if args.unregister:
        helper.unregister_startup()
        return 0

    if args.suspend_now:
        return cmd_suspend_now(helper)

    return run_tray(helper, log_path, register=not args.no_autostart)


if __name__ == "__main__":
    sys.exit(main())
