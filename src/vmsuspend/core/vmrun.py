"""
vmrun Controller

Launches ``vmrun suspend <vmx> soft`` for each configured virtual machine.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from dataclasses import dataclass
from typing import Optional, List, Iterable

from vmsuspend.common.decorators import timed
from vmsuspend.common.exceptions import SuspendLaunchError
from .config import find_vmrun

logger = logging.getLogger(__name__)

SUSPEND_MODE = "soft"


@dataclass
class SuspendResult:
    """Outcome of launching the suspend command for one VM."""
    path: str
    launched: bool
    pid: Optional[int] = None
    error: Optional[str] = None


def build_suspend_command(vmrun: str, vmx_path: str) -> List[str]:
    """Argument vector for a soft suspend of ``vmx_path``."""
    return [vmrun, "suspend", vmx_path, SUSPEND_MODE]


class VMRunController:
    """
    Issues suspend commands through the hypervisor's control tool.

    Processes are started and left running; their exit status is never
    inspected. Handles are kept until the child exits so it can be reaped.
    """

    def __init__(self, vmrun: Optional[str] = None):
        self.vmrun = vmrun or find_vmrun()
        self._children: List[subprocess.Popen] = []

    def reap(self) -> int:
        """Drop handles of finished children. Returns the number still running."""
        self._children = [p for p in self._children if p.poll() is None]
        return len(self._children)

    def _popen_kwargs(self) -> dict:
        kwargs = {
            "stdin": subprocess.DEVNULL,
            "stdout": subprocess.DEVNULL,
            "stderr": subprocess.DEVNULL,
        }
        if sys.platform == "win32":
            kwargs["creationflags"] = subprocess.CREATE_NO_WINDOW
        else:
            kwargs["start_new_session"] = True
        return kwargs

    def launch(self, vmx_path: str) -> subprocess.Popen:
        """
        Start the suspend command for one VM.

        Raises:
            SuspendLaunchError: If the process could not be started.
        """
        cmd = build_suspend_command(self.vmrun, vmx_path)
        try:
            proc = subprocess.Popen(cmd, **self._popen_kwargs())
        except (OSError, subprocess.SubprocessError, ValueError) as e:
            raise SuspendLaunchError(vmx_path, str(e), cause=e) from e

        self._children.append(proc)
        return proc

    @timed
    def suspend_all(self, paths: Iterable[str]) -> List[SuspendResult]:
        """
        Suspend every VM in ``paths``, in order.

        A failed launch is logged and the remaining VMs are still attempted.

        Returns:
            One SuspendResult per path
        """
        paths = list(paths)
        if not paths:
            logger.info("No virtual machines configured, nothing to suspend.")
            return []

        self.reap()
        results = []
        for vmx in paths:
            try:
                proc = self.launch(vmx)
            except SuspendLaunchError as e:
                logger.error(f"Error suspending VM: {e.details['reason']}")
                results.append(SuspendResult(vmx, launched=False, error=e.details["reason"]))
                continue

            logger.info(f"Suspending VM: {vmx}")
            results.append(SuspendResult(vmx, launched=True, pid=proc.pid))

        return results
