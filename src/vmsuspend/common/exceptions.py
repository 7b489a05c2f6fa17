"""
VMware Host Suspend Helper Exception Hierarchy

Structured errors carrying a machine-readable code and context, so that every
failure can be reduced to a single activity log line.
"""

from typing import Optional, Dict, Any


class SuspendHelperError(Exception):
    """
    Base exception for all suspend helper errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        details: Additional context as key-value pairs
        cause: Original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause

    def __str__(self):
        s = f"[{self.code}] {self.message}"
        if self.details:
            s += f" (details: {self.details})"
        if self.cause:
            s += f" caused by: {self.cause}"
        return s


# =============================================================================
# Configuration errors
# =============================================================================

class ConfigError(SuspendHelperError):
    """Base for configuration errors."""
    pass


class InvalidConfigError(ConfigError):
    """Configuration file is present but unusable."""
    def __init__(self, path: str, reason: str, cause: Optional[Exception] = None):
        super().__init__(
            f"Invalid configuration in {path}: {reason}",
            code="INVALID_CONFIG",
            details={"path": path, "reason": reason},
            cause=cause,
        )


# =============================================================================
# Hypervisor errors
# =============================================================================

class VMRunError(SuspendHelperError):
    """Base for vmrun-related errors."""
    pass


class VMRunNotFoundError(VMRunError):
    """The hypervisor control tool could not be located."""
    def __init__(self, searched: str):
        super().__init__(
            f"vmrun executable not found (looked for {searched})",
            code="VMRUN_NOT_FOUND",
            details={"searched": searched, "hint": "set VMRUN_PATH"},
        )


class SuspendLaunchError(VMRunError):
    """Launching the suspend command for a VM failed."""
    def __init__(self, vmx_path: str, reason: str, cause: Optional[Exception] = None):
        super().__init__(
            f"Failed to suspend VM '{vmx_path}': {reason}",
            code="SUSPEND_LAUNCH_FAILED",
            details={"vmx_path": vmx_path, "reason": reason},
            cause=cause,
        )


# =============================================================================
# Auto-start errors
# =============================================================================

class AutostartError(SuspendHelperError):
    """Reading or writing the run-at-login entry failed."""
    def __init__(self, app_name: str, operation: str, cause: Optional[Exception] = None):
        super().__init__(
            f"Cannot {operation} auto-start entry '{app_name}'",
            code="AUTOSTART_FAILED",
            details={"app_name": app_name, "operation": operation},
            cause=cause,
        )
