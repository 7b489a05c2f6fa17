"""
Common Utilities

Shared error types, decorators and logging setup for the suspend helper.
"""

from .exceptions import (
    SuspendHelperError, ConfigError, InvalidConfigError, VMRunError,
    VMRunNotFoundError, SuspendLaunchError, AutostartError,
)
from .decorators import handle_errors, timed
from .logging_config import setup_logging, activity_handler

__all__ = [
    # Exceptions
    "SuspendHelperError", "ConfigError", "InvalidConfigError", "VMRunError",
    "VMRunNotFoundError", "SuspendLaunchError", "AutostartError",
    # Decorators
    "handle_errors", "timed",
    # Logging
    "setup_logging", "activity_handler",
]
