"""
Exceptions raised by the robot controller.

All errors derive from RobotError so callers can catch every controller
failure in one place.
"""

from typing import Any, Optional


class RobotError(Exception):
    """Base exception for all robot controller errors."""

    def __init__(self, message: str, hint: Optional[str] = None):
        """
        Initialize a robot error.

        Args:
            message: Human readable description
            hint: Optional suggestion for fixing the problem
        """
        super().__init__(message)
        self.message = message
        self.hint = hint

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} ({self.hint})"
        return self.message


class ConfigurationError(RobotError):
    """Robot configuration failed validation."""


class CommandDefinitionError(RobotError):
    """Explicit commands are neither a mapping nor a callable returning one."""


class ConnectionReferenceError(RobotError):
    """A device names a connection the robot does not have."""

    def __init__(self, device: str, connection: str):
        super().__init__(
            f"No connection found with the name {connection} for device '{device}'",
            hint="declare the connection before the devices that use it",
        )
        self.device = device
        self.connection = connection


class StartupError(RobotError):
    """First error reported by a connection or device while starting."""

    def __init__(self, cause: BaseException, results: Optional[list[Any]] = None):
        super().__init__(f"Robot failed to start: {cause}")
        self.cause = cause
        self.results = results or []


class HaltUnitError(RobotError):
    """A single device halt or connection disconnect failed."""

    def __init__(self, unit: str, cause: BaseException):
        super().__init__(f"Failed to halt {unit}: {cause}")
        self.unit = unit
        self.cause = cause
