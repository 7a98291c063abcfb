"""
Base classes for device drivers.

Defines abstract interface and factory for driver implementations.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

if TYPE_CHECKING:
    from robotctl.core.connection import Connection

DRIVER_KINDS = ("loopback", "power")


class Driver(ABC):
    """Abstract base class for device drivers."""

    def __init__(
        self,
        connection: Optional["Connection"] = None,
        pin: Optional[Union[int, str]] = None,
        **details: Any,
    ):
        """
        Initialize driver.

        Args:
            connection: Connection handle the device talks through
            pin: Pin, channel or outlet the device is attached to
            details: Driver specific options
        """
        self.connection = connection
        self.pin = pin
        self.details = details
        self.commands: dict[str, Callable[..., Any]] = {}

    @abstractmethod
    async def start(self) -> None:
        """Bring the device up."""
        pass

    @abstractmethod
    async def halt(self) -> None:
        """Bring the device down."""
        pass


def get_driver(
    kind: str,
    connection: Optional["Connection"] = None,
    pin: Optional[Union[int, str]] = None,
    **details: Any,
) -> Driver:
    """
    Factory function to create a driver by kind.

    Args:
        kind: Driver kind (loopback, power)
        connection: Connection handle for the device
        pin: Pin or outlet index
        details: Driver specific options

    Returns:
        Driver subclass instance

    Raises:
        ValueError: If kind is not supported
    """
    if kind == "loopback":
        from robotctl.drivers.loopback import LoopbackDriver
        return LoopbackDriver(connection, pin, **details)

    elif kind == "power":
        from robotctl.drivers.power import PowerDriver
        return PowerDriver(connection, pin, **details)

    else:
        raise ValueError(f"Unsupported driver kind: {kind}")
