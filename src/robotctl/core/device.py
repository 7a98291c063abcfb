"""
Device handle.

Wraps one driver instance bound to a connection of the same robot.
"""

from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from robotctl.core.connection import Connection
from robotctl.core.models import DeviceSpec
from robotctl.drivers.base import get_driver

if TYPE_CHECKING:
    from robotctl.core.robot import Robot


class Device:
    """A named peripheral owned by one robot."""

    def __init__(
        self,
        name: str,
        driver: Any,
        connection: Optional[Connection] = None,
        robot: Optional["Robot"] = None,
        pin: Optional[Union[int, str]] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        """
        Initialize device handle.

        Args:
            name: Unique name within the robot
            driver: Object exposing start() and halt()
            connection: Connection the device talks through (not owned)
            robot: Owning robot
            pin: Pin used when the driver does not report one
            details: Remaining declaration fields
        """
        self.name = name
        self.driver = driver
        self.connection = connection
        self.robot = robot
        self.details = details or {}
        self.started = False
        self._pin = pin

    @classmethod
    def from_spec(
        cls,
        spec: DeviceSpec,
        connection: Optional[Connection] = None,
        robot: Optional["Robot"] = None,
    ) -> "Device":
        """
        Create a device handle from its declaration.

        The driver may be given as a kind name (see get_driver), a driver
        class, or a ready driver instance.
        """
        driver = spec.driver
        if isinstance(driver, str):
            driver = get_driver(driver, connection, spec.pin, **spec.details)
        elif isinstance(driver, type):
            driver = driver(connection, spec.pin, **spec.details)

        return cls(
            name=spec.name,
            driver=driver,
            connection=connection,
            robot=robot,
            pin=spec.pin,
            details=spec.details,
        )

    @property
    def pin(self) -> Optional[Union[int, str]]:
        pin = getattr(self.driver, "pin", None)
        return pin if pin is not None else self._pin

    @property
    def commands(self) -> dict[str, Callable[..., Any]]:
        commands = getattr(self.driver, "commands", None)
        return commands if isinstance(commands, dict) else {}

    def start(self) -> Any:
        """Invoke the driver's start, returning its awaitable if any."""
        return self.driver.start()

    def halt(self) -> Any:
        """Invoke the driver's halt, returning its awaitable if any."""
        self.started = False
        return self.driver.halt()

    def to_json(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "driver": type(self.driver).__name__,
            "pin": self.pin,
            "connection": self.connection.name if self.connection else None,
            "commands": list(self.commands),
            "details": dict(self.details),
        }

    def __repr__(self) -> str:
        return f"<Device name={self.name!r} started={self.started}>"
