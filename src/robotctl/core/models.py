"""
Data models for robot controller.

Defines the typed robot definition consumed by Robot: connection specs,
device specs, and the robot spec that ties them together.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

# Keys with a meaning of their own; every other key is an extension
ROBOT_KEYS = ("name", "connections", "devices", "work", "play", "commands", "events")


@dataclass
class DeviceSpec:
    """Declaration of a device and the driver behind it."""

    name: Optional[str] = None
    driver: Any = None
    connection: Optional[str] = None
    pin: Optional[Union[int, str]] = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any], name: Optional[str] = None) -> "DeviceSpec":
        """Create DeviceSpec from dictionary, `name` overriding data['name']."""
        details = {
            k: v
            for k, v in data.items()
            if k not in ("name", "driver", "connection", "pin")
        }
        return cls(
            name=name if name is not None else data.get("name"),
            driver=data.get("driver"),
            connection=data.get("connection"),
            pin=data.get("pin"),
            details=details,
        )


@dataclass
class ConnectionSpec:
    """Declaration of a connection and the adaptor behind it."""

    name: Optional[str] = None
    adaptor: Any = None
    host: Optional[str] = None
    port: Optional[Union[int, str]] = None
    devices: list[DeviceSpec] = field(default_factory=list)
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(
        cls, data: dict[str, Any], name: Optional[str] = None
    ) -> "ConnectionSpec":
        """
        Create ConnectionSpec from dictionary.

        "adapter" is accepted as an alias for "adaptor". Embedded devices
        keep their own declarations; Robot.connection() binds them to the
        connection after it is registered.
        """
        details = {
            k: v
            for k, v in data.items()
            if k not in ("name", "adaptor", "adapter", "host", "port", "devices")
        }
        return cls(
            name=name if name is not None else data.get("name"),
            adaptor=data.get("adaptor", data.get("adapter")),
            host=data.get("host"),
            port=data.get("port"),
            devices=_device_specs(data.get("devices")),
            details=details,
        )


@dataclass
class RobotSpec:
    """
    Typed robot definition.

    Extensions hold every key without a meaning of its own. Callable
    extensions become robot methods and, unless `commands` is given,
    commands as well; the rest become plain attributes.
    """

    name: Optional[str] = None
    connections: list[ConnectionSpec] = field(default_factory=list)
    devices: list[DeviceSpec] = field(default_factory=list)
    work: Optional[Callable[..., Any]] = None
    commands: Any = None
    events: list[str] = field(default_factory=list)
    extensions: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RobotSpec":
        """
        Create RobotSpec from a (validated) dictionary.

        Devices declared inside a connection stay on that connection and are
        bound to it once it is registered under its final name.
        """
        connections = [
            ConnectionSpec.from_dict(conn, name)
            for name, conn in _entries(data.get("connections"))
        ]

        devices = _device_specs(data.get("devices"))
        if isinstance(data.get("devices"), dict):
            # A device declared inside a connection replaces a same-named top level one
            embedded = {spec.name for conn in connections for spec in conn.devices}
            devices = [spec for spec in devices if spec.name not in embedded]

        events = data.get("events")

        return cls(
            name=data.get("name"),
            connections=connections,
            devices=devices,
            work=data.get("work") or data.get("play"),
            commands=data.get("commands"),
            events=list(events) if isinstance(events, (list, tuple)) else [],
            extensions={k: v for k, v in data.items() if k not in ROBOT_KEYS},
        )


def _entries(value: Any) -> list[tuple[Optional[str], dict[str, Any]]]:
    """Normalize a mapping or list of declarations to (name, data) pairs."""
    if not value:
        return []
    if isinstance(value, dict):
        return [(key if isinstance(key, str) else None, data) for key, data in value.items()]
    return [(None, data) for data in value]


def _device_specs(value: Any) -> list[DeviceSpec]:
    return [DeviceSpec.from_dict(data, name) for name, data in _entries(value)]
