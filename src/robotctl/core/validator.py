"""
Robot definition validation.

Checks a raw robot definition before any connection or device is built.
"""

from typing import Any

from robotctl.core.errors import ConfigurationError

# Singular keys from older definitions
DEPRECATED_KEYS = {
    "connection": "connections",
    "device": "devices",
}


def validate(data: Any) -> None:
    """
    Validate a raw robot definition.

    Args:
        data: Robot definition mapping

    Raises:
        ConfigurationError: If the definition is invalid
    """
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Robot definition must be a mapping, got {type(data).__name__}"
        )

    for old, new in DEPRECATED_KEYS.items():
        if old in data:
            raise ConfigurationError(
                f"Robot definition uses deprecated key '{old}'",
                hint=f"use '{new}' instead",
            )

    name = data.get("name")
    if name is not None and not isinstance(name, str):
        raise ConfigurationError("Robot name must be a string")

    for key in ("work", "play"):
        if data.get(key) is not None and not callable(data[key]):
            raise ConfigurationError(f"Robot '{key}' must be callable")

    for conn_name, conn in _entries("connections", data.get("connections")):
        if conn.get("adaptor") is None and conn.get("adapter") is None:
            raise ConfigurationError(f"Connection '{conn_name}' has no adaptor")
        for device_name, device in _entries("devices", conn.get("devices")):
            _validate_device(device_name, device)

    for device_name, device in _entries("devices", data.get("devices")):
        _validate_device(device_name, device)


def _validate_device(name: str, device: dict[str, Any]) -> None:
    if device.get("driver") is None:
        raise ConfigurationError(f"Device '{name}' has no driver")

    connection = device.get("connection")
    if connection is not None and not isinstance(connection, str):
        raise ConfigurationError(
            f"Device '{name}' connection must be given by name"
        )


def _entries(kind: str, value: Any) -> list[tuple[str, dict[str, Any]]]:
    """Return (name, declaration) pairs, checking the container shapes."""
    if value is None:
        return []

    if isinstance(value, dict):
        pairs = list(value.items())
    elif isinstance(value, (list, tuple)):
        pairs = []
        for entry in value:
            if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
                raise ConfigurationError(
                    f"Each entry in a {kind} list must be a mapping with a name"
                )
            pairs.append((entry["name"], entry))
    else:
        raise ConfigurationError(f"Robot {kind} must be a mapping or a list")

    for name, entry in pairs:
        if not isinstance(entry, dict):
            raise ConfigurationError(f"Declaration for '{name}' in {kind} must be a mapping")

    return pairs
