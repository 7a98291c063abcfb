"""
Core components for robot controller.

Provides configuration, robot definitions, and the robot lifecycle.
"""

from robotctl.core.config import Config, load_config
from robotctl.core.connection import Connection
from robotctl.core.device import Device
from robotctl.core.errors import (
    CommandDefinitionError,
    ConfigurationError,
    ConnectionReferenceError,
    HaltUnitError,
    RobotError,
    StartupError,
)
from robotctl.core.events import EventEmitter
from robotctl.core.loader import load_robots
from robotctl.core.models import ConnectionSpec, DeviceSpec, RobotSpec
from robotctl.core.registry import Registry
from robotctl.core.robot import Robot

__all__ = [
    "Config",
    "load_config",
    "Connection",
    "Device",
    "EventEmitter",
    "Robot",
    "Registry",
    "RobotSpec",
    "ConnectionSpec",
    "DeviceSpec",
    "load_robots",
    "RobotError",
    "ConfigurationError",
    "CommandDefinitionError",
    "ConnectionReferenceError",
    "StartupError",
    "HaltUnitError",
]
