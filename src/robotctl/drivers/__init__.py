"""
Device drivers for robot controller.

Provides loopback and smart plug power drivers behind a common interface.
"""

from robotctl.drivers.base import DRIVER_KINDS, Driver, get_driver

__all__ = [
    "DRIVER_KINDS",
    "Driver",
    "get_driver",
]
