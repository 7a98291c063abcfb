"""
Robot Control (robotctl).

Lifecycle orchestration for hardware robots composed of named connections
and the devices bound to them.
"""

__version__ = "0.1.0"
