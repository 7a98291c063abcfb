"""
Connection adaptors for robot controller.

Provides loopback, TCP and HTTP adaptors behind a common interface.
"""

from robotctl.adaptors.base import ADAPTOR_KINDS, Adaptor, get_adaptor

__all__ = [
    "ADAPTOR_KINDS",
    "Adaptor",
    "get_adaptor",
]
