"""
Base classes for connection adaptors.

Defines abstract interface and factory for adaptor implementations.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Union

ADAPTOR_KINDS = ("loopback", "tcp", "http")


class Adaptor(ABC):
    """Abstract base class for connection adaptors."""

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[Union[int, str]] = None,
        **details: Any,
    ):
        """
        Initialize adaptor.

        Args:
            host: Hostname or IP address of the remote end, if any
            port: TCP port or serial device path, if any
            details: Adaptor specific options
        """
        self.host = host
        self.port = port
        self.details = details

    @abstractmethod
    async def connect(self) -> None:
        """Open the communication channel."""
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the communication channel."""
        pass


def get_adaptor(
    kind: str,
    host: Optional[str] = None,
    port: Optional[Union[int, str]] = None,
    **details: Any,
) -> Adaptor:
    """
    Factory function to create an adaptor by kind.

    Args:
        kind: Adaptor kind (loopback, tcp, http)
        host: Hostname or IP address
        port: Port number or device path
        details: Adaptor specific options

    Returns:
        Adaptor subclass instance

    Raises:
        ValueError: If kind is not supported
    """
    if kind == "loopback":
        from robotctl.adaptors.loopback import LoopbackAdaptor
        return LoopbackAdaptor(host, port, **details)

    elif kind == "tcp":
        from robotctl.adaptors.tcp import TcpAdaptor
        return TcpAdaptor(host, port, **details)

    elif kind == "http":
        from robotctl.adaptors.http import HttpAdaptor
        return HttpAdaptor(host, port, **details)

    else:
        raise ValueError(f"Unsupported adaptor kind: {kind}")
