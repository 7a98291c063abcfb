"""
TCP adaptor.

Opens a raw TCP stream to networked hardware, such as a ser2net-exported
serial console or a microcontroller running a socket server.
"""

import asyncio
import logging
from typing import Optional

from robotctl.adaptors.base import Adaptor

logger = logging.getLogger(__name__)


class TcpAdaptor(Adaptor):
    """Adaptor for a single TCP stream."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None

    @property
    def is_connected(self) -> bool:
        """Check if the stream is open."""
        return self._writer is not None and not self._writer.is_closing()

    async def connect(self) -> None:
        """Open the TCP stream."""
        if self.host is None or self.port is None:
            raise ConnectionError("TCP adaptor needs both host and port")

        logger.debug(f"Opening TCP stream to {self.host}:{self.port}")
        try:
            self._reader, self._writer = await asyncio.open_connection(
                self.host, int(self.port)
            )
        except OSError as e:
            raise ConnectionError(f"Failed to connect to {self.host}:{self.port}: {e}")

    async def disconnect(self) -> None:
        """Close the TCP stream."""
        if self._writer is None:
            return

        self._writer.close()
        try:
            await self._writer.wait_closed()
        except OSError as e:
            logger.debug(f"Error closing stream to {self.host}:{self.port}: {e}")
        finally:
            self._reader = None
            self._writer = None

    async def write(self, data: bytes) -> None:
        """Send bytes to the remote end."""
        if self._writer is None:
            raise ConnectionError("TCP adaptor is not connected")
        self._writer.write(data)
        await self._writer.drain()

    async def read(self, size: int = 1024) -> bytes:
        """Read up to `size` bytes from the remote end."""
        if self._reader is None:
            raise ConnectionError("TCP adaptor is not connected")
        return await self._reader.read(size)
