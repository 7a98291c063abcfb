"""
Loopback adaptor.

Stands in for real hardware: connects and disconnects without any I/O.
"""

from robotctl.adaptors.base import Adaptor


class LoopbackAdaptor(Adaptor):
    """Adaptor with no remote end, for dry runs and simulations."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.is_connected = False
        self.connect_count = 0
        self.disconnect_count = 0

    async def connect(self) -> None:
        """Mark the channel open."""
        self.connect_count += 1
        self.is_connected = True

    async def disconnect(self) -> None:
        """Mark the channel closed."""
        self.disconnect_count += 1
        self.is_connected = False
