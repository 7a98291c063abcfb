"""
Loopback driver.

Stands in for a real peripheral: starts and halts without any I/O.
"""

from robotctl.drivers.base import Driver


class LoopbackDriver(Driver):
    """Driver with no hardware behind it, for dry runs and simulations."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.is_started = False
        self.start_count = 0
        self.halt_count = 0
        self.commands = {"ping": self.ping}

    async def start(self) -> None:
        self.start_count += 1
        self.is_started = True

    async def halt(self) -> None:
        self.halt_count += 1
        self.is_started = False

    def ping(self) -> str:
        return "pong"
