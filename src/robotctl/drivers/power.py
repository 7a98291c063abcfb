"""
Smart plug power driver.

Switches a relay on when the robot starts and off when it halts. Supports
Tasmota and Shelly (Gen1) plugs through their HTTP APIs.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional

import requests

from robotctl.drivers.base import Driver

logger = logging.getLogger(__name__)

PLUG_TYPES = ("tasmota", "shelly")


class PowerState(Enum):
    """Power state values."""

    ON = "on"
    OFF = "off"
    UNKNOWN = "unknown"


class Plug(ABC):
    """One relay on an HTTP controlled smart plug."""

    def __init__(
        self,
        base_url: str,
        plug_index: int = 1,
        timeout: float = 5.0,
        session: Any = requests,
    ):
        """
        Initialize plug.

        Args:
            base_url: Root URL of the plug, e.g. http://192.168.1.50
            plug_index: Outlet index for multi-relay devices (1-based)
            timeout: Request timeout in seconds
            session: requests.Session to reuse, or the requests module
        """
        self.base_url = base_url
        self.plug_index = plug_index
        self.timeout = timeout
        self.session = session

    def _get(self, path: str, params: Optional[dict] = None) -> dict:
        """
        GET a JSON endpoint on the plug.

        Raises:
            ConnectionError: If the plug is unreachable or answers badly
        """
        url = f"{self.base_url}/{path}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            raise ConnectionError(f"Request to {url} failed: {e}")

    @abstractmethod
    def switch(self, on: bool) -> PowerState:
        """Switch the relay and return the state reported back."""
        pass

    @abstractmethod
    def get_state(self) -> PowerState:
        pass


class TasmotaPlug(Plug):
    """
    Tasmota HTTP API:
    - Switch: /cm?cmnd=Power<index>%20On|Off
    - Status: /cm?cmnd=Power<index>
    Responses are {"POWER": "ON"} for index 1, {"POWER2": "ON"} otherwise.
    """

    def _state(self, result: dict) -> PowerState:
        key = "POWER" if self.plug_index == 1 else f"POWER{self.plug_index}"
        value = str(result.get(key, "")).lower()
        return PowerState(value) if value in ("on", "off") else PowerState.UNKNOWN

    def switch(self, on: bool) -> PowerState:
        word = "On" if on else "Off"
        return self._state(self._get("cm", {"cmnd": f"Power{self.plug_index} {word}"}))

    def get_state(self) -> PowerState:
        return self._state(self._get("cm", {"cmnd": f"Power{self.plug_index}"}))


class ShellyPlug(Plug):
    """
    Shelly Gen1 HTTP API, relays are 0-based:
    - Switch: /relay/<index>?turn=on|off
    - Status: /relay/<index>
    Responses carry {"ison": true|false}.
    """

    def _state(self, result: dict) -> PowerState:
        ison = result.get("ison")
        if ison is True:
            return PowerState.ON
        if ison is False:
            return PowerState.OFF
        return PowerState.UNKNOWN

    def switch(self, on: bool) -> PowerState:
        path = f"relay/{self.plug_index - 1}"
        return self._state(self._get(path, {"turn": "on" if on else "off"}))

    def get_state(self) -> PowerState:
        return self._state(self._get(f"relay/{self.plug_index - 1}"))


def get_plug(plug_type: str, base_url: str, plug_index: int = 1, **kwargs: Any) -> Plug:
    """
    Factory function to create a plug client.

    Raises:
        ValueError: If plug_type is not supported
    """
    if plug_type == "tasmota":
        return TasmotaPlug(base_url, plug_index, **kwargs)
    elif plug_type == "shelly":
        return ShellyPlug(base_url, plug_index, **kwargs)
    else:
        raise ValueError(f"Unsupported plug type: {plug_type}")


class PowerDriver(Driver):
    """
    Driver for a relay on a smart plug.

    The plug address comes from the `address` option, or from the host of
    the device's connection. The pin selects the outlet (default 1).

    Commands: turn_on, turn_off, state, cycle.
    """

    def __init__(
        self,
        *args,
        plug: str = "tasmota",
        address: Optional[str] = None,
        timeout: float = 5.0,
        keep_on: bool = False,
        **kwargs,
    ):
        super().__init__(*args, **kwargs)
        if plug not in PLUG_TYPES:
            raise ValueError(f"Unsupported plug type: {plug}")
        self.plug_type = plug
        self.address = address
        self.timeout = timeout
        self.keep_on = keep_on
        self.commands = {
            "turn_on": self.turn_on,
            "turn_off": self.turn_off,
            "state": self.state,
            "cycle": self.cycle,
        }

    def _plug(self) -> Plug:
        """Build a plug client, reusing the connection's HTTP session if any."""
        adaptor = getattr(self.connection, "adaptor", None)
        session = getattr(adaptor, "session", None) or requests

        if self.address:
            base_url = f"http://{self.address}"
        elif adaptor is not None and hasattr(adaptor, "base_url"):
            base_url = adaptor.base_url
        elif getattr(self.connection, "host", None):
            base_url = f"http://{self.connection.host}"
        else:
            raise ConnectionError("Power driver has no plug address")

        return get_plug(
            self.plug_type,
            base_url,
            int(self.pin or 1),
            timeout=self.timeout,
            session=session,
        )

    async def turn_on(self) -> PowerState:
        return await asyncio.to_thread(self._plug().switch, True)

    async def turn_off(self) -> PowerState:
        return await asyncio.to_thread(self._plug().switch, False)

    async def state(self) -> PowerState:
        return await asyncio.to_thread(self._plug().get_state)

    async def cycle(self, delay: float = 2.0) -> PowerState:
        """Switch off, wait `delay` seconds, switch back on."""
        if await self.turn_off() != PowerState.OFF:
            return PowerState.UNKNOWN
        await asyncio.sleep(delay)
        return await self.turn_on()

    async def start(self) -> None:
        """Switch the outlet on."""
        state = await self.turn_on()
        if state != PowerState.ON:
            raise RuntimeError(f"Outlet {self.pin or 1} did not switch on ({state.value})")

    async def halt(self) -> None:
        """Switch the outlet off, unless configured to keep it on."""
        if self.keep_on:
            logger.debug(f"Leaving outlet {self.pin or 1} on")
            return

        state = await self.turn_off()
        if state != PowerState.OFF:
            raise RuntimeError(f"Outlet {self.pin or 1} did not switch off ({state.value})")
