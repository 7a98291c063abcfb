"""
HTTP adaptor.

Holds a requests session for devices controlled through an HTTP API,
such as Tasmota or Shelly smart plugs.
"""

import logging
from typing import Optional

import requests

from robotctl.adaptors.base import Adaptor

logger = logging.getLogger(__name__)


class HttpAdaptor(Adaptor):
    """Adaptor sharing one HTTP session between the devices on a host."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.session: Optional[requests.Session] = None

    @property
    def base_url(self) -> str:
        """Root URL of the remote host."""
        if self.port:
            return f"http://{self.host}:{self.port}"
        return f"http://{self.host}"

    async def connect(self) -> None:
        """Open the HTTP session."""
        if not self.host:
            raise ConnectionError("HTTP adaptor needs a host")
        self.session = requests.Session()
        logger.debug(f"HTTP session open for {self.base_url}")

    async def disconnect(self) -> None:
        """Close the HTTP session."""
        if self.session is not None:
            self.session.close()
            self.session = None
