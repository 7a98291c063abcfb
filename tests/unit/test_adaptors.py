"""Unit tests for connection adaptors and the driver factory."""

import asyncio

import pytest
import requests

from robotctl.adaptors import ADAPTOR_KINDS
from robotctl.adaptors.base import get_adaptor
from robotctl.adaptors.http import HttpAdaptor
from robotctl.adaptors.loopback import LoopbackAdaptor
from robotctl.adaptors.tcp import TcpAdaptor
from robotctl.drivers import DRIVER_KINDS
from robotctl.drivers.base import get_driver
from robotctl.drivers.loopback import LoopbackDriver


class TestGetAdaptor:
    """Tests for adaptor factory function."""

    def test_kinds(self):
        """Test every listed kind can be built."""
        for kind in ADAPTOR_KINDS:
            assert get_adaptor(kind, "localhost", 1) is not None

    def test_loopback(self):
        """Test building a loopback adaptor."""
        adaptor = get_adaptor("loopback", "h", 5, speed=9600)

        assert isinstance(adaptor, LoopbackAdaptor)
        assert adaptor.host == "h"
        assert adaptor.port == 5
        assert adaptor.details == {"speed": 9600}

    def test_unknown(self):
        """Test unknown kinds are rejected."""
        with pytest.raises(ValueError, match="Unsupported adaptor kind: zigbee"):
            get_adaptor("zigbee")


class TestGetDriver:
    """Tests for driver factory function."""

    def test_kinds(self):
        """Test the listed driver kinds."""
        assert DRIVER_KINDS == ("loopback", "power")

    def test_loopback(self):
        """Test building a loopback driver."""
        driver = get_driver("loopback", None, 13)

        assert isinstance(driver, LoopbackDriver)
        assert driver.pin == 13
        assert driver.commands["ping"]() == "pong"

    def test_unknown(self):
        """Test unknown kinds are rejected."""
        with pytest.raises(ValueError, match="Unsupported driver kind"):
            get_driver("servo")


class TestLoopbackAdaptor:
    """Tests for LoopbackAdaptor."""

    def test_connect_disconnect(self):
        """Test the adaptor tracks its state."""
        adaptor = LoopbackAdaptor()

        asyncio.run(adaptor.connect())
        assert adaptor.is_connected is True
        asyncio.run(adaptor.disconnect())

        assert adaptor.is_connected is False
        assert adaptor.connect_count == 1
        assert adaptor.disconnect_count == 1


class TestTcpAdaptor:
    """Tests for TcpAdaptor."""

    def test_needs_host_and_port(self):
        """Test connecting without an address fails."""
        with pytest.raises(ConnectionError, match="host and port"):
            asyncio.run(TcpAdaptor("localhost").connect())

    def test_echo_roundtrip(self):
        """Test connecting, writing and reading against a local server."""

        async def echo(reader, writer):
            writer.write(await reader.read(100))
            await writer.drain()
            writer.close()

        async def scenario():
            server = await asyncio.start_server(echo, "127.0.0.1", 0)
            port = server.sockets[0].getsockname()[1]
            adaptor = TcpAdaptor("127.0.0.1", port)
            async with server:
                await adaptor.connect()
                connected = adaptor.is_connected
                await adaptor.write(b"hello")
                data = await adaptor.read()
                await adaptor.disconnect()
            return connected, data, adaptor.is_connected

        connected, data, still_connected = asyncio.run(scenario())

        assert connected is True
        assert data == b"hello"
        assert still_connected is False

    def test_refused(self):
        """Test an unreachable port raises ConnectionError."""

        async def scenario():
            server = await asyncio.start_server(lambda r, w: None, "127.0.0.1", 0)
            port = server.sockets[0].getsockname()[1]
            server.close()
            await server.wait_closed()
            await TcpAdaptor("127.0.0.1", port).connect()

        with pytest.raises(ConnectionError, match="Failed to connect"):
            asyncio.run(scenario())

    def test_write_when_closed(self):
        """Test I/O on a closed adaptor fails."""
        with pytest.raises(ConnectionError, match="not connected"):
            asyncio.run(TcpAdaptor("h", 1).write(b"x"))

    def test_disconnect_when_closed(self):
        """Test disconnecting an unopened adaptor is a no-op."""
        asyncio.run(TcpAdaptor("h", 1).disconnect())


class TestHttpAdaptor:
    """Tests for HttpAdaptor."""

    def test_base_url(self):
        """Test the base URL includes the port when given."""
        assert HttpAdaptor("10.0.0.5").base_url == "http://10.0.0.5"
        assert HttpAdaptor("10.0.0.5", 8080).base_url == "http://10.0.0.5:8080"

    def test_session_lifecycle(self):
        """Test connect opens a session and disconnect closes it."""
        adaptor = HttpAdaptor("10.0.0.5")

        asyncio.run(adaptor.connect())
        assert isinstance(adaptor.session, requests.Session)
        asyncio.run(adaptor.disconnect())

        assert adaptor.session is None

    def test_needs_host(self):
        """Test connecting without a host fails."""
        with pytest.raises(ConnectionError, match="needs a host"):
            asyncio.run(HttpAdaptor().connect())
