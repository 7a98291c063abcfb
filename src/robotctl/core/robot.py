"""
Robot controller.

A robot owns named connections and the devices bound to them. Starting a
robot connects every connection, then starts every device, then runs the
robot's work routine. Halting reverses this, devices first, and never lets
one failing device or connection keep the others running.
"""

import asyncio
import inspect
import itertools
import logging
import types
from dataclasses import replace
from functools import partial
from typing import Any, Callable, Optional, Union

from robotctl.core.aio import Unit, join, settle
from robotctl.core.config import Config
from robotctl.core.connection import Connection
from robotctl.core.device import Device
from robotctl.core.errors import (
    CommandDefinitionError,
    ConfigurationError,
    ConnectionReferenceError,
    HaltUnitError,
    RobotError,
    StartupError,
)
from robotctl.core.events import EventEmitter
from robotctl.core.models import ConnectionSpec, DeviceSpec, RobotSpec
from robotctl.core.naming import make_unique
from robotctl.core.validator import validate

logger = logging.getLogger(__name__)

# Numbers robots created without a name
ROBOT_ID = itertools.count(1)

StartCallback = Callable[[Optional[StartupError], list[Any]], Any]


def _no_work(robot: "Robot") -> None:
    robot.log("No work yet.")


class Robot(EventEmitter):
    """
    Lifecycle orchestrator for one robot.

    Events:
        ready: emitted with the robot once it is working
        error: emitted with a StartupError when starting fails
    """

    def __init__(
        self,
        config: Union[RobotSpec, dict[str, Any], None] = None,
        settings: Optional[Config] = None,
    ):
        """
        Initialize robot.

        Args:
            config: Robot definition, as a RobotSpec or a raw mapping
            settings: Controller settings (start mode, work mode)

        Raises:
            ConfigurationError: If the definition is invalid
            ConnectionReferenceError: If a device names an unknown connection
            CommandDefinitionError: If explicit commands are malformed
        """
        if config is None:
            config = {}
        if isinstance(config, RobotSpec):
            spec = config
        else:
            validate(config)
            spec = RobotSpec.from_dict(config)

        super().__init__()
        self.settings = settings or Config()
        self.last_halt_errors: list[HaltUnitError] = []
        self._work_task: Optional[asyncio.Future] = None
        self._start_task: Optional[asyncio.Future] = None

        self.init_robot(spec)
        self._apply_extensions(spec)
        self._apply_commands(spec)

        if self.settings.mode == "auto":
            self._schedule_start()

    # --- Construction ---

    def init_robot(self, spec: RobotSpec) -> None:
        """Set initial state and register declared connections and devices."""
        self.name: str = spec.name or f"Robot {next(ROBOT_ID)}"
        self.running = False

        self.connections: dict[str, Connection] = {}
        self.devices: dict[str, Device] = {}
        self.commands: dict[str, Callable[..., Any]] = {}
        self.events: list[str] = list(spec.events)

        self.work: Callable[["Robot"], Any] = spec.work or _no_work

        for conn in spec.connections:
            self.connection(conn.name, conn)

        for device in spec.devices:
            self.device(device.name, device)

    def _apply_extensions(self, spec: RobotSpec) -> None:
        """Attach extension properties; callables become methods and commands."""
        explicit_commands = spec.commands is not None

        for key, value in spec.extensions.items():
            if hasattr(self, key):
                logger.debug(f"Ignoring extension '{key}', robot already defines it")
                continue

            if callable(value):
                method = types.MethodType(value, self)
                setattr(self, key, method)
                if not explicit_commands:
                    self.commands[key] = method
            else:
                setattr(self, key, value)

    def _apply_commands(self, spec: RobotSpec) -> None:
        """Install an explicit command table, if one was declared."""
        if spec.commands is None:
            return

        commands = spec.commands
        if callable(commands) and not isinstance(commands, dict):
            commands = commands(self)

        if not isinstance(commands, dict):
            raise CommandDefinitionError(
                "Robot commands must be a mapping or a callable that returns a mapping"
            )

        self.commands = dict(commands)

    def _schedule_start(self) -> None:
        """Start on the next loop tick so callers can add listeners first."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.log("Auto start needs a running event loop, call start() instead.")
            return

        loop.call_soon(self._auto_start)

    def _auto_start(self) -> None:
        self._start_task = asyncio.ensure_future(self.start(self._auto_started))
        self._start_task.add_done_callback(partial(self._log_task_failure, "Start"))

    def _auto_started(self, error: Optional[StartupError], results: list[Any]) -> None:
        if error is None:
            logger.debug(f"Robot '{self.name}' started automatically")

    # --- Registration ---

    def connection(
        self, name: str, spec: Union[ConnectionSpec, dict[str, Any]]
    ) -> "Robot":
        """
        Add a connection, renaming it if the name is taken.

        Devices declared inside the connection are registered right after
        it and bound to it.

        Args:
            name: Requested connection name
            spec: Connection declaration

        Returns:
            The robot
        """
        if isinstance(spec, dict):
            spec = ConnectionSpec.from_dict(spec, name)
        if not name:
            raise ConfigurationError("Connections must have a name")

        if name in self.connections:
            original = name
            name = make_unique(original, self.connections)
            self.log(
                f"Connection names must be unique. Renaming '{original}' to '{name}'"
            )

        embedded = spec.devices
        self.connections[name] = Connection.from_spec(
            replace(spec, name=name, devices=[]), robot=self
        )

        for device in embedded:
            self.device(device.name, replace(device, connection=name))

        return self

    def device(self, name: str, spec: Union[DeviceSpec, dict[str, Any]]) -> "Robot":
        """
        Add a device, renaming it if the name is taken.

        A device without a connection name is bound to the first connection
        registered on the robot.

        Args:
            name: Requested device name
            spec: Device declaration

        Returns:
            The robot

        Raises:
            ConnectionReferenceError: If the named connection does not exist
        """
        if isinstance(spec, dict):
            spec = DeviceSpec.from_dict(spec, name)
        if not name:
            raise ConfigurationError("Devices must have a name")

        if name in self.devices:
            original = name
            name = make_unique(original, self.devices)
            self.log(f"Device names must be unique. Renaming '{original}' to '{name}'")

        if spec.connection is not None:
            connection = self.connections.get(spec.connection)
            if connection is None:
                self.log(f"No connection found with the name {spec.connection}.")
                raise ConnectionReferenceError(name, spec.connection)
        else:
            connection = next(iter(self.connections.values()), None)

        self.devices[name] = Device.from_spec(
            replace(spec, name=name), connection, robot=self
        )

        return self

    # --- Start ---

    async def start(self, callback: Optional[StartCallback] = None) -> "Robot":
        """
        Start connections, then devices, then work.

        On failure whatever started is halted again, then the error is
        reported to the robot's `error` method, to `error` listeners and to
        `callback`, in that order. Without a callback the StartupError is
        raised instead. A work routine that raises halts the robot again and
        its error propagates.

        Args:
            callback: Called as callback(error, results) when done

        Returns:
            The robot
        """
        if self.running:
            return self

        sync_work = self.settings.work_mode == "sync"
        if sync_work:
            self.start_work()

        results: list[Any] = []
        error: Optional[Exception] = None
        for phase in (self.start_connections, self.start_devices):
            error, phase_results = await phase()
            results.append(phase_results)
            if error is not None:
                break

        if error is None:
            if not sync_work:
                try:
                    self.start_work()
                except Exception as e:
                    self.log("An error occured while starting the robot's work:")
                    self.log(str(e))
                    await self._shutdown(only_active=True)
                    raise
            if callback is not None:
                callback(None, results)
            return self

        failure = StartupError(error, results)
        self.log("An error occured while trying to start the robot:")
        self.log(str(error))

        await self._shutdown(only_active=True)

        handler = getattr(self, "error", None)
        if callable(handler):
            handler(failure)

        if self.listeners("error"):
            self.emit("error", failure)

        if callback is None:
            raise failure from error

        callback(failure, results)
        return self

    def start_work(self) -> None:
        """Announce readiness and run the work routine."""
        self.log("Working.")

        self.emit("ready", self)
        result = self.work(self)
        if inspect.isawaitable(result):
            self._work_task = asyncio.ensure_future(result)
            self._work_task.add_done_callback(partial(self._log_task_failure, "Work"))
        self.running = True

    def _log_task_failure(self, label: str, task: asyncio.Future) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self.log(f"{label} failed: {error}")

    async def start_connections(self) -> tuple[Optional[Exception], list[Any]]:
        """Connect every connection concurrently."""
        self.log("Starting connections.")

        return await join(
            [partial(self.start_connection, c) for c in list(self.connections.values())]
        )

    async def start_connection(self, connection: Connection) -> Any:
        """
        Connect a single connection, unless it is already connected.

        The connected flag is set as soon as connect is invoked, before the
        adaptor reports completion.
        """
        if connection.connected:
            return None

        message = f"Starting connection '{connection.name}'"
        if connection.host:
            message += f" on host {connection.host}"
        elif connection.port:
            message += f" on port {connection.port}"
        self.log(message + ".")

        pending = connection.connect()
        connection.connected = True
        return await settle(pending)

    async def start_devices(self) -> tuple[Optional[Exception], list[Any]]:
        """Start every device concurrently."""
        self.log("Starting devices.")

        return await join(
            [partial(self.start_device, d) for d in list(self.devices.values())]
        )

    async def start_device(self, device: Device) -> Any:
        """
        Start a single device, unless it is already started.

        The started flag is set as soon as start is invoked, before the
        driver reports completion.
        """
        if device.started:
            return None

        message = f"Starting device '{device.name}'"
        if device.pin is not None:
            message += f" on pin {device.pin}"
        self.log(message + ".")

        pending = device.start()
        device.started = True
        return await settle(pending)

    # --- Halt ---

    async def halt(self, callback: Optional[Callable[[], Any]] = None) -> None:
        """
        Halt all devices, then disconnect all connections.

        Failures of single devices or connections are logged and collected
        in `last_halt_errors`; they never stop the others from halting.

        Args:
            callback: Called without arguments once halting is done
        """
        if not self.running:
            if callback is not None:
                callback()
            return

        await self._shutdown()

        if callback is not None:
            callback()

    async def _shutdown(self, only_active: bool = False) -> None:
        """Halt devices then connections; `only_active` skips idle ones."""
        self.running = False
        if self._work_task is not None and not self._work_task.done():
            self._work_task.cancel()

        devices = [
            d for d in self.devices.values() if d.started or not only_active
        ]
        connections = [
            c for c in self.connections.values() if c.connected or not only_active
        ]

        try:
            _, device_results = await join(
                [self._quietly(f"device '{d.name}'", d.halt) for d in devices]
            )
            _, connection_results = await join(
                [self._quietly(f"connection '{c.name}'", c.disconnect) for c in connections]
            )
        except Exception as e:
            self.log("An error occured while attempting to safely halt the robot")
            self.log(str(e))
            return

        self.last_halt_errors = [
            r for r in device_results + connection_results if isinstance(r, HaltUnitError)
        ]

    def _quietly(self, unit: str, call: Callable[[], Any]) -> Unit:
        """Wrap a halt call so that it always completes successfully."""

        async def run() -> Optional[HaltUnitError]:
            try:
                await settle(call())
            except Exception as e:
                failure = HaltUnitError(unit, e)
                self.log(str(failure))
                return failure
            return None

        return run

    # --- Runtime changes ---

    async def remove_connection(self, name: str) -> bool:
        """
        Disconnect a connection and drop it from the robot.

        Returns:
            True if removed, False if not found
        """
        connection = self.connections.get(name)
        if connection is None:
            return False

        await settle(connection.disconnect())
        self.connections.pop(name, None)
        return True

    async def remove_device(self, name: str) -> bool:
        """
        Halt a device and drop it from the robot.

        Returns:
            True if removed, False if not found
        """
        device = self.devices.get(name)
        if device is None:
            return False

        await settle(device.halt())
        self.devices.pop(name, None)
        return True

    async def create_device(
        self,
        name: str,
        adaptor: Any,
        driver: Any,
        host: Optional[str] = None,
        port: Optional[Union[int, str]] = None,
        pin: Optional[Union[int, str]] = None,
    ) -> Device:
        """
        Add a device with a dedicated connection of the same name and start both.

        Args:
            name: Name for the connection and the device
            adaptor: Adaptor kind, class or instance
            driver: Driver kind, class or instance
            host: Host for the connection
            port: Port for the connection
            pin: Pin for the device

        Returns:
            The started device
        """
        self.connection(name, ConnectionSpec(name=name, adaptor=adaptor, host=host, port=port))
        connection = self.connections[next(reversed(self.connections))]

        self.device(
            name,
            DeviceSpec(name=name, driver=driver, connection=connection.name, pin=pin),
        )
        device = self.devices[next(reversed(self.devices))]

        await self.start_connection(connection)
        await self.start_device(device)
        self.log(f"Device '{device.name}' ready.")
        return device

    async def delete_device(self, name: str) -> str:
        """
        Halt and remove a device, and its connection once no device uses it.

        Returns:
            Status message
        """
        device = self.devices.get(name)
        if device is None:
            return f"device: {name} not found"

        await self.remove_device(name)

        connection = device.connection
        if connection is not None and connection.name in self.connections:
            shared = any(d.connection is connection for d in self.devices.values())
            if not shared:
                await self.remove_connection(connection.name)

        return "device removed"

    # --- Commands & serialization ---

    def command(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """
        Invoke a command by name.

        Raises:
            RobotError: If the robot has no such command
        """
        if name not in self.commands:
            raise RobotError(f"Robot '{self.name}' has no command '{name}'")
        return self.commands[name](*args, **kwargs)

    def to_json(self) -> dict[str, Any]:
        """Condense the robot into a JSON-serializable mapping."""
        return {
            "name": self.name,
            "connections": [c.to_json() for c in self.connections.values()],
            "devices": [d.to_json() for d in self.devices.values()],
            "commands": list(self.commands),
            "events": list(self.events) if isinstance(self.events, list) else [],
        }

    def log(self, message: str) -> None:
        logger.info(f"[{self.name}] - {message}")

    def __str__(self) -> str:
        return f"[Robot name='{self.name}']"
