"""
Robot registry.

Keeps every robot of a process under a unique name and fans start/halt
out to all of them.
"""

import asyncio
import logging
from typing import Any, Optional, Union

from robotctl.core.config import Config
from robotctl.core.errors import StartupError
from robotctl.core.events import EventEmitter
from robotctl.core.models import RobotSpec
from robotctl.core.naming import make_unique
from robotctl.core.robot import Robot

logger = logging.getLogger(__name__)


class Registry(EventEmitter):
    """
    Collection of robots with unique names.

    Events:
        robot_added: emitted with the robot after create()
        robot_removed: emitted with the robot name after remove()
    """

    def __init__(self, settings: Optional[Config] = None):
        super().__init__()
        self.settings = settings or Config()
        self.robots: dict[str, Robot] = {}
        self.commands = {
            "create_robot": self.create,
            "remove_robot": self.remove,
        }
        self.events = ["robot_added", "robot_removed"]

    def create(self, config: Union[RobotSpec, dict[str, Any], None] = None) -> Robot:
        """
        Build a robot and register it, renaming it if the name is taken.

        Args:
            config: Robot definition

        Returns:
            The new robot
        """
        robot = Robot(config, settings=self.settings)

        if robot.name in self.robots:
            original = robot.name
            robot.name = make_unique(original, self.robots)
            logger.info(
                f"Robot names must be unique. Renaming '{original}' to '{robot.name}'"
            )

        self.robots[robot.name] = robot
        self.emit("robot_added", robot)
        return robot

    async def remove(self, name: str) -> bool:
        """
        Halt a robot and drop it from the registry.

        Returns:
            True if removed, False if not found
        """
        robot = self.robots.get(name)
        if robot is None:
            return False

        await robot.halt()
        self.robots.pop(name, None)
        self.emit("robot_removed", name)
        return True

    def get(self, name: str) -> Optional[Robot]:
        return self.robots.get(name)

    async def start(self) -> dict[str, StartupError]:
        """
        Start every robot concurrently.

        Returns:
            Startup errors keyed by robot name (empty if all started)
        """
        failures: dict[str, StartupError] = {}

        def recorder(name: str):
            def done(error: Optional[StartupError], results: list[Any]) -> None:
                if error is not None:
                    failures[name] = error

            return done

        await asyncio.gather(
            *(robot.start(recorder(name)) for name, robot in list(self.robots.items()))
        )

        for name, error in failures.items():
            logger.error(f"Robot '{name}' failed to start: {error}")

        return failures

    async def halt(self) -> None:
        """Halt every robot concurrently."""
        await asyncio.gather(*(robot.halt() for robot in list(self.robots.values())))

    def to_json(self) -> dict[str, Any]:
        return {
            "robots": [robot.to_json() for robot in self.robots.values()],
            "commands": list(self.commands),
            "events": list(self.events),
        }
