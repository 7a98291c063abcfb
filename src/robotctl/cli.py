"""
Command-line interface for robot controller.

Provides commands for checking, inspecting and running robot definitions.
"""

import asyncio
import json
import logging
import signal
import sys
from pathlib import Path

import click

from robotctl import __version__
from robotctl.adaptors import ADAPTOR_KINDS
from robotctl.core.config import Config, load_config
from robotctl.core.errors import RobotError
from robotctl.core.loader import load_robots
from robotctl.core.registry import Registry
from robotctl.core.robot import Robot
from robotctl.drivers import DRIVER_KINDS

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="robotctl")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option(
    "-c", "--config", "config_path", type=click.Path(exists=True, path_type=Path),
    help="Path to config file"
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """Robot Controller - Start and stop robots built from connections and devices."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    try:
        config = load_config(config_path)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    ctx.obj["config"] = config

    logging.basicConfig(
        level=logging.DEBUG if verbose else config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_definitions(robot_file: Path) -> list[dict]:
    """Load robot definitions or exit with an error message."""
    try:
        definitions = load_robots(robot_file)
    except RobotError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if not definitions:
        click.echo(f"No robots defined in {robot_file}")
        sys.exit(1)

    return definitions


def _build_registry(definitions: list[dict], config: Config) -> Registry:
    """Create every robot in a new registry or exit with an error message."""
    registry = Registry(config)
    try:
        for definition in definitions:
            registry.create(definition)
    except (RobotError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    return registry


@main.command("check")
@click.argument("robot_file", type=click.Path(exists=True, path_type=Path))
@click.pass_context
def check_cmd(ctx: click.Context, robot_file: Path) -> None:
    """Validate robot definitions and build each robot without starting it.

    ROBOT_FILE is a YAML file with one robot or a 'robots:' list.
    """
    verbose = ctx.obj.get("verbose", False)
    definitions = _load_definitions(robot_file)
    settings = Config(mode="manual", log_level=ctx.obj["config"].log_level)

    failed = False
    for index, definition in enumerate(definitions, start=1):
        label = definition.get("name", f"#{index}") if isinstance(definition, dict) else f"#{index}"
        try:
            Robot(definition, settings=settings)
        except (RobotError, ValueError) as e:
            click.echo(f"{label}: {e}", err=True)
            failed = True
            continue
        if verbose:
            click.echo(f"{label}: ok")

    if failed:
        sys.exit(1)

    click.echo(f"{len(definitions)} robot(s) valid")


@main.command("show")
@click.argument("robot_file", type=click.Path(exists=True, path_type=Path))
@click.pass_context
def show_cmd(ctx: click.Context, robot_file: Path) -> None:
    """Print robots, their connections, devices and commands as JSON."""
    config: Config = ctx.obj["config"]
    config.mode = "manual"

    registry = _build_registry(_load_definitions(robot_file), config)
    click.echo(json.dumps(registry.to_json(), indent=2, default=str))


@main.command("run")
@click.argument("robot_file", type=click.Path(exists=True, path_type=Path))
@click.option("--auto", is_flag=True, help="Let robots start themselves (mode: auto)")
@click.pass_context
def run_cmd(ctx: click.Context, robot_file: Path, auto: bool) -> None:
    """Start robots and keep them working until interrupted."""
    config: Config = ctx.obj["config"]
    if auto:
        config.mode = "auto"

    definitions = _load_definitions(robot_file)

    failures = asyncio.run(_run_robots(definitions, config))
    if failures:
        for name, error in failures.items():
            click.echo(f"Error: {name}: {error}", err=True)
        sys.exit(1)


async def _run_robots(definitions: list[dict], config: Config) -> dict:
    """Run robots until SIGINT/SIGTERM, then halt them."""
    registry = _build_registry(definitions, config)

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(signum, stop.set)

    failures = {}
    if config.mode == "manual":
        failures = await registry.start()
        if failures and len(failures) == len(registry.robots):
            return failures

    click.echo(f"Running {len(registry.robots)} robot(s). Press Ctrl+C to stop.")
    await stop.wait()

    logger.info("Stopping robots")
    await registry.halt()
    return failures


@main.command("kinds")
def kinds_cmd() -> None:
    """List available adaptor and driver kinds."""
    click.echo(f"{'TYPE':<10} {'KIND':<12}")
    click.echo("-" * 22)
    for kind in ADAPTOR_KINDS:
        click.echo(f"{'adaptor':<10} {kind:<12}")
    for kind in DRIVER_KINDS:
        click.echo(f"{'driver':<10} {kind:<12}")


if __name__ == "__main__":
    main()
