"""
Configuration management for robot controller.

Loads configuration from YAML files with environment variable overrides.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml


# Default configuration paths
DEFAULT_CONFIG_DIR = Path.home() / ".config" / "robotctl"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
SYSTEM_CONFIG_FILE = Path("/etc/robotctl/config.yaml")

START_MODES = ("manual", "auto")
WORK_MODES = ("async", "sync")


@dataclass
class Config:
    """
    Controller settings shared by every robot built from it.

    mode: "manual" waits for an explicit start(), "auto" starts each robot
        on the next event loop tick after construction.
    work_mode: "async" runs work once connections and devices are up,
        "sync" dispatches work as soon as start() begins.
    """

    mode: str = "manual"
    work_mode: str = "async"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create Config from dictionary."""
        mode = data.get("mode", "manual")
        work_mode = data.get("work_mode", "async")

        if mode not in START_MODES:
            raise ValueError(f"Invalid mode '{mode}', expected one of {START_MODES}")
        if work_mode not in WORK_MODES:
            raise ValueError(
                f"Invalid work_mode '{work_mode}', expected one of {WORK_MODES}"
            )

        return cls(
            mode=mode,
            work_mode=work_mode,
            log_level=data.get("log_level", "INFO"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert Config to dictionary."""
        return {
            "mode": self.mode,
            "work_mode": self.work_mode,
            "log_level": self.log_level,
        }


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from YAML file.

    Search order:
    1. Explicit path if provided
    2. ROBOTCTL_CONFIG environment variable
    3. ~/.config/robotctl/config.yaml
    4. /etc/robotctl/config.yaml
    5. Default values

    Environment variable overrides:
    - ROBOTCTL_MODE: Override mode
    - ROBOTCTL_WORK_MODE: Override work_mode
    - ROBOTCTL_LOG_LEVEL: Override log_level

    Args:
        config_path: Optional explicit path to config file

    Returns:
        Loaded configuration
    """
    if config_path:
        paths_to_try = [config_path]
    else:
        env_path = os.environ.get("ROBOTCTL_CONFIG")
        paths_to_try = []
        if env_path:
            paths_to_try.append(Path(env_path))
        paths_to_try.extend([DEFAULT_CONFIG_FILE, SYSTEM_CONFIG_FILE])

    config_data = {}
    for path in paths_to_try:
        if path.exists():
            try:
                with open(path) as f:
                    config_data = yaml.safe_load(f) or {}
                break
            except (OSError, yaml.YAMLError):
                continue

    config = Config.from_dict(config_data)

    return _apply_env_overrides(config)


def _apply_env_overrides(config: Config) -> Config:
    """Apply environment variable overrides to config."""
    mode = os.environ.get("ROBOTCTL_MODE")
    if mode in START_MODES:
        config.mode = mode

    work_mode = os.environ.get("ROBOTCTL_WORK_MODE")
    if work_mode in WORK_MODES:
        config.work_mode = work_mode

    if "ROBOTCTL_LOG_LEVEL" in os.environ:
        config.log_level = os.environ["ROBOTCTL_LOG_LEVEL"]

    return config


def save_config(config: Config, path: Path) -> None:
    """
    Save configuration to YAML file.

    Args:
        config: Configuration to save
        path: Path to save to
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        f.write("# Robot Controller Configuration\n\n")
        yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)


def get_default_config() -> Config:
    """Get default configuration without loading from file."""
    return Config()
