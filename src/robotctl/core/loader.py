"""
Robot definition files.

Loads robot definitions from YAML. A file holds either one robot mapping
or a `robots:` list of them. Work routines, error handlers and command
tables are referenced as "module:attribute" strings and imported.
"""

import importlib
from pathlib import Path
from typing import Any

import yaml

from robotctl.core.errors import ConfigurationError

# Keys whose string values are import references
CALLABLE_KEYS = ("work", "play", "error", "commands")


def resolve_reference(reference: str) -> Any:
    """
    Import an object from a "package.module:attribute" reference.

    Raises:
        ConfigurationError: If the reference is malformed or cannot be imported
    """
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise ConfigurationError(
            f"Invalid reference '{reference}'", hint="expected 'module:attribute'"
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import '{module_name}': {e}")

    try:
        target = module
        for part in attribute.split("."):
            target = getattr(target, part)
    except AttributeError:
        raise ConfigurationError(f"'{module_name}' has no attribute '{attribute}'")

    return target


def load_robots(path: Path) -> list[dict[str, Any]]:
    """
    Load robot definitions from a YAML file.

    Args:
        path: Definition file

    Returns:
        Robot definition mappings, references resolved

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read robot file {path}: {e}")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in robot file {path}: {e}")

    if data is None:
        return []

    if isinstance(data, dict) and "robots" in data:
        definitions = data["robots"] or []
    else:
        definitions = [data]

    if not isinstance(definitions, list):
        raise ConfigurationError(f"'robots' in {path} must be a list")

    return [_resolve(definition) for definition in definitions]


def _resolve(definition: Any) -> Any:
    if not isinstance(definition, dict):
        return definition

    resolved = dict(definition)
    for key in CALLABLE_KEYS:
        if isinstance(resolved.get(key), str):
            resolved[key] = resolve_reference(resolved[key])
    return resolved
