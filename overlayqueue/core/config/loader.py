"""Configuration loading and merging utilities.

This module handles YAML config file loading, ``${VAR}`` / ``${VAR:-fallback}``
expansion from the environment, and deep merging of command-line overrides.
"""

import copy
import os
import re
from pathlib import Path
from typing import Any

import yaml

from overlayqueue.core.config.models import Config

_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")


def expand_env_vars(value: str) -> str:
    """Expand ``${VAR}`` and ``${VAR:-fallback}`` in a string.

    Unknown variables without a fallback are left unchanged so that
    ``check_unexpanded_vars`` can report them.

    Examples:
        >>> os.environ['QUEUE'] = 'toasts'
        >>> expand_env_vars('lane: ${QUEUE}, hold: ${HOLD_MS:-500}')
        'lane: toasts, hold: 500'
    """

    def replacer(match: re.Match[str]) -> str:
        name, fallback = match.group(1), match.group(2)
        if name in os.environ:
            return os.environ[name]
        return fallback if fallback is not None else match.group(0)

    return _VAR_PATTERN.sub(replacer, value)


def expand_env_vars_recursive(obj: Any) -> Any:
    """Expand environment variables in every string of a nested dict/list tree."""
    if isinstance(obj, dict):
        return {key: expand_env_vars_recursive(value) for key, value in obj.items()}
    if isinstance(obj, list):
        return [expand_env_vars_recursive(item) for item in obj]
    if isinstance(obj, str):
        return expand_env_vars(obj)
    return obj


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge ``override`` over ``base`` without mutating either.

    Used to lay command-line flags over the file contents.

    Examples:
        >>> merge_configs({'lanes': {'onboarding': {'paused': True, 'minimum_delay_ms': 50}}},
        ...               {'lanes': {'onboarding': {'paused': False}}})
        {'lanes': {'onboarding': {'paused': False, 'minimum_delay_ms': 50}}}
    """
    result = copy.deepcopy(base)
    for key, value in override.items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = merge_configs(current, value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def check_unexpanded_vars(data: Any, source: str) -> None:
    """Fail if any ``${VAR}`` reference survived expansion.

    Args:
        data: Expanded configuration data.
        source: Human-readable label for error messages (e.g., file path).

    Raises:
        ValueError: Naming each unresolved variable and the key it appears under.
    """
    unresolved = sorted(set(_find_unexpanded_vars(data, "")))
    if unresolved:
        details = ", ".join(f"{var} (at {key})" for var, key in unresolved)
        raise ValueError(
            f"Unresolved environment variable(s) in {source}: {details}. "
            f"Set these variables, give them a ${{VAR:-fallback}}, or remove the references."
        )


def _find_unexpanded_vars(obj: Any, key_path: str) -> list[tuple[str, str]]:
    if isinstance(obj, dict):
        return [
            found
            for key, value in obj.items()
            for found in _find_unexpanded_vars(value, f"{key_path}.{key}" if key_path else str(key))
        ]
    if isinstance(obj, list):
        return [found for i, item in enumerate(obj) for found in _find_unexpanded_vars(item, f"{key_path}[{i}]")]
    if isinstance(obj, str):
        return [(f"${{{m.group(1)}}}", key_path or "<root>") for m in _VAR_PATTERN.finditer(obj)]
    return []


def load_config(path: Path | str, overrides: dict[str, Any] | None = None) -> Config:
    """Load configuration from a YAML file with environment variable expansion.

    Overrides are merged after expansion, so they are taken literally.

    Args:
        path: Path to the YAML configuration file.
        overrides: Values deep-merged over the file contents (the CLI passes its flags here).

    Returns:
        Parsed Config object.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        yaml.YAMLError: If the YAML is malformed.
        ValueError: If a ${VAR} reference cannot be resolved, or a value is invalid.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open() as f:
        data: dict[str, Any] = yaml.safe_load(f) or {}

    data = expand_env_vars_recursive(data)
    check_unexpanded_vars(data, source=str(config_path))

    if overrides:
        data = merge_configs(data, overrides)

    return Config(**data)
