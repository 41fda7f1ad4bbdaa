"""Configuration package for overlayqueue.

Pydantic models and YAML loading utilities, re-exported at the package level.
"""

from overlayqueue.core.config.loader import (
    check_unexpanded_vars,
    expand_env_vars,
    expand_env_vars_recursive,
    load_config,
    merge_configs,
)
from overlayqueue.core.config.models import (
    Config,
    DemoConfig,
    LanePresetConfig,
    LoggingConfig,
    QueueConfig,
)

__all__ = [
    # Models
    "Config",
    "DemoConfig",
    "LanePresetConfig",
    "LoggingConfig",
    "QueueConfig",
    # Loaders
    "check_unexpanded_vars",
    "expand_env_vars",
    "expand_env_vars_recursive",
    "load_config",
    "merge_configs",
]
