# src/upshot/config/__init__.py

"""Configuration for the capture boundary.

Configuration is resolved once from the environment (and an optional ``.env``
file) into an immutable ``FrozenConfig``; ``config_scope`` overrides it for
the current task.

Key exports:
- resolve_config: Resolve defaults, environment and overrides
- current_config: The configuration in effect right now
- config_scope: Context manager for scoped configuration
- Settings: Pydantic schema for validation and defaults
"""

# ruff: noqa: I001

from .core import (
    FrozenConfig,
    Settings,
    LOG_LEVEL_OFF,
    config_scope,
    current_config,
    reset_config_cache,
    resolve_config,
)
from .loaders import ENV_PREFIX, load_env

__all__ = [  # noqa: RUF022
    # Main public API
    "resolve_config",
    "current_config",
    "config_scope",
    "FrozenConfig",
    # Schema and advanced usage
    "Settings",
    "LOG_LEVEL_OFF",
    "ENV_PREFIX",
    "load_env",
    "reset_config_cache",
]
