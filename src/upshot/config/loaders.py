# src/upshot/config/loaders.py

"""Configuration loaders for the environment.

Loaders return plain dictionaries that the core resolver merges. They perform
type coercion but no validation.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

# --- Constants ---

ENV_PREFIX = "UPSHOT_"


def _coerce_bool(v: str) -> bool:
    """Convert string to boolean using common conventions."""
    return v.strip().lower() in {"1", "true", "yes", "on"}


def _coerce_env_value(value: str, target_type: type | None) -> Any:
    if target_type is bool:
        return _coerce_bool(value)
    return value


def load_env(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Load configuration from ``UPSHOT_*`` environment variables.

    Unknown ``UPSHOT_*`` keys are returned as-is; ``resolve_config`` warns
    about them and drops them. Boolean fields are coerced using the usual
    on/off spellings; everything else is passed through for the schema.

    Args:
        environ: Mapping to read instead of ``os.environ`` (used by tests).

    Returns:
        Dictionary of configuration values keyed by field name.
    """
    from .core import Settings  # local import keeps loaders import-light

    source = os.environ if environ is None else environ
    config: dict[str, Any] = {}
    for key, value in source.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field_name = key[len(ENV_PREFIX) :].lower()
        info = Settings.model_fields.get(field_name)
        target_type = info.annotation if info is not None else None
        config[field_name] = _coerce_env_value(value, target_type)
    return config
