# src/upshot/config/core.py

"""Core configuration schema and resolution.

- ``Settings`` is the single source of truth for fields, defaults and validation
- ``FrozenConfig`` is the immutable payload the capture boundary reads
- ``config_scope`` installs a task-local ambient configuration
"""

from __future__ import annotations

from contextlib import contextmanager
import contextvars
from dataclasses import dataclass
from functools import cache
import logging
from typing import TYPE_CHECKING, Any, Literal
import warnings

from pydantic import BaseModel, Field, ValidationError, field_validator

from upshot.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Generator, Mapping
    from types import TracebackType

# Pseudo-level that silences capture logging entirely.
LOG_LEVEL_OFF = "OFF"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", LOG_LEVEL_OFF)

# --- Schema (Pydantic wall) ---


class Settings(BaseModel):
    """Pydantic schema for configuration validation and defaults."""

    # Treat asyncio.CancelledError as a fault instead of letting it propagate
    capture_cancellation: bool = Field(default=False)
    # Level used when logging a captured fault
    fault_log_level: str = Field(default="DEBUG", min_length=1)
    # Attach exc_info to capture log records
    log_tracebacks: bool = Field(default=False)

    model_config = {"extra": "forbid"}

    @field_validator("fault_log_level", mode="before")
    @classmethod
    def normalize_fault_log_level(cls, v: Any) -> Any:
        """Accept level names in any case, plus ``WARN`` as an alias."""
        if isinstance(v, str):
            v = v.strip().upper()
            if v == "WARN":
                v = "WARNING"
            if v not in _LOG_LEVELS:
                raise ValueError(
                    f"fault_log_level must be one of {', '.join(_LOG_LEVELS)}"
                )
        return v


@cache
def _default_settings() -> dict[str, Any]:
    return Settings().model_dump()


# --- Immutable runtime payload ---


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable configuration read by the capture boundary."""

    capture_cancellation: bool
    fault_log_level: str
    log_tracebacks: bool

    @property
    def fault_log_levelno(self) -> int | None:
        """Numeric logging level for captured faults, or None when disabled."""
        if self.fault_log_level == LOG_LEVEL_OFF:
            return None
        return logging.getLevelNamesMapping()[self.fault_log_level]


# --- Ambient scope ---

_AMBIENT: contextvars.ContextVar[FrozenConfig | None] = contextvars.ContextVar(
    "upshot_ambient_config", default=None
)

_DOTENV_LOADED: bool = False


class ConfigScope:
    """Context manager for temporarily setting ambient configuration."""

    def __init__(self, cfg: FrozenConfig):
        """Initialize the context manager with a configuration."""
        self._token: contextvars.Token[FrozenConfig | None] | None = None
        self._cfg = cfg

    def __enter__(self) -> FrozenConfig:
        """Enter the context and set ambient configuration."""
        self._token = _AMBIENT.set(self._cfg)
        return self._cfg

    def __exit__(
        self,
        _: type[BaseException] | None,
        __: BaseException | None,
        ___: TracebackType | None,
    ) -> Literal[False]:
        """Exit the context and restore the previous ambient configuration."""
        if self._token is not None:
            _AMBIENT.reset(self._token)
        return False


@contextmanager
def config_scope(
    cfg_or_overrides: Mapping[str, Any] | FrozenConfig | None = None,
    **overrides: object,
) -> Generator[FrozenConfig]:
    """Create a scoped configuration context.

    The scope is held in a ``ContextVar``, so it is local to the current thread
    or asyncio task.

    Args:
        cfg_or_overrides: Either a FrozenConfig to use directly, or a mapping
            of overrides to apply during resolution.
        **overrides: Additional override values (merged with cfg_or_overrides
            if it's a mapping).

    Yields:
        The FrozenConfig instance active in this scope.

    Example:
        with config_scope(capture_cancellation=True):
            outcome = await attempt_async(task)
    """
    if isinstance(cfg_or_overrides, FrozenConfig):
        cfg = cfg_or_overrides
    else:
        combined_overrides = {**(cfg_or_overrides or {}), **overrides}
        cfg = resolve_config(overrides=combined_overrides)

    with ConfigScope(cfg):
        yield cfg


def _try_load_dotenv() -> None:
    """Load a ``.env`` file once so ``UPSHOT_*`` values defined there apply."""
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    from dotenv import load_dotenv

    load_dotenv()
    _DOTENV_LOADED = True


# --- Public resolution API ---


def resolve_config(overrides: Mapping[str, Any] | None = None) -> FrozenConfig:
    """Resolve configuration from all sources into a FrozenConfig.

    Precedence: defaults < environment (``UPSHOT_*``) < overrides.

    Raises:
        ConfigurationError: If configuration validation fails.
    """
    _try_load_dotenv()

    from .loaders import ENV_PREFIX, load_env

    env = load_env()
    unknown = sorted(k for k in env if k not in Settings.model_fields)
    for name in unknown:
        warnings.warn(
            f"Configuration: ignoring unknown variable {ENV_PREFIX}{name.upper()}",
            UserWarning,
            stacklevel=2,
        )
        del env[name]

    merged = {**_default_settings(), **env, **(overrides or {})}

    try:
        settings = Settings.model_validate(merged)
    except ValidationError as e:
        err = e.errors()[0]
        msg = err.get("msg") or "invalid value"
        # Drop Pydantic's standard wrapper prefix
        if msg.startswith("Value error, "):
            msg = msg[13:]
        loc = ".".join(str(part) for part in err.get("loc", ()))
        raise ConfigurationError(
            f"Configuration validation failed for {loc or 'settings'}: {msg}",
            hint=f"Check {ENV_PREFIX}* environment variables and overrides.",
        ) from e

    return FrozenConfig(
        capture_cancellation=settings.capture_cancellation,
        fault_log_level=settings.fault_log_level,
        log_tracebacks=settings.log_tracebacks,
    )


@cache
def _environment_config() -> FrozenConfig:
    return resolve_config()


def current_config() -> FrozenConfig:
    """Return the ambient scoped configuration, or the environment one.

    The environment resolution is cached; call ``reset_config_cache`` after
    changing ``UPSHOT_*`` variables at runtime.
    """
    scoped = _AMBIENT.get()
    if scoped is not None:
        return scoped
    return _environment_config()


def reset_config_cache() -> None:
    """Forget the cached environment configuration."""
    _environment_config.cache_clear()
