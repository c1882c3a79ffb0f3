"""upshot: outcomes and combinators for explicit error propagation.

Public API:
    - Success / DomainError / Fault: the three outcome variants
    - attempt / attempt_async / returns_outcome: capture raised exceptions
    - select / bind / or_else (+ async forms): transform outcomes
    - on_success / on_error / on_fault (+ async forms): observe outcomes
    - resolve / value_or_default (+ async forms): leave the outcome world
    - defer / Pending: fluent chains over not-yet-settled outcomes
"""

from __future__ import annotations

import logging

from upshot.aio import (
    bind_async,
    on_error_async,
    on_fault_async,
    on_success_async,
    or_else_async,
    resolve_async,
    select_async,
    settle,
    value_or_default_async,
)
from upshot.capture import attempt, attempt_async, returns_outcome
from upshot.combinators import (
    bind,
    on_error,
    on_fault,
    on_success,
    or_else,
    resolve,
    select,
    value_or_default,
)
from upshot.config import FrozenConfig, config_scope, current_config, resolve_config
from upshot.errors import ConfigurationError, InvariantViolationError, UpshotError
from upshot.outcome import (
    OUTCOME_TYPES,
    UNIT,
    DomainError,
    Fault,
    Outcome,
    Success,
    Unit,
    is_domain_error,
    is_fault,
    is_success,
    success_of,
    to_outcome,
)
from upshot.pending import Pending, defer

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("upshot")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("upshot").addHandler(logging.NullHandler())

__all__ = [
    "OUTCOME_TYPES",
    "UNIT",
    "ConfigurationError",
    "DomainError",
    "Fault",
    "FrozenConfig",
    "InvariantViolationError",
    "Outcome",
    "Pending",
    "Success",
    "Unit",
    "UpshotError",
    "attempt",
    "attempt_async",
    "bind",
    "bind_async",
    "config_scope",
    "current_config",
    "defer",
    "is_domain_error",
    "is_fault",
    "is_success",
    "on_error",
    "on_error_async",
    "on_fault",
    "on_fault_async",
    "on_success",
    "on_success_async",
    "or_else",
    "or_else_async",
    "resolve",
    "resolve_async",
    "resolve_config",
    "returns_outcome",
    "select",
    "select_async",
    "settle",
    "success_of",
    "to_outcome",
    "value_or_default",
    "value_or_default_async",
]
