"""Synchronous combinators over outcomes.

Every function here is pure with respect to the outcome it receives: it either
returns that same immutable outcome or builds a new one. User callbacks run
inside ``attempt``, so an exception they raise comes back as ``Fault``.
``resolve`` is the exception: it leaves the outcome world, so its callbacks
raise normally.

``DomainError`` and ``Fault`` short-circuit ``select``, ``bind`` and the
``on_*`` hooks; ``or_else`` is the only combinator that turns them back into
``Success``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from upshot.capture import attempt
from upshot.outcome import (
    UNIT,
    DomainError,
    Fault,
    Success,
    Unit,
    success_of,
    unknown_variant,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from upshot.outcome import Outcome

__all__ = [
    "bind",
    "on_error",
    "on_fault",
    "on_success",
    "or_else",
    "resolve",
    "select",
    "value_or_default",
]


def select[T, R](outcome: Outcome[T], on_success: Callable[[T], R]) -> Outcome[R]:
    """Map the value of a ``Success``; pass errors through.

    The mapped value is wrapped as-is, even when it is itself an outcome
    (use ``bind`` to flatten). A ``None`` result becomes ``UNIT``.
    """
    match outcome:
        case Success(value):
            return attempt(lambda: success_of(on_success(value)))
        case DomainError() | Fault():
            return outcome
        case _:
            raise unknown_variant(outcome, "select")


def bind[T, R](
    outcome: Outcome[T], on_success: Callable[[T], Outcome[R]]
) -> Outcome[R]:
    """Chain an outcome-returning step after a ``Success``; pass errors through.

    A plain value returned by *on_success* is converted with ``to_outcome``.
    """
    match outcome:
        case Success(value):
            return attempt(lambda: on_success(value))
        case DomainError() | Fault():
            return outcome
        case _:
            raise unknown_variant(outcome, "bind")


def or_else[T, R](outcome: Outcome[T], recover: Callable[[str], R]) -> Outcome[T | R]:
    """Heal an error by computing a value from its message.

    ``Success`` is returned unchanged and *recover* is not called. For
    ``DomainError`` the message is passed; for ``Fault`` the exception's
    message is passed. The recovered value is wrapped as ``Success``.
    """
    match outcome:
        case Success():
            return outcome
        case DomainError() | Fault():
            message = outcome.error_message
            return attempt(lambda: success_of(recover(message)))
        case _:
            raise unknown_variant(outcome, "or_else")


def _run_for_effect(action: Callable[[Any], object], arg: Any) -> Unit:
    action(arg)
    return UNIT


def _observe[T](
    outcome: Outcome[T], action: Callable[[Any], object], arg: Any
) -> Outcome[T]:
    observed = attempt(lambda: _run_for_effect(action, arg))
    return observed if isinstance(observed, Fault) else outcome


def on_success[T](outcome: Outcome[T], action: Callable[[T], object]) -> Outcome[T]:
    """Run *action* with the value of a ``Success``; return *outcome*.

    If *action* raises, the captured ``Fault`` is returned instead.
    """
    match outcome:
        case Success(value):
            return _observe(outcome, action, value)
        case DomainError() | Fault():
            return outcome
        case _:
            raise unknown_variant(outcome, "on_success")


def on_error[T](outcome: Outcome[T], action: Callable[[str], object]) -> Outcome[T]:
    """Run *action* with the message of a ``DomainError``; return *outcome*."""
    match outcome:
        case DomainError(message):
            return _observe(outcome, action, message)
        case Success() | Fault():
            return outcome
        case _:
            raise unknown_variant(outcome, "on_error")


def on_fault[T](
    outcome: Outcome[T], action: Callable[[BaseException], object]
) -> Outcome[T]:
    """Run *action* with the exception of a ``Fault``; return *outcome*."""
    match outcome:
        case Fault(cause):
            return _observe(outcome, action, cause)
        case Success() | DomainError():
            return outcome
        case _:
            raise unknown_variant(outcome, "on_fault")


def resolve[T, R](
    outcome: Outcome[T],
    on_success: Callable[[T], R],
    on_error: Callable[[str], R] | None = None,
    on_fault: Callable[[BaseException], R] | None = None,
) -> R | None:
    """Dispatch to the one callback matching the active variant.

    A missing callback for the active variant is skipped; another callback is
    never called in its place. Returns the callback's result, or ``None``
    when nothing ran.
    """
    match outcome:
        case Success(value):
            return on_success(value)
        case DomainError(message):
            return on_error(message) if on_error is not None else None
        case Fault(cause):
            return on_fault(cause) if on_fault is not None else None
        case _:
            raise unknown_variant(outcome, "resolve")


def value_or_default[T, D](
    outcome: Outcome[T], default: D | None = None
) -> T | D | None:
    """Return the ``Success`` value, or *default* for either error variant."""
    match outcome:
        case Success(value):
            return value
        case DomainError() | Fault():
            return default
        case _:
            raise unknown_variant(outcome, "value_or_default")
