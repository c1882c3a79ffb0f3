"""Asynchronous combinators.

Counterparts of ``upshot.combinators`` for deferred outcomes. Each function
accepts a *source* that is either an outcome or an awaitable of one, and
continuations that may be plain or ``async`` callables.

Ordering: the source is fully awaited before any continuation is called, and
the continuation is called only when the settled outcome is in the matching
state. A source that raises while being awaited settles as ``Fault``.
"""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any

from upshot.capture import attempt_async
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
    from collections.abc import Awaitable, Callable

    from upshot.outcome import Outcome

    type Source[T] = Outcome[T] | Awaitable[Outcome[T]]

__all__ = [
    "bind_async",
    "on_error_async",
    "on_fault_async",
    "on_success_async",
    "or_else_async",
    "resolve_async",
    "select_async",
    "settle",
    "value_or_default_async",
]


async def settle[T](source: Source[T]) -> Outcome[T]:
    """Await *source* if needed and return the outcome it resolves to.

    A raw awaitable runs inside ``attempt_async``; a ``Pending`` settles itself.
    """
    from upshot.pending import Pending

    if isinstance(source, Pending):
        return await source
    if inspect.isawaitable(source):
        return await attempt_async(source)
    return source


async def _call(fn: Callable[..., Any], *args: Any) -> Any:
    result = fn(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


async def _mapped(fn: Callable[..., Any], arg: Any) -> Outcome[Any]:
    return success_of(await _call(fn, arg))


async def _run_for_effect(action: Callable[..., Any], arg: Any) -> Unit:
    await _call(action, arg)
    return UNIT


async def _observe[T](
    outcome: Outcome[T], action: Callable[..., Any], arg: Any
) -> Outcome[T]:
    observed = await attempt_async(_run_for_effect(action, arg))
    return observed if isinstance(observed, Fault) else outcome


async def select_async[T, R](
    source: Source[T], on_success: Callable[[T], R | Awaitable[R]]
) -> Outcome[R]:
    """Async ``select``: map the settled success value."""
    outcome = await settle(source)
    match outcome:
        case Success(value):
            return await attempt_async(_mapped(on_success, value))
        case DomainError() | Fault():
            return outcome
        case _:
            raise unknown_variant(outcome, "select_async")


async def bind_async[T, R](
    source: Source[T],
    on_success: Callable[[T], Outcome[R] | Awaitable[Outcome[R]]],
) -> Outcome[R]:
    """Async ``bind``: chain an outcome-returning step after the settled success."""
    outcome = await settle(source)
    match outcome:
        case Success(value):
            return await attempt_async(_call(on_success, value))
        case DomainError() | Fault():
            return outcome
        case _:
            raise unknown_variant(outcome, "bind_async")


async def or_else_async[T, R](
    source: Source[T], recover: Callable[[str], R | Awaitable[R]]
) -> Outcome[T | R]:
    """Async ``or_else``: heal the settled error from its message."""
    outcome = await settle(source)
    match outcome:
        case Success():
            return outcome
        case DomainError() | Fault():
            return await attempt_async(_mapped(recover, outcome.error_message))
        case _:
            raise unknown_variant(outcome, "or_else_async")


async def on_success_async[T](
    source: Source[T], action: Callable[[T], object]
) -> Outcome[T]:
    outcome = await settle(source)
    match outcome:
        case Success(value):
            return await _observe(outcome, action, value)
        case DomainError() | Fault():
            return outcome
        case _:
            raise unknown_variant(outcome, "on_success_async")


async def on_error_async[T](
    source: Source[T], action: Callable[[str], object]
) -> Outcome[T]:
    outcome = await settle(source)
    match outcome:
        case DomainError(message):
            return await _observe(outcome, action, message)
        case Success() | Fault():
            return outcome
        case _:
            raise unknown_variant(outcome, "on_error_async")


async def on_fault_async[T](
    source: Source[T], action: Callable[[BaseException], object]
) -> Outcome[T]:
    outcome = await settle(source)
    match outcome:
        case Fault(cause):
            return await _observe(outcome, action, cause)
        case Success() | DomainError():
            return outcome
        case _:
            raise unknown_variant(outcome, "on_fault_async")


async def resolve_async[T, R](
    source: Source[T],
    on_success: Callable[[T], R | Awaitable[R]],
    on_error: Callable[[str], R | Awaitable[R]] | None = None,
    on_fault: Callable[[BaseException], R | Awaitable[R]] | None = None,
) -> R | None:
    """Async ``resolve``; async callbacks are awaited, exceptions propagate."""
    outcome = await settle(source)
    match outcome:
        case Success(value):
            return await _call(on_success, value)
        case DomainError(message):
            return await _call(on_error, message) if on_error is not None else None
        case Fault(cause):
            return await _call(on_fault, cause) if on_fault is not None else None
        case _:
            raise unknown_variant(outcome, "resolve_async")


async def value_or_default_async[T, D](
    source: Source[T], default: D | None = None
) -> T | D | None:
    outcome = await settle(source)
    match outcome:
        case Success(value):
            return value
        case DomainError() | Fault():
            return default
        case _:
            raise unknown_variant(outcome, "value_or_default_async")
