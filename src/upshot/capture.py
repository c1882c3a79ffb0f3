"""Fault capture: the boundary between raising code and outcomes.

``attempt`` and ``attempt_async`` are the only places where upshot catches
exceptions. Every combinator that runs user code goes through them, so the
capture rules live in one place:

- ``Exception`` subclasses are captured as ``Fault``
- ``asyncio.CancelledError`` propagates unless ``capture_cancellation`` is set
- ``KeyboardInterrupt``, ``SystemExit`` and ``GeneratorExit`` always propagate
- errors raised by ``on_catch`` propagate

Configuration is resolved before the operation runs, so an invalid setting
surfaces as ``ConfigurationError`` instead of replacing a captured exception.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
import logging
from typing import TYPE_CHECKING, Any, overload

from upshot.config import current_config
from upshot.outcome import DomainError, Fault, to_outcome

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from upshot.config import FrozenConfig
    from upshot.outcome import Outcome

log = logging.getLogger(__name__)


def _describe(operation: object) -> str:
    target = operation
    while isinstance(target, functools.partial):
        target = target.func
    name = getattr(target, "__qualname__", None)
    return name if isinstance(name, str) else repr(operation)


def _log_capture(cfg: FrozenConfig, exc: BaseException, operation: object) -> None:
    level = cfg.fault_log_levelno
    if level is None or not log.isEnabledFor(level):
        return
    log.log(
        level,
        "Captured %s from %s: %s",
        type(exc).__qualname__,
        _describe(operation),
        exc,
        exc_info=exc if cfg.log_tracebacks else None,
    )


def _captured(
    cfg: FrozenConfig,
    exc: BaseException,
    operation: object,
    *,
    on_catch: Callable[[BaseException], object] | None,
    error_message: str | None,
) -> Outcome[Any]:
    _log_capture(cfg, exc, operation)
    if on_catch is not None:
        on_catch(exc)
    if error_message is not None:
        return DomainError(error_message)
    return Fault(exc)


def attempt[T](
    operation: Callable[[], T | Outcome[T]],
    *,
    on_catch: Callable[[BaseException], object] | None = None,
    error_message: str | None = None,
) -> Outcome[T]:
    """Run *operation* and turn its result or raised exception into an outcome.

    A normal return goes through ``to_outcome``: plain values become
    ``Success`` (``None`` becomes ``Success(UNIT)``) and returned outcomes,
    including ``DomainError``, are passed back unchanged.

    Args:
        operation: Zero-argument callable to run.
        on_catch: Called with the captured exception before returning.
        error_message: When set, a captured exception yields
            ``DomainError(error_message)`` instead of ``Fault``.

    Returns:
        The resulting outcome.

    Example:
        attempt(lambda: int("42"))                      # Success(42)
        attempt(lambda: int("x"))                       # Fault(ValueError(...))
        attempt(lambda: int("x"), error_message="bad")  # DomainError("bad")
    """
    cfg = current_config()
    try:
        returned = operation()
    except Exception as exc:
        return _captured(
            cfg, exc, operation, on_catch=on_catch, error_message=error_message
        )
    return to_outcome(returned)


async def attempt_async[T](
    operation: Awaitable[T | Outcome[T]]
    | Callable[[], Awaitable[T | Outcome[T]] | T | Outcome[T]],
    *,
    on_catch: Callable[[BaseException], object] | None = None,
    error_message: str | None = None,
) -> Outcome[T]:
    """Async form of ``attempt``.

    *operation* is an awaitable, or a zero-argument callable returning an
    awaitable (a plain return value is accepted too). The capture boundary
    covers the whole await, including exceptions raised after resumption.
    """
    cfg = current_config()
    try:
        pending = operation if inspect.isawaitable(operation) else operation()
        returned = await pending if inspect.isawaitable(pending) else pending
    except asyncio.CancelledError as exc:
        if not cfg.capture_cancellation:
            raise
        task = asyncio.current_task()
        if task is not None and task.cancelling():
            task.uncancel()
        return _captured(
            cfg, exc, operation, on_catch=on_catch, error_message=error_message
        )
    except Exception as exc:
        return _captured(
            cfg, exc, operation, on_catch=on_catch, error_message=error_message
        )
    return to_outcome(returned)


@overload
def returns_outcome[F: Callable[..., Any]](func: F, /) -> Callable[..., Any]: ...


@overload
def returns_outcome(
    func: None = None,
    /,
    *,
    on_catch: Callable[[BaseException], object] | None = ...,
    error_message: str | None = ...,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]: ...


def returns_outcome(
    func: Callable[..., Any] | None = None,
    /,
    *,
    on_catch: Callable[[BaseException], object] | None = None,
    error_message: str | None = None,
) -> Any:
    """Decorate a function so it returns an outcome instead of raising.

    Works on plain and ``async def`` functions, bare or with the same
    ``on_catch`` / ``error_message`` options as ``attempt``.

    Example:
        @returns_outcome
        def load_port(raw: str) -> int:
            return int(raw)

        load_port("80")    # Success(80)
        load_port("http")  # Fault(ValueError(...))
    """

    def decorate(fn: Callable[..., Any]) -> Callable[..., Any]:
        if inspect.iscoroutinefunction(fn):

            @functools.wraps(fn)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Outcome[Any]:
                return await attempt_async(
                    functools.partial(fn, *args, **kwargs),
                    on_catch=on_catch,
                    error_message=error_message,
                )

            return async_wrapper

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Outcome[Any]:
            return attempt(
                functools.partial(fn, *args, **kwargs),
                on_catch=on_catch,
                error_message=error_message,
            )

        return wrapper

    return decorate if func is None else decorate(func)
