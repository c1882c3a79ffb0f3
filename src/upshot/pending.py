"""Chainable deferred outcomes.

``Pending`` wraps an awaitable of an outcome so the async combinators read as a
fluent chain, and is itself awaitable:

    total = await (
        defer(fetch_order(order_id))
        .select(lambda order: order.lines)
        .bind(price_lines)
        .on_fault(report)
        .value_or_default(0)
    )

Nothing runs until the chain is awaited. The first await starts a task that
settles the source; later awaits, and chains branched from the same
``Pending``, share that task and see the same outcome.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from upshot import aio

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Generator

    from upshot.outcome import Outcome


class Pending[T]:
    """An outcome that has not settled yet."""

    __slots__ = ("_chained", "_source", "_task")

    def __init__(self, source: Outcome[T] | Awaitable[Outcome[T]]) -> None:
        self._source = source
        self._chained = False
        self._task: asyncio.Task[Outcome[T]] | None = None

    @classmethod
    def from_step[R](cls, step: Awaitable[Outcome[R]]) -> Pending[R]:
        """Wrap a coroutine from ``upshot.aio`` as the next link of a chain.

        A step already routes user code through the capture boundary, so it is
        awaited directly and internal invariant errors raised by it propagate.
        """
        pending: Pending[R] = cls(step)  # type: ignore[arg-type]
        pending._chained = True
        return pending

    def __await__(self) -> Generator[Any, None, Outcome[T]]:
        if self._task is None:
            step = self._source if self._chained else aio.settle(self._source)
            self._task = asyncio.ensure_future(step)  # type: ignore[arg-type]
        return self._task.__await__()

    def __repr__(self) -> str:
        return f"Pending({self._source!r})"

    def select[R](self, on_success: Callable[[T], R | Awaitable[R]]) -> Pending[R]:
        return Pending.from_step(aio.select_async(self, on_success))

    def bind[R](
        self, on_success: Callable[[T], Outcome[R] | Awaitable[Outcome[R]]]
    ) -> Pending[R]:
        return Pending.from_step(aio.bind_async(self, on_success))

    def or_else[R](self, recover: Callable[[str], R | Awaitable[R]]) -> Pending[T | R]:
        return Pending.from_step(aio.or_else_async(self, recover))

    def on_success(self, action: Callable[[T], object]) -> Pending[T]:
        return Pending.from_step(aio.on_success_async(self, action))

    def on_error(self, action: Callable[[str], object]) -> Pending[T]:
        return Pending.from_step(aio.on_error_async(self, action))

    def on_fault(self, action: Callable[[BaseException], object]) -> Pending[T]:
        return Pending.from_step(aio.on_fault_async(self, action))

    async def resolve[R](
        self,
        on_success: Callable[[T], R | Awaitable[R]],
        on_error: Callable[[str], R | Awaitable[R]] | None = None,
        on_fault: Callable[[BaseException], R | Awaitable[R]] | None = None,
    ) -> R | None:
        return await aio.resolve_async(self, on_success, on_error, on_fault)

    async def value_or_default[D](self, default: D | None = None) -> T | D | None:
        return await aio.value_or_default_async(self, default)


def defer[T](source: Outcome[T] | Awaitable[Outcome[T]]) -> Pending[T]:
    """Start a deferred chain from an outcome or an awaitable of one."""
    return Pending(source)
