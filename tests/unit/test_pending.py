"""Fluent deferred chains built on Pending."""

from __future__ import annotations

import asyncio

import pytest

from upshot import (
    DomainError,
    Fault,
    InvariantViolationError,
    Pending,
    Success,
    attempt_async,
    defer,
)

pytestmark = pytest.mark.unit


async def _later(outcome):
    await asyncio.sleep(0)
    return outcome


class TestPending:
    @pytest.mark.asyncio
    async def test_awaiting_settles_source(self):
        assert await defer(_later(Success(1))) == Success(1)

    @pytest.mark.asyncio
    async def test_wraps_plain_outcome(self):
        assert await Pending(DomainError("e")) == DomainError("e")

    @pytest.mark.asyncio
    async def test_fluent_chain_runs_in_order(self):
        events: list[str] = []

        async def fetch() -> int:
            events.append("fetch")
            await asyncio.sleep(0)
            return 21

        async def double(x: int) -> Success[int]:
            events.append("double")
            return Success(x * 2)

        value = await (
            defer(attempt_async(fetch))
            .bind(double)
            .select(lambda x: x + 0)
            .on_success(lambda _: events.append("observed"))
            .value_or_default(0)
        )

        assert value == 42
        assert events == ["fetch", "double", "observed"]

    @pytest.mark.asyncio
    async def test_nothing_runs_before_await(self):
        events: list[str] = []

        async def source():
            events.append("source")
            return Success(1)

        chain = defer(source()).select(lambda x: events.append("select") or x)
        assert events == []

        await chain
        assert events == ["source", "select"]

    @pytest.mark.asyncio
    async def test_error_short_circuits_and_heals(self):
        fired: list[str] = []

        result = await (
            defer(_later(DomainError("bad")))
            .select(lambda x: fired.append("select") or x)
            .on_error(fired.append)
            .or_else(len)
        )

        assert result == Success(3)
        assert fired == ["bad"]

    @pytest.mark.asyncio
    async def test_on_fault_and_resolve(self):
        exc = ValueError("broken")
        faults: list[BaseException] = []

        outcome = await defer(_later(Fault(exc))).on_fault(faults.append)
        label = await defer(_later(outcome)).resolve(
            lambda _: "ok", on_error=lambda _: "error", on_fault=lambda e: str(e)
        )

        assert faults == [exc]
        assert label == "broken"

    @pytest.mark.asyncio
    async def test_outcome_async_methods_return_pending(self):
        pending = Success(5).select_async(lambda x: x * 2)

        assert isinstance(pending, Pending)
        assert await pending.bind(lambda x: Success(x + 1)) == Success(11)

    @pytest.mark.asyncio
    async def test_outcome_async_hooks_and_recovery(self):
        seen: list[object] = []

        await Success(1).on_success_async(seen.append)
        await DomainError("e").on_error_async(seen.append)
        await Fault(KeyError("k")).on_fault_async(seen.append)
        healed = await DomainError("four").or_else_async(len)
        bound = await Success(5).bind_async(lambda x: Success(x * 2))

        assert len(seen) == 3
        assert healed == Success(4)
        assert bound == Success(10)

    @pytest.mark.asyncio
    async def test_non_outcome_source_fails_fast_through_chain(self):
        with pytest.raises(InvariantViolationError, match="select_async"):
            await defer(42).select(lambda x: x)  # type: ignore[arg-type]

    @pytest.mark.asyncio
    async def test_raising_source_settles_as_fault(self):
        async def broken():
            raise TimeoutError("slow upstream")

        result = await defer(broken()).select(lambda x: x)

        assert isinstance(result, Fault)
        assert isinstance(result.cause, TimeoutError)

    @pytest.mark.asyncio
    async def test_awaiting_twice_returns_same_outcome(self):
        calls: list[int] = []

        async def source():
            calls.append(1)
            return Success(1)

        pending = defer(source())

        assert await pending == Success(1)
        assert await pending == Success(1)
        assert calls == [1]

    @pytest.mark.asyncio
    async def test_awaiting_chained_step_twice(self):
        pending = defer(_later(Success(2))).select(lambda x: x * 10)

        first = await pending
        second = await pending

        assert first == second == Success(20)

    @pytest.mark.asyncio
    async def test_branches_share_one_settlement(self):
        calls: list[int] = []

        async def source():
            calls.append(1)
            await asyncio.sleep(0)
            return Success(3)

        trunk = defer(source()).select(lambda x: x + 1)
        doubled = trunk.select(lambda x: x * 2)
        negated = trunk.select(lambda x: -x)

        results = await asyncio.gather(doubled, negated)

        assert results == [Success(8), Success(-4)]
        assert calls == [1]

    @pytest.mark.asyncio
    async def test_library_error_is_raised_on_every_await(self):
        pending = defer(42).select(lambda x: x)  # type: ignore[arg-type]

        for _ in range(2):
            with pytest.raises(InvariantViolationError):
                await pending
