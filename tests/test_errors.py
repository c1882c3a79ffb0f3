from __future__ import annotations

import pytest

from upshot.errors import (
    ConfigurationError,
    InvariantViolationError,
    UpshotError,
    walk_exception_chain,
)

pytestmark = pytest.mark.unit


def test_upshot_error_hint_is_appended_to_str() -> None:
    err = UpshotError("boom", hint="do this")

    assert err.hint == "do this"
    assert str(err) == "boom. do this"
    assert err.args == ("boom",)


def test_upshot_error_without_hint() -> None:
    err = UpshotError("fail")
    assert err.hint is None
    assert str(err) == "fail"


def test_invariant_violation_prefixes_combinator() -> None:
    err = InvariantViolationError("bad input", combinator="select")

    assert err.combinator == "select"
    assert str(err) == "[select] bad input"


def test_subclass_hierarchy() -> None:
    """Library errors are catchable as UpshotError."""
    assert issubclass(ConfigurationError, UpshotError)
    assert issubclass(InvariantViolationError, UpshotError)
    assert issubclass(UpshotError, Exception)


def test_walk_exception_chain_follows_cause_and_context() -> None:
    root = KeyError("root")
    try:
        try:
            raise root
        except KeyError as inner:
            raise ValueError("middle") from inner
    except ValueError as exc:
        middle = exc
        top = RuntimeError("top")
        top.__context__ = middle

    chain = list(walk_exception_chain(top))

    assert chain == [top, middle, root]


def test_walk_exception_chain_survives_cycles() -> None:
    a = ValueError("a")
    b = ValueError("b")
    a.__cause__ = b
    b.__cause__ = a

    assert list(walk_exception_chain(a)) == [a, b]
