"""The outcome type: ``Success``, ``DomainError`` or ``Fault``.

An outcome is the result of an operation that either produced a value, failed
for an expected reason, or failed because something unexpected was raised.
The three variants form a closed union; every combinator matches on all three
and fails fast on anything else.

Usage:
    def parse_port(raw: str) -> Outcome[int]:
        if not raw.isdigit():
            return DomainError(f"not a port: {raw!r}")
        return Success(int(raw))

    match parse_port("8080"):
        case Success(port):
            print(f"Listening on {port}")
        case DomainError(message):
            print(f"Bad input: {message}")
        case Fault(cause):
            raise cause
"""

from __future__ import annotations

from dataclasses import dataclass
import traceback
from typing import TYPE_CHECKING, Any, Final, TypeIs, final

from upshot.errors import InvariantViolationError, walk_exception_chain

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from upshot.pending import Pending

_VARIANT_NAMES: Final = frozenset({"Success", "DomainError", "Fault"})


@final
@dataclass(frozen=True, slots=True)
class Unit:
    """The value held by a ``Success`` that has nothing to report."""

    def __repr__(self) -> str:
        return "UNIT"


UNIT: Final = Unit()


class _OutcomeBase[T]:
    """Fluent combinator surface shared by the three variants.

    Each method delegates to the function of the same name in
    ``upshot.combinators`` (sync) or ``upshot.aio`` (async).
    """

    __slots__ = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.__module__ != __name__ or cls.__name__ not in _VARIANT_NAMES:
            raise TypeError(
                f"Outcome is a closed union of Success, DomainError and Fault; "
                f"{cls.__qualname__} cannot extend it"
            )

    # --- Transforms ---

    def select[R](self, on_success: Callable[[T], R]) -> Outcome[R]:
        """Map the success value; see ``upshot.combinators.select``."""
        from upshot import combinators

        return combinators.select(self, on_success)  # type: ignore[arg-type]

    def bind[R](self, on_success: Callable[[T], Outcome[R]]) -> Outcome[R]:
        """Chain an outcome-returning step; see ``upshot.combinators.bind``."""
        from upshot import combinators

        return combinators.bind(self, on_success)  # type: ignore[arg-type]

    def or_else[R](self, recover: Callable[[str], R]) -> Outcome[T | R]:
        """Recover from an error message; see ``upshot.combinators.or_else``."""
        from upshot import combinators

        return combinators.or_else(self, recover)  # type: ignore[arg-type]

    # --- Observation hooks ---

    def on_success(self, action: Callable[[T], object]) -> Outcome[T]:
        from upshot import combinators

        return combinators.on_success(self, action)  # type: ignore[arg-type]

    def on_error(self, action: Callable[[str], object]) -> Outcome[T]:
        from upshot import combinators

        return combinators.on_error(self, action)  # type: ignore[arg-type]

    def on_fault(self, action: Callable[[BaseException], object]) -> Outcome[T]:
        from upshot import combinators

        return combinators.on_fault(self, action)  # type: ignore[arg-type]

    # --- Terminal consumers ---

    def resolve[R](
        self,
        on_success: Callable[[T], R],
        on_error: Callable[[str], R] | None = None,
        on_fault: Callable[[BaseException], R] | None = None,
    ) -> R | None:
        from upshot import combinators

        return combinators.resolve(self, on_success, on_error, on_fault)  # type: ignore[arg-type]

    def value_or_default[D](self, default: D | None = None) -> T | D | None:
        from upshot import combinators

        return combinators.value_or_default(self, default)  # type: ignore[arg-type]

    # --- Async forms: chainable ``Pending`` outcomes ---

    def select_async[R](
        self, on_success: Callable[[T], R | Awaitable[R]]
    ) -> Pending[R]:
        from upshot import aio
        from upshot.pending import Pending

        return Pending.from_step(aio.select_async(self, on_success))  # type: ignore[arg-type]

    def bind_async[R](
        self, on_success: Callable[[T], Outcome[R] | Awaitable[Outcome[R]]]
    ) -> Pending[R]:
        from upshot import aio
        from upshot.pending import Pending

        return Pending.from_step(aio.bind_async(self, on_success))  # type: ignore[arg-type]

    def or_else_async[R](
        self, recover: Callable[[str], R | Awaitable[R]]
    ) -> Pending[T | R]:
        from upshot import aio
        from upshot.pending import Pending

        return Pending.from_step(aio.or_else_async(self, recover))  # type: ignore[arg-type]

    def on_success_async(self, action: Callable[[T], object]) -> Pending[T]:
        from upshot import aio
        from upshot.pending import Pending

        return Pending.from_step(aio.on_success_async(self, action))  # type: ignore[arg-type]

    def on_error_async(self, action: Callable[[str], object]) -> Pending[T]:
        from upshot import aio
        from upshot.pending import Pending

        return Pending.from_step(aio.on_error_async(self, action))  # type: ignore[arg-type]

    def on_fault_async(
        self, action: Callable[[BaseException], object]
    ) -> Pending[T]:
        from upshot import aio
        from upshot.pending import Pending

        return Pending.from_step(aio.on_fault_async(self, action))  # type: ignore[arg-type]


@final
@dataclass(frozen=True, slots=True)
class Success[T](_OutcomeBase[T]):
    """The operation produced a value.

    Attributes:
        value: The produced value. Never ``None``; use ``UNIT`` instead.
    """

    value: T

    def __post_init__(self) -> None:
        if self.value is None:
            raise ValueError(
                "Success cannot hold None; use UNIT for a success without a value"
            )

    def __bool__(self) -> bool:
        return True

    def __str__(self) -> str:
        return f"Success: {self.value}"


@final
@dataclass(frozen=True, slots=True)
class DomainError(_OutcomeBase[Any]):
    """The operation failed for an expected, recoverable reason.

    Attributes:
        message: Human-readable reason. May be empty, never ``None``.
    """

    message: str

    def __post_init__(self) -> None:
        if not isinstance(self.message, str):
            raise TypeError(
                f"DomainError message must be a str, got {type(self.message).__name__}"
            )

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return f"DomainError: {self.message}"

    @property
    def error_message(self) -> str:
        return self.message


@final
@dataclass(frozen=True, slots=True)
class Fault(_OutcomeBase[Any]):
    """The operation failed because an exception was raised.

    Attributes:
        cause: The captured exception, kept intact for inspection.
    """

    cause: BaseException

    def __post_init__(self) -> None:
        if not isinstance(self.cause, BaseException):
            raise TypeError(
                f"Fault cause must be an exception, got {type(self.cause).__name__}"
            )

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return f"Fault: {self.type_name}: {self.message}"

    @property
    def message(self) -> str:
        """The exception's message (``str(cause)``)."""
        return str(self.cause)

    @property
    def error_message(self) -> str:
        return self.message

    @property
    def exception_type(self) -> type[BaseException]:
        return type(self.cause)

    @property
    def type_name(self) -> str:
        """Qualified name of the exception type, e.g. ``ValueError``."""
        cls = type(self.cause)
        if cls.__module__ == "builtins":
            return cls.__qualname__
        return f"{cls.__module__}.{cls.__qualname__}"

    def chain(self) -> tuple[BaseException, ...]:
        """The cause followed by its ``__cause__``/``__context__`` chain."""
        return tuple(walk_exception_chain(self.cause))

    def traceback_text(self) -> str:
        """Formatted traceback of the cause, including chained exceptions."""
        return "".join(traceback.format_exception(self.cause))


type Outcome[T] = Success[T] | DomainError | Fault

# ``Outcome`` is a type alias; use this tuple for runtime isinstance checks.
OUTCOME_TYPES: Final = (Success, DomainError, Fault)


def to_outcome(value: Any) -> Outcome[Any]:
    """Convert a plain return value into an outcome.

    - an outcome is returned unchanged
    - an exception instance becomes ``Fault``
    - ``None`` becomes ``Success(UNIT)``
    - anything else becomes ``Success(value)``
    """
    if isinstance(value, OUTCOME_TYPES):
        return value
    if isinstance(value, BaseException):
        return Fault(value)
    return success_of(value)


def success_of[T](value: T | None) -> Success[T] | Success[Unit]:
    """Wrap *value* as ``Success`` without flattening, mapping ``None`` to ``UNIT``."""
    if value is None:
        return Success(UNIT)
    return Success(value)


def is_success[T](outcome: Outcome[T]) -> TypeIs[Success[T]]:
    return isinstance(outcome, Success)


def is_domain_error(outcome: Outcome[Any]) -> TypeIs[DomainError]:
    return isinstance(outcome, DomainError)


def is_fault(outcome: Outcome[Any]) -> TypeIs[Fault]:
    return isinstance(outcome, Fault)


def unknown_variant(value: object, combinator: str) -> InvariantViolationError:
    """Build the error raised when a combinator receives a non-outcome."""
    return InvariantViolationError(
        f"expected Success, DomainError or Fault, got {type(value).__qualname__}",
        combinator=combinator,
        hint="Convert plain values with to_outcome() before chaining",
    )
