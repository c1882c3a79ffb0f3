"""Exception hierarchy for upshot.

These are raised by the library itself, never captured into outcomes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


class UpshotError(Exception):
    """Base exception for all upshot errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint

    def __str__(self) -> str:
        """Return the message, followed by the hint when one is attached."""
        msg = super().__str__()
        return f"{msg}. {self.hint}" if self.hint else msg


class ConfigurationError(UpshotError):
    """Configuration validation or resolution failed."""


class InvariantViolationError(UpshotError):
    """An upshot internal invariant was violated.

    Raised when a combinator receives something that is not one of the three
    outcome variants. This signals a bug in the calling code and is never
    converted into a ``Fault``.
    """

    def __init__(
        self, message: str, *, combinator: str | None = None, hint: str | None = None
    ) -> None:
        self.combinator = combinator
        msg = message if combinator is None else f"[{combinator}] {message}"
        super().__init__(msg, hint=hint)


def walk_exception_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield *exc* and its ``__cause__``/``__context__`` chain, with cycle protection."""
    seen: set[int] = set()
    stack: list[BaseException] = [exc]
    while stack:
        cur = stack.pop()
        if id(cur) in seen:
            continue
        seen.add(id(cur))
        yield cur

        # Pushed context first so the explicit cause is visited first.
        context = cur.__context__
        if isinstance(context, BaseException):
            stack.append(context)
        cause = cur.__cause__
        if isinstance(cause, BaseException):
            stack.append(cause)
