"""Result values for provider operations.

Workspace and ticket providers never raise for expected failures. They return
``Ok(value)`` or ``Err(SproutError)`` and the caller decides what to show.

Example usage:
    >>> result = provider.create_workspace("spr-123-login")
    >>> if is_ok(result):
    ...     print(f"Worktree created at: {result.value}")
    ... else:
    ...     print(result.error.message)
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")
F = TypeVar("F")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A successful outcome carrying ``value``."""

    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """A failed outcome carrying ``error``."""

    error: E


# Union is required here, TypeVar aliases can't use | at runtime
Result = Union[Ok[T], Err[E]]  # noqa: UP007


def is_ok(result: Ok[T] | Err[E]) -> bool:
    """Return True when ``result`` is an ``Ok``."""
    return isinstance(result, Ok)


def is_err(result: Ok[T] | Err[E]) -> bool:
    """Return True when ``result`` is an ``Err``."""
    return isinstance(result, Err)


def map_result(result: Ok[T] | Err[E], fn: Callable[[T], U]) -> Ok[U] | Err[E]:
    """Transform the value of an ``Ok``; pass an ``Err`` through untouched.

    Args:
        result: The result to transform.
        fn: Function applied to the success value.

    Returns:
        ``Ok(fn(value))`` or the original ``Err``.
    """
    if isinstance(result, Ok):
        return Ok(fn(result.value))
    return result


def map_err(result: Ok[T] | Err[E], fn: Callable[[E], F]) -> Ok[T] | Err[F]:
    """Transform the error of an ``Err``; pass an ``Ok`` through untouched."""
    if isinstance(result, Err):
        return Err(fn(result.error))
    return result


def flat_map(result: Ok[T] | Err[E], fn: Callable[[T], Ok[U] | Err[E]]) -> Ok[U] | Err[E]:
    """Chain a second fallible step after a successful one.

    Used by the ticket client, where creating a subtask needs the parent's
    team and the viewer before the mutation can run.

    Args:
        result: The result to chain from.
        fn: Next step, called only with a success value.

    Returns:
        The result of ``fn`` or the original ``Err``.
    """
    if isinstance(result, Ok):
        return fn(result.value)
    return result


def unwrap_or(result: Ok[T] | Err[E], default: T) -> T:
    """Return the success value, or ``default`` for an ``Err``."""
    if isinstance(result, Ok):
        return result.value
    return default


def unwrap(result: Ok[T] | Err[E]) -> T:
    """Return the success value or raise the carried error.

    Raises:
        The error itself when it is an exception, otherwise ``ValueError``.
    """
    if isinstance(result, Ok):
        return result.value
    if isinstance(result.error, BaseException):
        raise result.error
    raise ValueError(str(result.error))
