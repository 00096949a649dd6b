"""Error taxonomy shared by every layer of sprout.

Each failure is classified so the CLI can choose an exit code and the
interactive session can decide what to show. Only external failures (network,
git, gh) are flagged as retryable; nothing retries automatically.
"""

from enum import Enum
from typing import Any


class ErrorType(str, Enum):
    """Coarse classification of a failure."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    EXTERNAL = "external"
    INTERNAL = "internal"
    CONFIGURATION = "configuration"


_EXIT_CODES = {
    ErrorType.VALIDATION: 2,
    ErrorType.NOT_FOUND: 3,
    ErrorType.CONFIGURATION: 4,
    ErrorType.EXTERNAL: 5,
}


class SproutError(Exception):
    """A classified failure with optional cause and structured details.

    Attributes:
        error_type: Classification of the failure.
        message: Human readable message, shown verbatim to the user.
        cause: Underlying exception, if any.
        details: Extra key/value context for logs.
        retryable: Whether trying again could succeed.
    """

    def __init__(
        self,
        error_type: ErrorType,
        message: str,
        cause: BaseException | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.error_type = error_type
        self.message = message
        self.cause = cause
        self.details: dict[str, Any] = dict(details or {})
        self.retryable = retryable

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message

    def __repr__(self) -> str:
        return f"SproutError({self.error_type.value!r}, {self.message!r})"

    def with_detail(self, key: str, value: Any) -> "SproutError":
        """Attach a detail and return self for chaining."""
        self.details[key] = value
        return self

    @property
    def exit_code(self) -> int:
        """Process exit code for this kind of failure."""
        return _EXIT_CODES.get(self.error_type, 1)

    # Constructors

    @classmethod
    def validation(cls, message: str, **details: Any) -> "SproutError":
        return cls(ErrorType.VALIDATION, message, details=details)

    @classmethod
    def not_found(cls, resource: str, identifier: str) -> "SproutError":
        return cls(
            ErrorType.NOT_FOUND,
            f"{resource} not found: {identifier}",
            details={"resource": resource, "id": identifier},
        )

    @classmethod
    def conflict(cls, message: str, **details: Any) -> "SproutError":
        return cls(ErrorType.CONFLICT, message, details=details)

    @classmethod
    def external(
        cls, service: str, message: str, cause: BaseException | None = None
    ) -> "SproutError":
        return cls(
            ErrorType.EXTERNAL,
            f"{service}: {message}",
            cause=cause,
            details={"service": service},
            retryable=True,
        )

    @classmethod
    def internal(cls, message: str, cause: BaseException | None = None) -> "SproutError":
        return cls(ErrorType.INTERNAL, message, cause=cause)

    @classmethod
    def configuration(
        cls, message: str, cause: BaseException | None = None
    ) -> "SproutError":
        return cls(ErrorType.CONFIGURATION, message, cause=cause)


def is_error_type(exc: BaseException, error_type: ErrorType) -> bool:
    """Return True when ``exc`` is a SproutError of ``error_type``."""
    return isinstance(exc, SproutError) and exc.error_type == error_type


def error_message(exc: BaseException) -> str:
    """User facing text for any exception."""
    return str(exc) if str(exc) else exc.__class__.__name__
