"""Shared domain building blocks for sprout.

- Result values for provider operations
- The error taxonomy used for exit codes and user messages

Example usage:
    >>> from sprout.domain.shared import Err, Ok, SproutError
    >>>
    >>> def find_ticket(ticket_id: str) -> Result[dict, SproutError]:
    ...     if not ticket_id:
    ...         return Err(SproutError.not_found("ticket", ticket_id))
    ...     return Ok({"id": ticket_id})
"""

from sprout.domain.shared.errors import ErrorType, SproutError, error_message, is_error_type
from sprout.domain.shared.result import (
    Err,
    Ok,
    Result,
    flat_map,
    is_err,
    is_ok,
    map_err,
    map_result,
    unwrap,
    unwrap_or,
)

__all__ = [
    # Result values
    "Ok",
    "Err",
    "Result",
    "is_ok",
    "is_err",
    "map_result",
    "map_err",
    "flat_map",
    "unwrap",
    "unwrap_or",
    # Errors
    "ErrorType",
    "SproutError",
    "error_message",
    "is_error_type",
]
