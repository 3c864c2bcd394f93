"""
Normalized Result Types
========================
Every generation call site returns either ``Ok(value)`` or
``Err(kind, message)``. Callers never receive a half-parsed object:
a value is fully coerced, or the failure is explicit.

ErrorKind is the single error contract for the whole API. Each kind
maps to exactly one user-facing message and one HTTP status, so every
endpoint reports failures the same way regardless of which upstream
call produced them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Failure taxonomy surfaced to API callers."""
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    EMPTY_RESPONSE = "empty_response"
    UNPARSABLE_CONTENT = "unparsable_content"
    SCHEMA_MISMATCH = "schema_mismatch"
    INVALID_USER_INPUT = "invalid_user_input"


USER_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.UPSTREAM_UNAVAILABLE: "The analysis service is currently unavailable. Please try again later.",
    ErrorKind.EMPTY_RESPONSE: "The analysis service returned no result. Please try again later.",
    ErrorKind.UNPARSABLE_CONTENT: "We could not understand the analysis. Please try again.",
    ErrorKind.SCHEMA_MISMATCH: "The analysis came back incomplete. Please try again.",
    ErrorKind.INVALID_USER_INPUT: "The request is missing required input.",
}


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A fully normalized value."""
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """
    A typed failure.

    ``message`` is an internal diagnostic and is only ever logged.
    ``reason`` is user-safe text (e.g. the model's explanation of why a
    document is not a bank statement) and is shown verbatim when set.
    ``rejected`` marks input the model judged invalid, which is the
    caller's fault rather than an upstream fault.
    """
    kind: ErrorKind
    message: str = ""
    reason: str | None = None
    rejected: bool = False

    @property
    def ok(self) -> bool:
        return False

    @property
    def user_message(self) -> str:
        if self.reason:
            return self.reason
        return USER_MESSAGES[self.kind]

    @property
    def status_code(self) -> int:
        if self.kind is ErrorKind.INVALID_USER_INPUT or self.rejected:
            return 400
        return 500


NormalizedResult = Union[Ok[T], Err]


def invalid_input(message: str) -> Err:
    """Shortcut for request validation failures caught before any upstream call."""
    return Err(ErrorKind.INVALID_USER_INPUT, message, reason=message)
