"""
Result type for service outcomes.

Services return a Result instead of raising so event handlers can tell a
normal no-op (a soft failure, e.g. a duplicate vote) from a real failure
(a hard failure, e.g. an external API error) without parsing messages.

Usage:
    return Result.ok(outcome)
    return Result.fail("Already voted", code=ALREADY_VOTED)
    return Result.fail("Sheet append failed", code=EXTERNAL_API_ERROR, hard=True)

    if not result and result.hard:
        logger.warning(result.error)
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Attributes:
        success: Whether the operation did what was asked
        value: Payload on success
        error: Human readable reason on failure
        error_code: Code from services.error_codes
        hard: True when the failure was unexpected rather than a rule rejecting input
    """

    success: bool
    value: T | None = None
    error: str | None = None
    error_code: str | None = None
    hard: bool = False

    @classmethod
    def ok(cls, value: T | None = None) -> "Result[T]":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: str, code: str | None = None, hard: bool = False) -> "Result[T]":
        return cls(success=False, error=error, error_code=code, hard=hard)

    @property
    def soft_failure(self) -> bool:
        return not self.success and not self.hard

    def __bool__(self) -> bool:
        return self.success
