"""
Failure classification and the API response envelope.

Only programmer and integration errors are raised: unknown formats,
missing decks, a deck queried under the wrong format, failed cache
computations, cancelled evaluations. Deck rule violations and empty
candidate sets are data and never pass through here.

Every KnownError maps onto an ApiResponse so that the HTTP layer can
return a classified body instead of a bare 500.
"""

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    UNSUPPORTED_FORMAT = "unsupported_format"
    FORMAT_MISMATCH = "format_mismatch"
    COMPUTATION_FAILED = "computation_failed"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"


class OutcomeType(str, Enum):
    SUCCESS = "success"
    KNOWN_FAILURE = "known_failure"
    UNKNOWN_FAILURE = "unknown_failure"


T = TypeVar("T")


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(..., description="Classification of the failure")
    message: str = Field(..., description="User-appropriate explanation of what went wrong")
    detail: str | None = Field(default=None, description="Additional technical detail")
    suggestion: str | None = Field(default=None, description="Suggested action for the user")


class ApiResponse(BaseModel, Generic[T]):
    """Response envelope used for every failed request."""

    outcome: OutcomeType = Field(..., description="High-level classification of the result")
    data: T | None = Field(default=None, description="Response data (present on success)")
    failure: FailureDetail | None = Field(
        default=None, description="Failure details (present on non-success)"
    )

    @classmethod
    def success(cls, data: T) -> "ApiResponse[T]":
        return cls(outcome=OutcomeType.SUCCESS, data=data)

    @classmethod
    def known_failure(
        cls,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ) -> "ApiResponse[Any]":
        return cls(
            outcome=OutcomeType.KNOWN_FAILURE,
            failure=FailureDetail(kind=kind, message=message, detail=detail, suggestion=suggestion),
        )

    @classmethod
    def unknown_failure(cls, detail: str | None = None) -> "ApiResponse[Any]":
        """Catch-all for unexpected exceptions. The message is fixed."""
        return cls(
            outcome=OutcomeType.UNKNOWN_FAILURE,
            failure=FailureDetail(
                kind=FailureKind.UNKNOWN,
                message="The request failed for an unknown reason. Try again.",
                detail=detail,
                suggestion="If this persists, please report the issue.",
            ),
        )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ApiResponse[Any]:
        return ApiResponse.known_failure(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


class UnsupportedFormatError(KnownError):
    """Raised for a format key that has no adapter."""

    def __init__(self, format_name: str, supported: list[str] | None = None):
        self.format_name = format_name
        suggestion = None
        if supported:
            suggestion = f"Use one of: {', '.join(supported)}"
        super().__init__(
            kind=FailureKind.UNSUPPORTED_FORMAT,
            message=f"Unsupported format: {format_name!r}",
            suggestion=suggestion,
            status_code=400,
        )


class FormatMismatchError(KnownError):
    """Raised when a deck is evaluated under a format other than its own."""

    def __init__(self, deck_id: str, deck_format: str, requested_format: str):
        self.deck_id = deck_id
        self.deck_format = deck_format
        self.requested_format = requested_format
        super().__init__(
            kind=FailureKind.FORMAT_MISMATCH,
            message=f"Deck {deck_id} is a {deck_format} deck, not {requested_format}",
            suggestion=f"Request suggestions for format {deck_format!r}",
            status_code=400,
        )


class NotFoundError(KnownError):
    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"{resource} {identifier!r} not found",
            status_code=404,
        )


class CacheComputationError(KnownError):
    """
    The computation behind a cache entry raised.

    Nothing is cached for the key; the next call recomputes.
    """

    def __init__(self, key: str, cause: BaseException):
        self.key = key
        self.cause = cause
        super().__init__(
            kind=FailureKind.COMPUTATION_FAILED,
            message="Recommendation computation failed",
            detail=f"{type(cause).__name__}: {cause}",
            suggestion="Retry the request.",
            status_code=503,
        )


class EvaluationCancelledError(KnownError):
    """The caller cancelled an evaluation; partial results are discarded."""

    def __init__(self, evaluated: int = 0):
        self.evaluated = evaluated
        super().__init__(
            kind=FailureKind.CANCELLED,
            message="Evaluation was cancelled",
            detail=f"Cancelled after {evaluated} candidates",
            status_code=409,
        )
