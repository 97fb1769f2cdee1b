"""Error taxonomy for Azure DevOps API failures.

Callers decide what to do with a failure by looking at ``error.category``;
the message is diagnostic payload only.
"""

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Closed set of failure categories surfaced to callers."""

    NOT_FOUND = "not_found"
    AUTHENTICATION_FAILED = "authentication_failed"
    RATE_LIMITED = "rate_limited"
    UNKNOWN = "unknown"


class AzureDevOpsError(Exception):
    """Base exception for Azure DevOps API errors.

    Attributes:
        category: Machine-checkable failure category.
        message: Human-readable error message.
        status_code: HTTP status code, if the failure came from a response.
        original_error: The exception that was translated.
        details: Additional structured details.
    """

    category = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str = "Azure DevOps API error",
        status_code: int | None = None,
        original_error: Exception | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.original_error = original_error
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert error to a dictionary for JSON serialization."""
        return {
            "error": self.__class__.__name__,
            "category": self.category.value,
            "status_code": self.status_code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(AzureDevOpsError):
    """Raised when a project, iteration or work item does not exist (HTTP 404)."""

    category = ErrorCategory.NOT_FOUND

    def __init__(
        self,
        resource_kind: str,
        identifier: str,
        original_error: Exception | None = None,
    ) -> None:
        self.resource_kind = resource_kind
        self.identifier = identifier
        super().__init__(
            message=f"Azure DevOps {resource_kind} '{identifier}' not found",
            status_code=404,
            original_error=original_error,
            details={"resource_kind": resource_kind, "identifier": identifier},
        )


class AuthenticationFailedError(AzureDevOpsError):
    """Raised when the PAT is rejected (HTTP 401 or 403)."""

    category = ErrorCategory.AUTHENTICATION_FAILED

    def __init__(
        self,
        hint: str | None = None,
        status_code: int = 401,
        original_error: Exception | None = None,
    ) -> None:
        self.hint = hint
        message = "Azure DevOps authentication failed"
        if hint:
            message = f"{message}. {hint}"
        super().__init__(
            message=message,
            status_code=status_code,
            original_error=original_error,
        )


class RateLimitedError(AzureDevOpsError):
    """Raised when the service throttles the caller (HTTP 429)."""

    category = ErrorCategory.RATE_LIMITED

    def __init__(self, original_error: Exception | None = None) -> None:
        super().__init__(
            message="Azure DevOps rate limit exceeded. Please try again later.",
            status_code=429,
            original_error=original_error,
        )


class AzureDevOpsRequestError(AzureDevOpsError):
    """Any other transport or deserialization failure."""

    category = ErrorCategory.UNKNOWN
