"""Tests for the Azure DevOps error taxonomy."""

from devops_task_sync.azure_devops import (
    AuthenticationFailedError,
    AzureDevOpsError,
    AzureDevOpsRequestError,
    ErrorCategory,
    NotFoundError,
    RateLimitedError,
)


class TestErrorCategories:
    """Test each error carries a fixed category."""

    def test_not_found(self) -> None:
        """Test NotFoundError names the missing resource."""
        error = NotFoundError("project", "Website")

        assert error.category is ErrorCategory.NOT_FOUND
        assert error.status_code == 404
        assert error.message == "Azure DevOps project 'Website' not found"
        assert str(error) == "[404] Azure DevOps project 'Website' not found"

    def test_authentication_failed_with_hint(self) -> None:
        """Test the hint is appended to the message."""
        error = AuthenticationFailedError(hint="Grant the Work Items (Read) scope.", status_code=403)

        assert error.category is ErrorCategory.AUTHENTICATION_FAILED
        assert error.status_code == 403
        assert error.hint == "Grant the Work Items (Read) scope."
        assert error.message.endswith("Grant the Work Items (Read) scope.")

    def test_rate_limited(self) -> None:
        """Test RateLimitedError category and status."""
        error = RateLimitedError()

        assert error.category is ErrorCategory.RATE_LIMITED
        assert error.status_code == 429

    def test_unknown(self) -> None:
        """Test other failures fall into the unknown category."""
        cause = ValueError("boom")
        error = AzureDevOpsRequestError("Failed to fetch work items: boom", original_error=cause)

        assert error.category is ErrorCategory.UNKNOWN
        assert error.original_error is cause
        assert str(error) == "Failed to fetch work items: boom"

    def test_all_share_base_class(self) -> None:
        """Test callers can catch every failure with one except clause."""
        for error in (
            NotFoundError("iteration", "Sprint 9"),
            AuthenticationFailedError(),
            RateLimitedError(),
            AzureDevOpsRequestError(),
        ):
            assert isinstance(error, AzureDevOpsError)

    def test_to_dict(self) -> None:
        """Test JSON-friendly serialization."""
        data = NotFoundError("iteration", "Sprint 9").to_dict()

        assert data == {
            "error": "NotFoundError",
            "category": "not_found",
            "status_code": 404,
            "message": "Azure DevOps iteration 'Sprint 9' not found",
            "details": {"resource_kind": "iteration", "identifier": "Sprint 9"},
        }
