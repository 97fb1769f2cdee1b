"""Azure DevOps REST API client."""

import base64
import logging
from dataclasses import dataclass
from typing import Any, NoReturn
from urllib.parse import quote

import httpx

from devops_task_sync.azure_devops.errors import (
    AuthenticationFailedError,
    AzureDevOpsRequestError,
    NotFoundError,
    RateLimitedError,
)
from devops_task_sync.azure_devops.iterations import flatten_iterations
from devops_task_sync.azure_devops.models import (
    WORK_ITEM_FIELDS,
    AzureDevOpsProject,
    Iteration,
    IterationNode,
    WorkItem,
    WorkItemType,
)
from devops_task_sync.utils.redaction import mask_secret, redact_headers

logger = logging.getLogger(__name__)

LEGACY_DOMAIN = "visualstudio.com"
LEGACY_API_VERSION = "5.0"
CURRENT_API_VERSION = "7.1"

#: Nesting depth requested for the iteration classification tree.
ITERATION_DEPTH = 10

AUTH_FAILURE_STATUSES = (401, 403)
WORK_ITEMS_SCOPE_HINT = 'Please ensure your PAT has "Work Items (Read)" scope.'


@dataclass(frozen=True)
class ApiDialect:
    """Protocol settings resolved once per organization URL."""

    api_version: str
    legacy: bool

    @classmethod
    def for_organization(cls, organization_url: str) -> "ApiDialect":
        """Pick the API dialect for an organization URL.

        Organizations still on the legacy visualstudio.com domain only
        accept the older API version.
        """
        if LEGACY_DOMAIN in organization_url:
            return cls(api_version=LEGACY_API_VERSION, legacy=True)
        return cls(api_version=CURRENT_API_VERSION, legacy=False)


def build_iteration_wiql(iteration_path: str) -> str:
    """Build the WIQL query selecting importable work items of an iteration.

    Args:
        iteration_path: Backslash-delimited iteration path.

    Returns:
        WIQL query text.
    """
    escaped_path = iteration_path.replace("'", "''")
    types = ", ".join(f"'{work_item_type.value}'" for work_item_type in WorkItemType)
    return (
        "SELECT [System.Id], [System.Title], [System.WorkItemType], [System.State], "
        "[System.AssignedTo], [System.IterationPath] "
        "FROM WorkItems "
        f"WHERE [System.IterationPath] = '{escaped_path}' "
        f"AND [System.WorkItemType] IN ({types}) "
        "ORDER BY [System.Id]"
    )


def _error_message(error: Exception) -> str:
    """Extract the most useful message from a failed request."""
    if isinstance(error, httpx.HTTPStatusError):
        try:
            data = error.response.json()
        except ValueError:
            data = None
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
    return str(error)


class AzureDevOpsClient:
    """Client for the Azure DevOps work item tracking API.

    One instance holds one authenticated session to one organization. It is
    safe to reuse for sequential calls; it is not meant to be shared by
    concurrent callers.
    """

    def __init__(
        self,
        organization_url: str,
        pat: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize Azure DevOps client.

        Args:
            organization_url: Organization URL (e.g. https://dev.azure.com/myorg).
            pat: Decrypted Personal Access Token.
            timeout: Timeout in seconds for every request.
            transport: Optional httpx transport, mainly for tests.
        """
        self.organization_url = organization_url.rstrip("/")
        self.dialect = ApiDialect.for_organization(self.organization_url)

        token = base64.b64encode(f":{pat}".encode()).decode()
        self._auth_header = f"Basic {token}"

        logger.debug(
            f"Creating Azure DevOps client for {self.organization_url} "
            f"(PAT {mask_secret(pat)}, api-version {self.dialect.api_version})"
        )

        self.client = httpx.AsyncClient(
            base_url=f"{self.organization_url}/_apis",
            headers={
                "Authorization": self._auth_header,
                "Content-Type": "application/json",
            },
            params={"api-version": self.dialect.api_version},
            timeout=timeout,
            transport=transport,
            event_hooks={"request": [self._log_request]},
        )

    @staticmethod
    async def _log_request(request: httpx.Request) -> None:
        logger.debug(
            f"{request.method} {request.url} headers={redact_headers(dict(request.headers))}"
        )

    def _raise_for_failure(
        self,
        error: Exception,
        context: str,
        not_found: tuple[str, str],
        auth_hint: str | None = None,
        map_rate_limit: bool = False,
    ) -> NoReturn:
        """Translate a transport failure into an AzureDevOpsError.

        Args:
            error: The caught exception.
            context: Prefix for the generic wrapped message.
            not_found: Resource kind and identifier reported on HTTP 404.
            auth_hint: Extra hint for authentication failures.
            map_rate_limit: Whether HTTP 429 maps to RateLimitedError.
        """
        if isinstance(error, httpx.HTTPStatusError):
            status = error.response.status_code
            if status == 404:
                resource_kind, identifier = not_found
                raise NotFoundError(resource_kind, identifier, original_error=error) from error
            if status in AUTH_FAILURE_STATUSES:
                raise AuthenticationFailedError(
                    hint=auth_hint, status_code=status, original_error=error
                ) from error
            if status == 429 and map_rate_limit:
                raise RateLimitedError(original_error=error) from error
            raise AzureDevOpsRequestError(
                f"{context}: {_error_message(error)}",
                status_code=status,
                original_error=error,
            ) from error

        raise AzureDevOpsRequestError(
            f"{context}: {_error_message(error)}", original_error=error
        ) from error

    async def validate_connection(self) -> bool:
        """Check that the organization URL and PAT are usable.

        Returns:
            True if the connection is valid, False otherwise. Never raises.
        """
        try:
            response = await self.client.get("/projects", params={"$top": 1})
            response.raise_for_status()
            return True
        except httpx.HTTPStatusError as e:
            if e.response.status_code in AUTH_FAILURE_STATUSES:
                logger.warning("Azure DevOps authentication failed")
                return False
            logger.error(f"Error validating Azure DevOps connection: {e}")
            return False
        except Exception as e:
            logger.error(f"Error validating Azure DevOps connection: {e}")
            return False

    async def get_project(self, project_name: str) -> AzureDevOpsProject:
        """Get project details by name.

        Args:
            project_name: Name of the Azure DevOps project.

        Returns:
            Project details.

        Raises:
            NotFoundError: If the project does not exist.
            AuthenticationFailedError: If the PAT is rejected.
            AzureDevOpsRequestError: For any other failure.
        """
        try:
            response = await self.client.get(f"/projects/{quote(project_name, safe='')}")
            response.raise_for_status()
            return AzureDevOpsProject(**response.json())
        except (httpx.HTTPError, ValueError) as e:
            self._raise_for_failure(
                e,
                context="Failed to fetch Azure DevOps project",
                not_found=("project", project_name),
            )

    async def get_iterations(self, project_id: str) -> list[Iteration]:
        """Get all iterations of a project, across every team.

        The classification nodes endpoint is rooted at the project name, so
        the name is resolved first. The project-level tree is used instead of
        the team settings endpoint, which only reports the default team's
        sprints.

        Args:
            project_id: Azure DevOps project ID (GUID).

        Returns:
            Flattened iterations.

        Raises:
            NotFoundError: If the project does not exist.
            AuthenticationFailedError: If the PAT is rejected.
            AzureDevOpsRequestError: For any other failure.
        """
        url = None
        try:
            logger.debug(f"Fetching project details for: {project_id}")
            project_response = await self.client.get(f"/projects/{quote(project_id, safe='')}")
            project_response.raise_for_status()
            project_name = project_response.json()["name"]

            url = (
                f"{self.organization_url}/{quote(project_name, safe='')}"
                "/_apis/wit/classificationnodes/iterations"
            )
            logger.debug(f"Fetching all project iterations from: {url}")

            response = await self.client.get(
                url,
                headers={
                    "Authorization": self._auth_header,
                    "Content-Type": "application/json",
                },
                params={
                    "api-version": self.dialect.api_version,
                    "$depth": ITERATION_DEPTH,
                },
            )
            response.raise_for_status()
            root = IterationNode(**response.json())
        except (httpx.HTTPError, ValueError, KeyError) as e:
            if isinstance(e, httpx.HTTPStatusError):
                logger.error(
                    f"Azure DevOps API error: status={e.response.status_code} "
                    f"url={e.request.url} message={_error_message(e)}"
                )
            else:
                logger.error(f"Failed to fetch iterations from {url or project_id}: {e}")
            self._raise_for_failure(
                e,
                context="Failed to fetch iterations",
                not_found=("project", project_id),
                auth_hint=WORK_ITEMS_SCOPE_HINT,
            )

        iterations = flatten_iterations(root)
        logger.info(f"Found {len(iterations)} iterations (from all teams)")
        return iterations

    async def get_work_items_by_iteration(
        self, project_id: str, iteration_path: str
    ) -> list[WorkItem]:
        """Get the Bugs, Tasks and User Stories of an iteration.

        Args:
            project_id: Azure DevOps project ID (GUID).
            iteration_path: Iteration path (e.g. "MyProject\\Sprint 1").

        Returns:
            Work items ordered by id.

        Raises:
            NotFoundError: If the iteration does not exist in the project.
            AuthenticationFailedError: If the PAT is rejected.
            RateLimitedError: If the service throttles the request.
            AzureDevOpsRequestError: For any other failure.
        """
        try:
            wiql_response = await self.client.post(
                "/wit/wiql",
                json={"query": build_iteration_wiql(iteration_path)},
                params={"project": project_id},
            )
            wiql_response.raise_for_status()
            work_item_refs: list[dict[str, Any]] = wiql_response.json().get("workItems") or []

            if not work_item_refs:
                logger.info(f"No work items found in iteration {iteration_path}")
                return []

            ids = ",".join(str(ref["id"]) for ref in work_item_refs)
            response = await self.client.get(
                "/wit/workitems",
                params={"ids": ids, "fields": ",".join(WORK_ITEM_FIELDS)},
            )
            response.raise_for_status()
            items = response.json().get("value") or []
            return [WorkItem(**item) for item in items]
        except (httpx.HTTPError, ValueError, KeyError) as e:
            self._raise_for_failure(
                e,
                context="Failed to fetch work items",
                not_found=("iteration", iteration_path),
                map_rate_limit=True,
            )

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "AzureDevOpsClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.aclose()
