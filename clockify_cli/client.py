"""Clockify REST API client using httpx (async)."""
import logging
from datetime import datetime
from typing import Any, Optional

import httpx

from clockify_cli.errors import TransportError
from clockify_cli.models.project import Project, ProjectRequest
from clockify_cli.models.time_entry import TimeEntry, TimeEntryRequest, to_api_timestamp
from clockify_cli.models.user import User, Workspace


logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.clockify.me/api/v1"


class ClockifyClient:
    """Async client for the Clockify API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        page_size: int = 50,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize client.

        Args:
            api_key: Clockify API key sent as X-Api-Key
            base_url: API root URL
            timeout: Request timeout in seconds
            page_size: Number of time entries fetched per listing
            transport: Optional httpx transport (used by tests)
        """
        self.page_size = page_size
        self.http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"X-Api-Key": api_key, "Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ClockifyClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self.http.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        """
        Send a request and decode the JSON response.

        Raises:
            TransportError: On network failure or non-2xx status
        """
        logger.debug("%s %s", method, path)
        try:
            response = await self.http.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"{e.response.status_code} {_error_message(e.response)}",
                status_code=e.response.status_code,
            )
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {path} failed: {e}")

        if not response.content:
            return None
        return response.json()

    async def get_current_user(self) -> User:
        data = await self._request("GET", "/user")
        return User.model_validate(data)

    async def get_workspaces(self) -> list[Workspace]:
        data = await self._request("GET", "/workspaces")
        return [Workspace.model_validate(item) for item in data]

    async def get_time_entries(self, workspace_id: str, user_id: str) -> list[TimeEntry]:
        """
        List a user's time entries, most recent first.

        Entries are hydrated so project and task names are included.
        """
        data = await self._request(
            "GET",
            f"/workspaces/{workspace_id}/user/{user_id}/time-entries",
            params={"hydrated": "true", "page-size": self.page_size},
        )
        return [TimeEntry.model_validate(item) for item in data]

    async def get_projects(self, workspace_id: str) -> list[Project]:
        data = await self._request(
            "GET",
            f"/workspaces/{workspace_id}/projects",
            params={"page-size": 5000},
        )
        return [Project.model_validate(item) for item in data]

    async def create_project(self, workspace_id: str, project: ProjectRequest) -> Project:
        data = await self._request(
            "POST",
            f"/workspaces/{workspace_id}/projects",
            json=project.to_payload(),
        )
        return Project.model_validate(data)

    async def start_timer(self, workspace_id: str, request: TimeEntryRequest) -> TimeEntry:
        """Create an open entry (request without end)."""
        return await self.create_time_entry(workspace_id, request)

    async def create_time_entry(self, workspace_id: str, request: TimeEntryRequest) -> TimeEntry:
        data = await self._request(
            "POST",
            f"/workspaces/{workspace_id}/time-entries",
            json=request.to_payload(),
        )
        return TimeEntry.model_validate(data)

    async def stop_timer(self, workspace_id: str, user_id: str, end: datetime) -> TimeEntry:
        """Close the user's open entry at ``end``."""
        data = await self._request(
            "PATCH",
            f"/workspaces/{workspace_id}/user/{user_id}/time-entries",
            json={"end": to_api_timestamp(end)},
        )
        return TimeEntry.model_validate(data)

    async def update_time_entry(
        self,
        workspace_id: str,
        entry_id: str,
        request: TimeEntryRequest,
    ) -> TimeEntry:
        data = await self._request(
            "PUT",
            f"/workspaces/{workspace_id}/time-entries/{entry_id}",
            json=request.to_payload(),
        )
        return TimeEntry.model_validate(data)


def _error_message(response: httpx.Response) -> str:
    """Extract the server's error message, falling back to the reason phrase."""
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return body["message"]
    return response.reason_phrase
