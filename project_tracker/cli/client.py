from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx  # type: ignore

from project_tracker.constants import API_PREFIX, DEFAULT_API_URL, DEFAULT_CLIENT_TIMEOUT_SECONDS
from project_tracker.utils.errors import TrackerError

logger = logging.getLogger(__name__)


class TrackerClientError(TrackerError):
    """The API could not be reached or refused the request."""

    def __init__(self, message: str, status_code: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.status_code = status_code

    @property
    def messages(self) -> List[str]:
        """Individual messages reported by the server, or the overall message."""
        errors = self.details.get("errors") if isinstance(self.details, dict) else None
        return list(errors) if errors else [str(self)]


class TrackerClient:
    """Synchronous HTTP client for the Project Tracker API.

    Pass ``http_client`` to reuse an existing ``httpx.Client`` (its base URL
    is used as-is); otherwise one is created for ``api_url``.
    """

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_CLIENT_TIMEOUT_SECONDS,
        http_client: Optional[httpx.Client] = None,
    ):
        self.api_url = api_url.rstrip("/")
        self._client = http_client or httpx.Client(base_url=self.api_url, timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> TrackerClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        try:
            resp = self._client.request(method, f"{API_PREFIX}{path}", json=json)
        except httpx.HTTPError as e:
            raise TrackerClientError(
                f"Could not reach the tracker API at {self.api_url}: {e}",
                code="API_UNREACHABLE",
                suggested_action="start_server",
            ) from e

        if resp.is_success:
            return resp.json()

        try:
            detail = resp.json().get("detail")
        except ValueError:
            detail = None
        error = detail.get("error") if isinstance(detail, dict) else None
        if isinstance(error, dict):
            raise TrackerClientError(
                error.get("message", resp.reason_phrase),
                status_code=resp.status_code,
                code=error.get("code", "API_ERROR"),
                recoverable=error.get("recoverable", True),
                suggested_action=error.get("suggested_action", "retry"),
                details=error.get("details") or {},
            )
        raise TrackerClientError(
            f"API request failed with {resp.status_code}: {detail or resp.text}",
            status_code=resp.status_code,
            code="API_ERROR",
        )

    # Projects

    def list_projects(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/projects")

    def get_project(self, project_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/projects/{project_id}")

    def create_project(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/projects", json=payload)

    def transition_project(self, project_id: str, action: str) -> Dict[str, Any]:
        return self._request("POST", f"/projects/{project_id}/{action}")

    # Tasks

    def list_tasks(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/tasks")

    def get_task(self, task_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/tasks/{task_id}")

    # Tags

    def create_tag(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/tags", json=payload)

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/health")
