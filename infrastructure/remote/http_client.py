"""
HTTP client for the remote workout store.

Implements the RemoteStoreClient port over the store's REST API:

- /users/firebase/{athlete}/workouts (+ /{id})
- /users/firebase/{athlete}/personal-templates (+ /{id})
- /users/firebase/{athlete}/assigned-templates
- /users/firebase/{athlete}/personal-bests
- /exercises

Transport and status failures are translated into application.exceptions so
that the RetryCoordinator can classify them.
"""

import logging
from typing import Any, List, Optional

import httpx

from application.context import SyncContext
from application.exceptions import (
    ConnectivityError,
    RemoteNotFoundError,
    RemoteRejectedError,
    RemoteServerError,
)
from domain.models import (
    RemoteCatalogEntry,
    RemotePersonalBest,
    RemoteSession,
    RemoteTemplate,
    SessionCreate,
    SessionUpdate,
    TemplateCreate,
)

logger = logging.getLogger(__name__)


def _items(data: Any, key: str) -> List[Any]:
    """Accept both a bare JSON array and an object wrapping it under `key`."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        return data.get(key) or data.get("data") or []
    return []


class HttpRemoteStoreClient:
    """
    httpx-based RemoteStoreClient.

    A new AsyncClient is opened per request; the client itself keeps no
    connection or athlete state.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
    ):
        """
        Initialize the remote store client.

        Args:
            base_url: Base URL of the remote store (e.g., "https://api.example.com")
            timeout: Request timeout in seconds
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    def _athlete_path(self, context: SyncContext, resource: str) -> str:
        return f"{self._base_url}/users/firebase/{context.athlete_id}/{resource}"

    async def _request(
        self,
        method: str,
        url: str,
        context: SyncContext,
        *,
        params: Optional[dict] = None,
        json: Optional[dict] = None,
    ) -> Any:
        """
        Send one request and decode the JSON body.

        Raises:
            ConnectivityError: Remote store unreachable or timed out
            RemoteServerError: 5xx response
            RemoteNotFoundError: 404 response
            RemoteRejectedError: Any other non-2xx response
        """
        headers = {"Content-Type": "application/json", **context.auth_headers}

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.request(
                    method, url, params=params, json=json, headers=headers
                )
        except httpx.ConnectError as e:
            logger.error(f"Remote store unavailable: {e}")
            raise ConnectivityError(f"Remote store is not available at {self._base_url}") from e
        except httpx.TimeoutException as e:
            logger.error(f"Remote store timeout: {e}")
            raise ConnectivityError("Remote store request timed out") from e
        except httpx.NetworkError as e:
            logger.error(f"Remote store network error: {e}")
            raise ConnectivityError(f"Network error talking to remote store: {e}") from e

        status = response.status_code
        if 200 <= status < 300:
            if status == 204 or not response.content:
                return None
            return response.json()

        logger.error(f"Remote store error: {method} {url} -> {status} - {response.text}")
        if status == 404:
            raise RemoteNotFoundError(f"Not found: {url}", status)
        if status >= 500:
            raise RemoteServerError(f"Remote store error {status}: {response.text}", status)
        if status in (401, 403):
            raise RemoteRejectedError(f"Not authorized ({status})", status)
        raise RemoteRejectedError(f"Request rejected ({status}): {response.text}", status)

    # Sessions

    async def list_sessions(
        self,
        context: SyncContext,
        *,
        include_incomplete: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> List[RemoteSession]:
        data = await self._request(
            "GET",
            self._athlete_path(context, "workouts"),
            context,
            params={
                "includeIncomplete": str(include_incomplete).lower(),
                "limit": limit,
                "offset": offset,
            },
        )
        return [RemoteSession.model_validate(item) for item in _items(data, "workouts")]

    async def create_session(self, context: SyncContext, payload: SessionCreate) -> RemoteSession:
        data = await self._request(
            "POST",
            self._athlete_path(context, "workouts"),
            context,
            json=payload.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        return RemoteSession.model_validate(data)

    async def update_session(
        self,
        context: SyncContext,
        session_id: str,
        payload: SessionUpdate,
    ) -> RemoteSession:
        data = await self._request(
            "PUT",
            self._athlete_path(context, f"workouts/{session_id}"),
            context,
            json=payload.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        return RemoteSession.model_validate(data)

    async def delete_session(self, context: SyncContext, session_id: str) -> None:
        await self._request("DELETE", self._athlete_path(context, f"workouts/{session_id}"), context)

    # Templates

    async def list_personal_templates(self, context: SyncContext) -> List[RemoteTemplate]:
        data = await self._request("GET", self._athlete_path(context, "personal-templates"), context)
        return [RemoteTemplate.model_validate(item) for item in _items(data, "templates")]

    async def list_assigned_templates(self, context: SyncContext) -> List[RemoteTemplate]:
        data = await self._request("GET", self._athlete_path(context, "assigned-templates"), context)
        templates = [RemoteTemplate.model_validate(item) for item in _items(data, "templates")]
        for template in templates:
            template.is_personal = False
        return templates

    async def create_template(self, context: SyncContext, payload: TemplateCreate) -> RemoteTemplate:
        data = await self._request(
            "POST",
            self._athlete_path(context, "personal-templates"),
            context,
            json=payload.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        return RemoteTemplate.model_validate(data)

    async def delete_template(self, context: SyncContext, template_id: str) -> None:
        await self._request(
            "DELETE", self._athlete_path(context, f"personal-templates/{template_id}"), context
        )

    # Personal bests and catalog

    async def list_personal_bests(self, context: SyncContext) -> List[RemotePersonalBest]:
        data = await self._request("GET", self._athlete_path(context, "personal-bests"), context)
        return [RemotePersonalBest.model_validate(item) for item in _items(data, "personalBests")]

    async def list_exercises(self, context: SyncContext) -> List[RemoteCatalogEntry]:
        data = await self._request("GET", f"{self._base_url}/exercises", context)
        return [RemoteCatalogEntry.model_validate(item) for item in _items(data, "exercises")]
