"""
Remote Store Client Interface (Port).

This module defines the abstract interface to the authoritative remote store.
Implementations translate transport failures into application.exceptions:

- unreachable / timeout -> ConnectivityError
- 5xx -> RemoteServerError
- 404 -> RemoteNotFoundError
- other 4xx -> RemoteRejectedError
"""
from typing import List, Protocol

from application.context import SyncContext
from domain.models import (
    RemoteCatalogEntry,
    RemotePersonalBest,
    RemoteSession,
    RemoteTemplate,
    SessionCreate,
    SessionUpdate,
    TemplateCreate,
)


class RemoteStoreClient(Protocol):
    """
    Abstract interface for the remote store's REST resources.

    Every call takes the explicit SyncContext; implementations hold no
    per-athlete state.
    """

    # Sessions

    async def list_sessions(
        self,
        context: SyncContext,
        *,
        include_incomplete: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> List[RemoteSession]:
        """
        List one page of the athlete's sessions, newest first.

        Args:
            context: Sync context
            include_incomplete: Also return sessions without completed_at
            limit: Page size
            offset: Number of sessions to skip

        Returns:
            Up to `limit` sessions. A shorter page means the end was reached.
        """
        ...

    async def create_session(self, context: SyncContext, payload: SessionCreate) -> RemoteSession:
        """
        Create a session. The response lists the created exercise rows
        with canonical ids, ordered by the `order` sent in the payload.
        """
        ...

    async def update_session(
        self,
        context: SyncContext,
        session_id: str,
        payload: SessionUpdate,
    ) -> RemoteSession:
        ...

    async def delete_session(self, context: SyncContext, session_id: str) -> None:
        ...

    # Templates

    async def list_personal_templates(self, context: SyncContext) -> List[RemoteTemplate]:
        ...

    async def list_assigned_templates(self, context: SyncContext) -> List[RemoteTemplate]:
        """Templates assigned to the athlete by a coach (read-only)."""
        ...

    async def create_template(self, context: SyncContext, payload: TemplateCreate) -> RemoteTemplate:
        ...

    async def delete_template(self, context: SyncContext, template_id: str) -> None:
        ...

    # Personal bests and catalog

    async def list_personal_bests(self, context: SyncContext) -> List[RemotePersonalBest]:
        """All personal bests the remote store has computed for the athlete."""
        ...

    async def list_exercises(self, context: SyncContext) -> List[RemoteCatalogEntry]:
        ...
