"""
FastAPI dependency providers for the sync engine.

Services live on the SyncContainer attached to app.state by create_app().
These providers expose them to routers as dependencies, which keeps routers
free of wiring and lets tests swap the container.

Usage in routers:
    from api.deps import get_scheduler
    from application.sync import SyncScheduler

    @router.post("/sync/foreground")
    async def foreground(scheduler: SyncScheduler = Depends(get_scheduler)):
        return await scheduler.on_foreground()
"""

from fastapi import Depends, Request

from application.sync import SyncScheduler
from backend.container import SyncContainer
from backend.settings import Settings


def get_container(request: Request) -> SyncContainer:
    """Container built by create_app()."""
    return request.app.state.container


def get_settings(container: SyncContainer = Depends(get_container)) -> Settings:
    """Settings the container was built from."""
    return container.settings


def get_scheduler(container: SyncContainer = Depends(get_container)) -> SyncScheduler:
    return container.scheduler


__all__ = [
    "get_container",
    "get_settings",
    "get_scheduler",
]
