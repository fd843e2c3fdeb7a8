"""
Router package for the sync engine.

This package contains the API routers:
- health: Liveness endpoint
- sync: Sync triggers and status
"""

from api.routers.health import router as health_router
from api.routers.sync import router as sync_router

__all__ = [
    "health_router",
    "sync_router",
]
