"""
API package for the sync engine.

This package contains:
- deps.py: FastAPI dependency providers
- routers/: API route handlers
"""

# Re-export dependency providers for convenient access
from api.deps import (
    get_container,
    get_scheduler,
    get_settings,
)

__all__ = [
    "get_container",
    "get_scheduler",
    "get_settings",
]
