"""Remote store client implementations."""

from infrastructure.remote.http_client import HttpRemoteStoreClient

__all__ = ["HttpRemoteStoreClient"]
