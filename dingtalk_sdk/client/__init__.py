"""Async and blocking client entry points."""

from .async_client import Client
from .blocking_client import BlockingClient

__all__ = ["BlockingClient", "Client"]
