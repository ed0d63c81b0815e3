"""Task backends: Supabase gateway and in-memory mock store."""

from taskboard.backends.base import ChangeStream, RemoteGateway, TaskBackend
from taskboard.backends.mock import MockStore
from taskboard.backends.supabase import RealtimeSubscription, SupabaseGateway

__all__ = [
    "ChangeStream",
    "MockStore",
    "RealtimeSubscription",
    "RemoteGateway",
    "SupabaseGateway",
    "TaskBackend",
]
