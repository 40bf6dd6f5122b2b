"""SQLite persistence for events and planet states"""

from .event_store import EventStore, StoredEvent

__all__ = ["EventStore", "StoredEvent"]
