"""
Persistent state storage
"""
from .bookmark_store import BookmarkStore, migrate_legacy

__all__ = ["BookmarkStore", "migrate_legacy"]
