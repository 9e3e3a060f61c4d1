"""Key-value store factory — creates the right backend based on config."""

from __future__ import annotations

from aura.config import settings
from aura.ports.storage_port import KeyValueStore


def create_key_value_store(db_path: str | None = None) -> KeyValueStore:
    """Return the store matching the STORAGE_BACKEND setting.

    Args:
        db_path: Overrides DATABASE_PATH for the sqlite backend.
    """
    backend = settings.STORAGE_BACKEND.lower()

    if backend == "sqlite":
        from aura.adapters.sqlite_store import SQLiteKeyValueStore

        return SQLiteKeyValueStore(db_path=db_path)

    if backend == "memory":
        from aura.adapters.memory_store import MemoryKeyValueStore

        return MemoryKeyValueStore()

    raise ValueError(f"Unknown STORAGE_BACKEND: {backend!r}")
