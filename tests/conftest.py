"""Shared test fixtures and configuration.

Sets up fake environment variables before any aura imports, and provides
key-value stores and the record stores built on them.
"""

import os

# Patch env vars BEFORE any aura imports
os.environ.setdefault("OPENAI_API_KEY", "sk-fake-key-for-tests")
os.environ.setdefault("OPENAI_MODEL", "gpt-4o-mini")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("DATABASE_PATH", ":memory:")
os.environ.setdefault("FREE_MESSAGE_LIMIT", "5")
os.environ.setdefault("PREMIUM_ENABLED", "false")

import pytest


@pytest.fixture
def kv():
    """An empty in-memory key-value store."""
    from aura.adapters.memory_store import MemoryKeyValueStore
    return MemoryKeyValueStore()


@pytest.fixture
def sqlite_kv(tmp_path):
    """A SQLiteKeyValueStore backed by a temp file."""
    from aura.adapters.sqlite_store import SQLiteKeyValueStore
    return SQLiteKeyValueStore(db_path=str(tmp_path / "test_aura.db"))


@pytest.fixture
def schedule_store(kv):
    from aura.data.stores import ScheduleStore
    return ScheduleStore(kv)


@pytest.fixture
def planner(schedule_store):
    from aura.core.planner import ScheduleManager
    return ScheduleManager(schedule_store)


@pytest.fixture
def chat_store(kv):
    from aura.data.stores import ChatStore
    return ChatStore(kv)


@pytest.fixture
def snippet_store(kv):
    from aura.data.stores import SnippetStore
    return SnippetStore(kv)


@pytest.fixture
def quote_store(kv):
    from aura.data.stores import QuoteStore
    return QuoteStore(kv)


@pytest.fixture
def lifestyle_store(kv):
    from aura.data.stores import LifestyleStore
    return LifestyleStore(kv)


@pytest.fixture
def preferences_store(kv):
    from aura.data.stores import PreferencesStore
    return PreferencesStore(kv)


@pytest.fixture
def auth_store(kv):
    from aura.data.auth import AuthStore
    return AuthStore(kv)
