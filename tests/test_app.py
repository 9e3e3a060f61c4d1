"""Tests for aura.app — container wiring and session restore."""

import pytest
from unittest.mock import patch

from aura.adapters.memory_store import MemoryKeyValueStore
from aura.adapters.mock_subscription import MockSubscriptionService
from aura.app import build_app


@pytest.fixture
def app():
    return build_app(kv=MemoryKeyValueStore(), subscription=MockSubscriptionService(premium=False))


class TestAuraApp:
    @pytest.mark.asyncio
    async def test_fresh_app_is_signed_out(self, app):
        await app.load()
        assert app.current_user is None
        assert app.theme == "light"

    @pytest.mark.asyncio
    async def test_stores_share_one_backend(self, app):
        await app.quotes.save_quote("Shared")
        assert await app.kv.get("quotes") is not None

    @pytest.mark.asyncio
    async def test_load_restores_session_and_theme(self):
        kv = MemoryKeyValueStore()
        first = build_app(kv=kv)
        user = await first.register("Ada", "ada@example.com", "secret")
        await first.toggle_theme()

        second = build_app(kv=kv)
        await second.load()
        assert second.current_user == user
        assert second.theme == "dark"

    @pytest.mark.asyncio
    async def test_login_and_logout(self, app):
        await app.register("Ada", "ada@example.com", "secret")
        await app.logout()
        assert app.current_user is None

        user = await app.login("ada@example.com", "secret")
        assert app.current_user == user

        await app.load()
        assert app.current_user == user

    def test_default_backend_from_settings(self):
        from aura.config import settings

        with patch.object(settings, "STORAGE_BACKEND", "memory"):
            app = build_app()
        assert isinstance(app.kv, MemoryKeyValueStore)
