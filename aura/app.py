"""
Aura Coach — Application container.

Wires every store and service over one key-value store and holds the
session-level state (signed-in user, theme) that screens read. Pass the
container around instead of reaching for module globals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from aura.adapters.mock_subscription import MockSubscriptionService
from aura.adapters.store_factory import create_key_value_store
from aura.core.chat_service import ChatService
from aura.core.planner import ScheduleManager
from aura.data.auth import AuthStore
from aura.data.models import User
from aura.data.stores import (
    ChatStore,
    LifestyleStore,
    PreferencesStore,
    QuoteStore,
    ScheduleStore,
    SnippetStore,
)
from aura.ports.credential_port import CredentialPolicy
from aura.ports.storage_port import KeyValueStore
from aura.ports.subscription_port import SubscriptionPort

logger = logging.getLogger(__name__)


@dataclass
class AuraApp:
    kv: KeyValueStore
    auth: AuthStore
    chats: ChatStore
    snippets: SnippetStore
    schedule_store: ScheduleStore
    schedule: ScheduleManager
    lifestyle: LifestyleStore
    quotes: QuoteStore
    preferences: PreferencesStore
    subscription: SubscriptionPort
    chat: ChatService
    current_user: User | None = None
    theme: str = "light"

    async def load(self) -> None:
        """Restore the persisted session and theme. Call once on start."""
        self.current_user = await self.auth.current_user()
        self.theme = await self.preferences.get_theme()
        logger.info(
            "App loaded (signed in: %s, theme: %s)",
            self.current_user is not None, self.theme,
        )

    async def login(self, email: str, password: str) -> User:
        self.current_user = await self.auth.login(email, password)
        return self.current_user

    async def register(self, name: str, email: str, password: str) -> User:
        self.current_user = await self.auth.register(name, email, password)
        return self.current_user

    async def logout(self) -> None:
        await self.auth.logout()
        self.current_user = None

    async def toggle_theme(self) -> str:
        self.theme = await self.preferences.toggle_theme()
        return self.theme


def build_app(
    kv: KeyValueStore | None = None,
    subscription: SubscriptionPort | None = None,
    credentials: CredentialPolicy | None = None,
) -> AuraApp:
    """Assemble the application over `kv` (default: the configured backend)."""
    kv = kv if kv is not None else create_key_value_store()
    subscription = subscription if subscription is not None else MockSubscriptionService()

    chats = ChatStore(kv)
    snippets = SnippetStore(kv)
    schedule_store = ScheduleStore(kv)
    schedule = ScheduleManager(schedule_store)

    return AuraApp(
        kv=kv,
        auth=AuthStore(kv, credentials=credentials),
        chats=chats,
        snippets=snippets,
        schedule_store=schedule_store,
        schedule=schedule,
        lifestyle=LifestyleStore(kv),
        quotes=QuoteStore(kv),
        preferences=PreferencesStore(kv),
        subscription=subscription,
        chat=ChatService(chats, schedule, subscription, snippets),
    )
