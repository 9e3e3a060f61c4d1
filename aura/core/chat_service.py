"""
Aura Coach — Conversation service.

UI-agnostic orchestration of a coaching chat: open or resume a session,
gate premium coaches and long free sessions behind the subscription, ask
the model for a reply and autosave after every turn.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING

from aura.core.coach_chat import chat_reply
from aura.core.coaches import build_system_prompt, get_coach, greeting
from aura.data.models import ChatSession, Message, Snippet
from aura.data.stores import new_id, now_ms

if TYPE_CHECKING:
    from aura.core.coaches import Coach
    from aura.core.planner import ScheduleManager
    from aura.data.stores import ChatStore, SnippetStore
    from aura.ports.subscription_port import SubscriptionPort

logger = logging.getLogger(__name__)

NEW_CHAT_TITLE = "New Conversation"
_TITLE_WORDS = 5
_PREVIEW_CHARS = 100


class PremiumRequired(Exception):
    """Raised when an action needs a pro subscription the user lacks."""


def session_title(messages: list[Message]) -> str:
    """First five words of the first user message."""
    for message in messages:
        if message.role == "user":
            return " ".join(message.content.split(" ")[:_TITLE_WORDS]) + "..."
    return NEW_CHAT_TITLE


class ChatService:
    """Stateless service over the chat, schedule and snippet stores."""

    def __init__(
        self,
        chats: ChatStore,
        schedule: ScheduleManager,
        subscription: SubscriptionPort,
        snippets: SnippetStore,
        free_message_limit: int | None = None,
    ) -> None:
        if free_message_limit is None:
            from aura.config import settings
            free_message_limit = settings.FREE_MESSAGE_LIMIT

        self._chats = chats
        self._schedule = schedule
        self._subscription = subscription
        self._snippets = snippets
        self._free_message_limit = free_message_limit

    def _coach(self, coach_id: str) -> Coach:
        coach = get_coach(coach_id)
        if coach is None:
            raise ValueError(f"Unknown coach: {coach_id!r}")
        return coach

    async def open_session(
        self, coach_id: str, session_id: str | None = None,
    ) -> ChatSession:
        """Resume a saved session, or start a new one with the coach's greeting."""
        coach = self._coach(coach_id)
        if coach.is_premium and not await self._subscription.is_premium():
            raise PremiumRequired(f"{coach.name} is available on the Pro plan")

        if session_id is not None:
            saved = await self._chats.get_chat(session_id)
            if saved is not None:
                return saved
            logger.warning("Session %s not found, starting a new one", session_id)

        return ChatSession(
            id=new_id(),
            coach_id=coach.id,
            title=NEW_CHAT_TITLE,
            messages=[Message(id=new_id(), role="assistant", content=greeting(coach))],
            last_modified=now_ms(),
        )

    async def _api_messages(self, coach: Coach, session: ChatSession) -> list[dict]:
        today = date.today().isoformat()
        blocks = await self._schedule.get_day(today) if coach.schedule_aware else []
        system_prompt = build_system_prompt(coach, blocks, today)
        return [
            {"role": "system", "content": system_prompt},
            *({"role": m.role, "content": m.content} for m in session.messages),
        ]

    async def send_message(self, session: ChatSession, text: str) -> Message:
        """Append the user's message, fetch the coach's reply and autosave.

        Raises PremiumRequired, with the user message already saved, once a
        free user reaches the per-session message limit.
        """
        if not text.strip():
            raise ValueError("Message is empty")
        coach = self._coach(session.coach_id)

        session.messages.append(Message(id=new_id(), role="user", content=text))
        user_turns = sum(1 for m in session.messages if m.role == "user")
        if user_turns >= self._free_message_limit and not await self._subscription.is_premium():
            await self.autosave(session)
            logger.info("Session %s hit the free message limit", session.id)
            raise PremiumRequired("Upgrade to Pro to keep the conversation going")

        reply_text = await chat_reply(await self._api_messages(coach, session))
        reply = Message(id=new_id(), role="assistant", content=reply_text)
        session.messages.append(reply)
        await self.autosave(session)
        return reply

    async def autosave(self, session: ChatSession) -> bool:
        """Persist the session unless it holds only the greeting."""
        if len(session.messages) <= 1:
            return False
        session.title = session_title(session.messages)
        session.preview = session.messages[-1].content[:_PREVIEW_CHARS]
        session.last_modified = now_ms()
        await self._chats.save_chat(session)
        return True

    async def save_snippet(self, session: ChatSession, content: str) -> Snippet:
        coach = self._coach(session.coach_id)
        return await self._snippets.save_snippet(
            content=content, coach_name=coach.name, tags=[coach.role],
        )
