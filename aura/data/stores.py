"""
Aura Coach — Record Stores.

Each store owns one or more key namespaces in the key-value store and keeps
whole collections there as JSON arrays. Reads never raise: a missing key,
malformed JSON or a non-list payload reads as an empty collection, and
individually malformed records are skipped.

Writes to a key go through a per-key asyncio.Lock so overlapping
read-modify-write cycles within one process are serialized.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from datetime import date, timedelta
from typing import Any, Callable, TypeVar

from aura.data.models import (
    STATUS_COMPLETED,
    STATUS_PENDING,
    ChatSession,
    HairCare,
    LifestyleLog,
    Message,
    Nutrition,
    Quote,
    SkinCare,
    Snippet,
    TimeBlock,
)
from aura.ports.storage_port import KeyValueStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

SNIPPETS_KEY = "snippets"
CHATS_KEY = "chats"
QUOTES_KEY = "quotes"
THEME_KEY = "app_theme"
SELECTED_COACH_KEY = "selected_coach_id"
SCHEDULE_PREFIX = "schedule_"
LIFESTYLE_PREFIX = "lifestyle_"

THEMES = ("light", "dark")


def new_id() -> str:
    return uuid.uuid4().hex


def now_ms() -> int:
    return int(time.time() * 1000)


def date_key(prefix: str, day: date | str) -> str:
    """Build a date-qualified key, validating the date."""
    if isinstance(day, str):
        day = date.fromisoformat(day)
    return f"{prefix}{day.isoformat()}"


# ---------------------------------------------------------------------------
# JSON codecs (camelCase on disk, snake_case in Python)
# ---------------------------------------------------------------------------


def block_to_dict(block: TimeBlock) -> dict:
    data: dict[str, Any] = {
        "id": block.id,
        "time": block.time,
        "activity": block.activity,
        "status": block.status,
        "isAiGenerated": block.is_ai_generated,
    }
    if block.category is not None:
        data["category"] = block.category
    if block.description is not None:
        data["description"] = block.description
    return data


def block_from_dict(data: dict) -> TimeBlock:
    status = data.get("status")
    if status is None:
        # Records written before `status` existed only carried a boolean.
        status = STATUS_COMPLETED if data.get("isCompleted") else STATUS_PENDING
    return TimeBlock(
        id=str(data["id"]),
        time=str(data["time"]),
        activity=str(data["activity"]),
        category=data.get("category"),
        status=status,
        description=data.get("description"),
        is_ai_generated=bool(data.get("isAiGenerated", False)),
    )


def message_to_dict(message: Message) -> dict:
    return {"id": message.id, "role": message.role, "content": message.content}


def message_from_dict(data: dict) -> Message:
    return Message(id=str(data["id"]), role=data["role"], content=data["content"])


def session_to_dict(session: ChatSession) -> dict:
    return {
        "id": session.id,
        "coachId": session.coach_id,
        "title": session.title,
        "messages": [message_to_dict(m) for m in session.messages],
        "lastModified": session.last_modified,
        "preview": session.preview,
    }


def session_from_dict(data: dict) -> ChatSession:
    return ChatSession(
        id=str(data["id"]),
        coach_id=data["coachId"],
        title=data.get("title", ""),
        messages=[message_from_dict(m) for m in data.get("messages", [])],
        last_modified=int(data.get("lastModified", 0)),
        preview=data.get("preview", ""),
    )


def snippet_to_dict(snippet: Snippet) -> dict:
    data: dict[str, Any] = {
        "id": snippet.id,
        "content": snippet.content,
        "coachName": snippet.coach_name,
        "date": snippet.date,
    }
    if snippet.tags is not None:
        data["tags"] = list(snippet.tags)
    return data


def snippet_from_dict(data: dict) -> Snippet:
    return Snippet(
        id=str(data["id"]),
        content=data["content"],
        coach_name=data.get("coachName", ""),
        date=int(data.get("date", 0)),
        tags=data.get("tags"),
    )


def quote_to_dict(quote: Quote) -> dict:
    return {
        "id": quote.id,
        "text": quote.text,
        "author": quote.author,
        "isCustom": quote.is_custom,
    }


def quote_from_dict(data: dict) -> Quote:
    return Quote(
        id=str(data["id"]),
        text=data["text"],
        author=data.get("author", ""),
        is_custom=bool(data.get("isCustom", False)),
    )


def lifestyle_to_dict(log: LifestyleLog) -> dict:
    nutrition: dict[str, Any] = {"waterLiters": log.nutrition.water_liters}
    if log.nutrition.calories is not None:
        nutrition["calories"] = log.nutrition.calories
    return {
        "date": log.date,
        "skinCare": {"morning": log.skin_care.morning, "night": log.skin_care.night},
        "nutrition": nutrition,
        "hairCare": {"washDay": log.hair_care.wash_day},
    }


def lifestyle_from_dict(data: dict) -> LifestyleLog:
    skin = data.get("skinCare", {})
    nutrition = data.get("nutrition", {})
    hair = data.get("hairCare", {})
    calories = nutrition.get("calories")
    return LifestyleLog(
        date=data["date"],
        skin_care=SkinCare(
            morning=bool(skin.get("morning", False)),
            night=bool(skin.get("night", False)),
        ),
        nutrition=Nutrition(
            water_liters=float(nutrition.get("waterLiters", 0)),
            calories=int(calories) if calories is not None else None,
        ),
        hair_care=HairCare(wash_day=bool(hair.get("washDay", False))),
    )


# ---------------------------------------------------------------------------
# Base store
# ---------------------------------------------------------------------------


class JsonStore:
    """Shared JSON read/write plumbing over a KeyValueStore."""

    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    async def _read_json(self, key: str) -> Any | None:
        raw = await self._kv.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Corrupt JSON under key '%s', treating as empty: %s", key, exc)
            return None

    async def _read_list(self, key: str, decode: Callable[[dict], T]) -> list[T]:
        data = await self._read_json(key)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning("Expected a list under key '%s', got %s", key, type(data).__name__)
            return []

        items: list[T] = []
        for raw_item in data:
            try:
                items.append(decode(raw_item))
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                logger.warning("Skipping malformed record under '%s': %s", key, exc)
        return items

    async def _write_json(self, key: str, payload: Any) -> None:
        await self._kv.set(key, json.dumps(payload))


# ---------------------------------------------------------------------------
# Snippets
# ---------------------------------------------------------------------------


class SnippetStore(JsonStore):
    """Saved coach advice, newest first."""

    async def list_snippets(self) -> list[Snippet]:
        return await self._read_list(SNIPPETS_KEY, snippet_from_dict)

    async def get_snippet(self, snippet_id: str) -> Snippet | None:
        for snippet in await self.list_snippets():
            if snippet.id == snippet_id:
                return snippet
        return None

    async def save_snippet(
        self, content: str, coach_name: str, tags: list[str] | None = None,
    ) -> Snippet:
        snippet = Snippet(
            id=new_id(), content=content, coach_name=coach_name,
            date=now_ms(), tags=tags,
        )
        async with self._lock(SNIPPETS_KEY):
            existing = await self.list_snippets()
            updated = [snippet, *existing]
            await self._write_json(SNIPPETS_KEY, [snippet_to_dict(s) for s in updated])
        logger.info("Snippet saved: %s from %s", snippet.id, coach_name)
        return snippet

    async def delete_snippet(self, snippet_id: str) -> bool:
        async with self._lock(SNIPPETS_KEY):
            existing = await self.list_snippets()
            updated = [s for s in existing if s.id != snippet_id]
            await self._write_json(SNIPPETS_KEY, [snippet_to_dict(s) for s in updated])
        deleted = len(updated) < len(existing)
        if deleted:
            logger.info("Snippet %s deleted", snippet_id)
        return deleted


# ---------------------------------------------------------------------------
# Chat sessions
# ---------------------------------------------------------------------------


class ChatStore(JsonStore):
    """Conversation history, kept sorted by last_modified descending."""

    async def list_chats(self, coach_id: str | None = None) -> list[ChatSession]:
        chats = await self._read_list(CHATS_KEY, session_from_dict)
        if coach_id is not None:
            chats = [c for c in chats if c.coach_id == coach_id]
        return chats

    async def get_chat(self, session_id: str) -> ChatSession | None:
        for chat in await self.list_chats():
            if chat.id == session_id:
                return chat
        return None

    async def save_chat(self, session: ChatSession) -> None:
        """Replace the session by id, or prepend it if new, then re-sort."""
        async with self._lock(CHATS_KEY):
            chats = await self.list_chats()
            for i, chat in enumerate(chats):
                if chat.id == session.id:
                    chats[i] = session
                    break
            else:
                chats.insert(0, session)

            chats.sort(key=lambda c: c.last_modified, reverse=True)
            await self._write_json(CHATS_KEY, [session_to_dict(c) for c in chats])
        logger.info("Chat %s saved (%d messages)", session.id, len(session.messages))

    async def delete_chat(self, session_id: str) -> bool:
        async with self._lock(CHATS_KEY):
            chats = await self.list_chats()
            updated = [c for c in chats if c.id != session_id]
            await self._write_json(CHATS_KEY, [session_to_dict(c) for c in updated])
        deleted = len(updated) < len(chats)
        if deleted:
            logger.info("Chat %s deleted", session_id)
        return deleted


# ---------------------------------------------------------------------------
# Schedule
# ---------------------------------------------------------------------------


class ScheduleStore(JsonStore):
    """Time blocks per calendar date, one key per date.

    Ordering is the caller's job (see aura.core.planner); this store persists
    lists exactly as given.
    """

    def lock_for(self, day: date | str) -> asyncio.Lock:
        """The lock guarding one date's list, for read-modify-write callers."""
        return self._lock(date_key(SCHEDULE_PREFIX, day))

    async def get_blocks(self, day: date | str) -> list[TimeBlock]:
        return await self._read_list(date_key(SCHEDULE_PREFIX, day), block_from_dict)

    async def save_blocks(self, day: date | str, blocks: list[TimeBlock]) -> None:
        key = date_key(SCHEDULE_PREFIX, day)
        await self._write_json(key, [block_to_dict(b) for b in blocks])
        logger.info("Schedule %s saved (%d blocks)", key, len(blocks))

    async def recent_days(
        self, end_date: date, days: int = 7,
    ) -> list[tuple[str, list[TimeBlock]]]:
        """Return (date, blocks) for end_date and the days before it, newest first."""
        result: list[tuple[str, list[TimeBlock]]] = []
        for offset in range(days):
            day = (end_date - timedelta(days=offset)).isoformat()
            result.append((day, await self.get_blocks(day)))
        return result

    async def scheduled_dates(self) -> list[str]:
        """All dates that have a stored schedule key, ascending."""
        keys = await self._kv.keys(SCHEDULE_PREFIX)
        return [k.removeprefix(SCHEDULE_PREFIX) for k in keys]


# ---------------------------------------------------------------------------
# Lifestyle
# ---------------------------------------------------------------------------


class LifestyleStore(JsonStore):
    """One lifestyle log per date, upserted in place."""

    async def get_log(self, day: date | str) -> LifestyleLog | None:
        key = date_key(LIFESTYLE_PREFIX, day)
        data = await self._read_json(key)
        if not isinstance(data, dict):
            return None
        try:
            return lifestyle_from_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.warning("Malformed lifestyle log under '%s': %s", key, exc)
            return None

    async def get_or_default(self, day: date | str) -> LifestyleLog:
        log = await self.get_log(day)
        if log is None:
            day_str = day if isinstance(day, str) else day.isoformat()
            log = LifestyleLog(date=day_str)
        return log

    async def save_log(self, log: LifestyleLog) -> None:
        key = date_key(LIFESTYLE_PREFIX, log.date)
        async with self._lock(key):
            await self._write_json(key, lifestyle_to_dict(log))
        logger.info("Lifestyle log saved for %s", log.date)


# ---------------------------------------------------------------------------
# Quotes
# ---------------------------------------------------------------------------

SEED_QUOTES: tuple[Quote, ...] = (
    Quote("1", "The only way to do great work is to love what you do.", "Steve Jobs"),
    Quote("2", "Simplicity is the ultimate sophistication.", "Leonardo da Vinci"),
    Quote("3", "Focus on being productive instead of busy.", "Tim Ferriss"),
    Quote("4", "Your time is limited, so don't waste it living someone else's life.", "Steve Jobs"),
    Quote("5", "The best way to predict the future is to wait for it.", "Alan Kay"),
)


class QuoteStore(JsonStore):
    """User-authored quotes, merged with the built-in seeds at read time."""

    async def list_custom_quotes(self) -> list[Quote]:
        return await self._read_list(QUOTES_KEY, quote_from_dict)

    async def list_quotes(self) -> list[Quote]:
        """Seeds followed by stored quotes, one entry per id.

        A stored quote sharing an id with a seed replaces it, keeping the
        seed's position.
        """
        merged: dict[str, Quote] = {}
        for quote in [*SEED_QUOTES, *await self.list_custom_quotes()]:
            merged[quote.id] = quote
        return list(merged.values())

    async def save_quote(self, text: str, author: str = "Me") -> Quote:
        quote = Quote(id=new_id(), text=text, author=author, is_custom=True)
        async with self._lock(QUOTES_KEY):
            existing = await self.list_custom_quotes()
            updated = [quote, *existing]
            await self._write_json(QUOTES_KEY, [quote_to_dict(q) for q in updated])
        logger.info("Quote %s saved", quote.id)
        return quote

    async def update_quote(self, quote_id: str, text: str) -> Quote | None:
        """Change a stored quote's text. Seed quotes are not editable."""
        async with self._lock(QUOTES_KEY):
            existing = await self.list_custom_quotes()
            for i, quote in enumerate(existing):
                if quote.id == quote_id:
                    updated = Quote(quote.id, text, quote.author, quote.is_custom)
                    existing[i] = updated
                    await self._write_json(QUOTES_KEY, [quote_to_dict(q) for q in existing])
                    logger.info("Quote %s updated", quote_id)
                    return updated
        return None

    async def delete_quote(self, quote_id: str) -> bool:
        async with self._lock(QUOTES_KEY):
            existing = await self.list_custom_quotes()
            updated = [q for q in existing if q.id != quote_id]
            await self._write_json(QUOTES_KEY, [quote_to_dict(q) for q in updated])
        deleted = len(updated) < len(existing)
        if deleted:
            logger.info("Quote %s deleted", quote_id)
        return deleted


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------


class PreferencesStore(JsonStore):
    """Small scalar preferences: theme and the coach watching the schedule.

    These keys hold raw strings, not JSON.
    """

    async def get_theme(self) -> str:
        theme = await self._kv.get(THEME_KEY)
        return theme if theme in THEMES else "light"

    async def set_theme(self, theme: str) -> None:
        if theme not in THEMES:
            raise ValueError(f"Unknown theme: {theme!r}")
        await self._kv.set(THEME_KEY, theme)
        logger.info("Theme set to %s", theme)

    async def toggle_theme(self) -> str:
        theme = "dark" if await self.get_theme() == "light" else "light"
        await self.set_theme(theme)
        return theme

    async def get_selected_coach(self) -> str | None:
        return await self._kv.get(SELECTED_COACH_KEY)

    async def set_selected_coach(self, coach_id: str) -> None:
        await self._kv.set(SELECTED_COACH_KEY, coach_id)
        logger.info("Selected coach set to %s", coach_id)
