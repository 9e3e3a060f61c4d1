"""
Aura Coach — Schedule manager.

All mutations of a date's time blocks go through here. Every mutating call
reads, changes and writes the date's list while holding that date's lock,
and the written list is always sorted by start time.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, timedelta

from aura.core.schedule import next_status, sort_blocks, summarize_day
from aura.core.schedule_generator import MODE_DAY, MODE_WEEK, GeneratedBlock, GeneratedDay
from aura.data.models import STATUS_PENDING, DayStats, TimeBlock
from aura.data.stores import ScheduleStore, new_id

logger = logging.getLogger(__name__)

AI_PLAN_CATEGORY = "AI Plan"
DEFAULT_CATEGORY = "Work"


def _as_date(day: date | str) -> date:
    return day if isinstance(day, date) else date.fromisoformat(day)


def _ai_blocks(generated: list[GeneratedBlock]) -> list[TimeBlock]:
    return sort_blocks([
        TimeBlock(
            id=new_id(),
            time=g.time,
            activity=g.activity,
            description=g.description,
            category=AI_PLAN_CATEGORY,
            status=STATUS_PENDING,
            is_ai_generated=True,
        )
        for g in generated
    ])


class ScheduleManager:
    """Day and week operations over a ScheduleStore."""

    def __init__(self, store: ScheduleStore) -> None:
        self._store = store

    async def get_day(self, day: date | str) -> list[TimeBlock]:
        return await self._store.get_blocks(day)

    async def upsert_block(self, day: date | str, block: TimeBlock) -> list[TimeBlock]:
        """Replace the block with the same id, or add it. Returns the new list."""
        if not block.activity.strip() or not block.time.strip():
            raise ValueError("A block needs both an activity and a time")
        if not block.id:
            block = replace(block, id=new_id())
        if block.category is None:
            block = replace(block, category=DEFAULT_CATEGORY)

        async with self._store.lock_for(day):
            blocks = [b for b in await self._store.get_blocks(day) if b.id != block.id]
            updated = sort_blocks([*blocks, block])
            await self._store.save_blocks(day, updated)

        logger.info("Block %s saved on %s", block.id, day)
        return updated

    async def delete_block(self, day: date | str, block_id: str) -> bool:
        async with self._store.lock_for(day):
            blocks = await self._store.get_blocks(day)
            remaining = [b for b in blocks if b.id != block_id]
            if len(remaining) == len(blocks):
                return False
            await self._store.save_blocks(day, sort_blocks(remaining))
        logger.info("Block %s deleted from %s", block_id, day)
        return True

    async def toggle_status(self, day: date | str, block_id: str) -> TimeBlock | None:
        """Advance a block through pending -> in-progress -> completed -> pending."""
        async with self._store.lock_for(day):
            blocks = await self._store.get_blocks(day)
            toggled = None
            for i, b in enumerate(blocks):
                if b.id == block_id:
                    toggled = blocks[i] = replace(b, status=next_status(b.status))
                    break
            if toggled is None:
                logger.warning("Toggle ignored: block %s not found on %s", block_id, day)
                return None
            await self._store.save_blocks(day, sort_blocks(blocks))

        logger.info("Block %s on %s is now %s", block_id, day, toggled.status)
        return toggled

    async def clear_day(self, day: date | str) -> None:
        async with self._store.lock_for(day):
            await self._store.save_blocks(day, [])
        logger.info("Cleared schedule for %s", day)

    async def clear_week(self, start: date | str) -> None:
        """Clear the start date and the six days after it.

        Only dates that already have a stored schedule are touched.
        """
        first = _as_date(start).isoformat()
        last = (_as_date(start) + timedelta(days=6)).isoformat()
        for day in await self._store.scheduled_dates():
            if first <= day <= last:
                await self.clear_day(day)

    async def accept_generated_plan(
        self,
        mode: str,
        payload: list[GeneratedBlock] | list[GeneratedDay],
        base_date: date | str,
    ) -> dict[str, list[TimeBlock]]:
        """Write a generated plan, fully replacing each affected date.

        Existing blocks on those dates are discarded, not merged. Returns the
        written lists keyed by ISO date.
        """
        base = _as_date(base_date)
        written: dict[str, list[TimeBlock]] = {}

        if mode == MODE_DAY:
            targets = [(base, payload)]
        elif mode == MODE_WEEK:
            targets = [
                (base + timedelta(days=d.day_offset), d.blocks) for d in payload
            ]
        else:
            raise ValueError(f"Unknown plan mode: {mode!r}")

        for day, generated in targets:
            blocks = _ai_blocks(generated)
            async with self._store.lock_for(day):
                await self._store.save_blocks(day, blocks)
            written[day.isoformat()] = blocks

        logger.info("Accepted %s plan from %s covering %d day(s)", mode, base, len(written))
        return written

    async def weekly_stats(self, today: date | None = None) -> list[DayStats]:
        """Stats for the last 7 days including today, oldest first."""
        today = today or date.today()
        newest_first = await self._store.recent_days(today, days=7)
        return [summarize_day(day, blocks) for day, blocks in reversed(newest_first)]
