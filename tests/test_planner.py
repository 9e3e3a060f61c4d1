"""Tests for aura.core.planner — ScheduleManager."""

import asyncio
from datetime import date, timedelta

import pytest

from aura.adapters.memory_store import MemoryKeyValueStore
from aura.core.planner import ScheduleManager
from aura.core.schedule import parse_start_minutes
from aura.core.schedule_generator import GeneratedBlock, GeneratedDay
from aura.data.models import TimeBlock
from aura.data.stores import ScheduleStore

DAY = "2026-10-19"


def _block(block_id, time, activity="Task", status="pending", category="Work"):
    return TimeBlock(id=block_id, time=time, activity=activity, status=status, category=category)


def _assert_sorted(blocks):
    starts = [parse_start_minutes(b.time) for b in blocks]
    assert starts == sorted(starts)


class TestUpsertBlock:
    @pytest.mark.asyncio
    async def test_inserts_keep_start_time_order(self, planner):
        await planner.upsert_block(DAY, _block("pm", "02:00 PM - 03:00 PM"))
        await planner.upsert_block(DAY, _block("am", "09:00 AM - 10:00 AM"))

        blocks = await planner.get_day(DAY)
        assert [b.id for b in blocks] == ["am", "pm"]

    @pytest.mark.asyncio
    async def test_sorted_after_every_call(self, planner):
        times = [
            "06:00 PM - 07:00 PM", "07:00 AM - 08:00 AM", "12:00 PM - 01:00 PM",
            "12:00 AM - 01:00 AM", "09:30 AM - 10:00 AM",
        ]
        for i, t in enumerate(times):
            await planner.upsert_block(DAY, _block(f"b{i}", t))
            _assert_sorted(await planner.get_day(DAY))

    @pytest.mark.asyncio
    async def test_same_id_replaces_and_resorts(self, planner):
        await planner.upsert_block(DAY, _block("a", "08:00 AM - 09:00 AM"))
        await planner.upsert_block(DAY, _block("b", "10:00 AM - 11:00 AM"))
        await planner.upsert_block(DAY, _block("a", "11:00 AM - 12:00 PM", activity="Moved"))

        blocks = await planner.get_day(DAY)
        assert [b.id for b in blocks] == ["b", "a"]
        assert blocks[1].activity == "Moved"
        assert len({b.id for b in blocks}) == len(blocks)

    @pytest.mark.asyncio
    async def test_missing_id_and_category_are_filled(self, planner):
        blocks = await planner.upsert_block(
            DAY, TimeBlock(id="", time="09:00 - 10:00", activity="Email", category=None),
        )
        assert blocks[0].id
        assert blocks[0].category == "Work"

    @pytest.mark.asyncio
    async def test_empty_activity_rejected(self, planner):
        with pytest.raises(ValueError):
            await planner.upsert_block(DAY, _block("x", "09:00 - 10:00", activity="  "))

    @pytest.mark.asyncio
    async def test_dates_are_independent(self, planner):
        await planner.upsert_block(DAY, _block("a", "09:00 AM - 10:00 AM"))
        assert await planner.get_day("2026-10-20") == []

    @pytest.mark.asyncio
    async def test_concurrent_upserts_do_not_lose_updates(self):
        class YieldingStore(MemoryKeyValueStore):
            async def get(self, key):
                value = await super().get(key)
                await asyncio.sleep(0)
                return value

        manager = ScheduleManager(ScheduleStore(YieldingStore()))
        await asyncio.gather(
            manager.upsert_block(DAY, _block("first", "09:00 AM - 10:00 AM")),
            manager.upsert_block(DAY, _block("second", "08:00 AM - 09:00 AM")),
        )
        blocks = await manager.get_day(DAY)
        assert [b.id for b in blocks] == ["second", "first"]


class TestToggleAndDelete:
    @pytest.mark.asyncio
    async def test_toggle_three_times_returns_to_pending(self, planner):
        await planner.upsert_block(DAY, _block("a", "09:00 AM - 10:00 AM"))

        seen = []
        for _ in range(3):
            toggled = await planner.toggle_status(DAY, "a")
            seen.append(toggled.status)

        assert seen == ["in-progress", "completed", "pending"]
        assert (await planner.get_day(DAY))[0].status == "pending"

    @pytest.mark.asyncio
    async def test_toggle_skipped_goes_to_pending(self, planner):
        await planner.upsert_block(DAY, _block("a", "09:00 AM - 10:00 AM", status="skipped"))
        toggled = await planner.toggle_status(DAY, "a")
        assert toggled.status == "pending"

    @pytest.mark.asyncio
    async def test_toggle_unknown_id(self, planner):
        assert await planner.toggle_status(DAY, "ghost") is None

    @pytest.mark.asyncio
    async def test_delete_block(self, planner):
        await planner.upsert_block(DAY, _block("a", "09:00 AM - 10:00 AM"))
        await planner.upsert_block(DAY, _block("b", "10:00 AM - 11:00 AM"))
        assert await planner.delete_block(DAY, "a") is True
        assert [b.id for b in await planner.get_day(DAY)] == ["b"]

    @pytest.mark.asyncio
    async def test_delete_missing_returns_false(self, planner):
        assert await planner.delete_block(DAY, "ghost") is False


class TestClear:
    @pytest.mark.asyncio
    async def test_clear_day(self, planner):
        await planner.upsert_block(DAY, _block("a", "09:00 AM - 10:00 AM"))
        await planner.clear_day(DAY)
        assert await planner.get_day(DAY) == []

    @pytest.mark.asyncio
    async def test_clear_week_covers_seven_days(self, planner):
        start = date(2026, 10, 19)
        for offset in range(8):
            day = (start + timedelta(days=offset)).isoformat()
            await planner.upsert_block(day, _block(f"b{offset}", "09:00 AM - 10:00 AM"))

        await planner.clear_week(start)

        for offset in range(7):
            assert await planner.get_day(start + timedelta(days=offset)) == []
        assert len(await planner.get_day(start + timedelta(days=7))) == 1

    @pytest.mark.asyncio
    async def test_clear_week_leaves_unscheduled_days_unwritten(self, kv, planner):
        await planner.upsert_block("2026-10-20", _block("a", "09:00 AM - 10:00 AM"))

        await planner.clear_week("2026-10-19")

        assert await kv.keys("schedule_") == ["schedule_2026-10-20"]
        assert await planner.get_day("2026-10-20") == []


class TestAcceptGeneratedPlan:
    @pytest.mark.asyncio
    async def test_day_plan_replaces_every_existing_block(self, planner):
        await planner.upsert_block(DAY, _block("old-1", "07:00 AM - 08:00 AM"))
        await planner.upsert_block(DAY, _block("old-2", "08:00 PM - 09:00 PM"))

        plan = [
            GeneratedBlock(time="01:00 PM - 02:00 PM", activity="Lunch", description="Eat"),
            GeneratedBlock(time="06:00 AM - 07:00 AM", activity="Wake", description="Stretch"),
        ]
        written = await planner.accept_generated_plan("day", plan, DAY)

        blocks = await planner.get_day(DAY)
        assert written[DAY] == blocks
        assert {b.id for b in blocks}.isdisjoint({"old-1", "old-2"})
        assert [b.activity for b in blocks] == ["Wake", "Lunch"]
        for b in blocks:
            assert b.category == "AI Plan"
            assert b.status == "pending"
            assert b.is_ai_generated is True
        assert len({b.id for b in blocks}) == 2

    @pytest.mark.asyncio
    async def test_week_plan_writes_each_offset(self, planner):
        await planner.upsert_block("2026-10-21", _block("keep-me-not", "05:00 AM - 06:00 AM"))

        plan = [
            GeneratedDay(
                dayOffset=offset,
                blocks=[GeneratedBlock(time="09:00 AM - 10:00 AM", activity=f"Day {offset}")],
            )
            for offset in range(7)
        ]
        written = await planner.accept_generated_plan("week", plan, DAY)

        assert sorted(written) == [
            (date(2026, 10, 19) + timedelta(days=i)).isoformat() for i in range(7)
        ]
        wednesday = await planner.get_day("2026-10-21")
        assert [b.activity for b in wednesday] == ["Day 2"]

    @pytest.mark.asyncio
    async def test_unknown_mode_raises(self, planner):
        with pytest.raises(ValueError):
            await planner.accept_generated_plan("month", [], DAY)


class TestWeeklyStats:
    @pytest.mark.asyncio
    async def test_no_tasks_is_zero_not_error(self, planner):
        stats = await planner.weekly_stats(today=date(2026, 10, 19))
        assert len(stats) == 7
        assert all(s.completion == 0 and s.study_hours == 0 for s in stats)

    @pytest.mark.asyncio
    async def test_oldest_to_newest(self, planner):
        stats = await planner.weekly_stats(today=date(2026, 10, 19))
        assert stats[0].date == "2026-10-13"
        assert stats[-1].date == "2026-10-19"
        assert stats[-1].day_name == "Monday"

    @pytest.mark.asyncio
    async def test_completion_and_study_hours(self, planner):
        await planner.upsert_block(
            DAY, _block("s", "09:00 AM - 11:00 AM", status="completed", category="Study"),
        )
        await planner.upsert_block(
            DAY, _block("d", "01:00 PM - 04:00 PM", status="completed", category="Deep Work"),
        )
        await planner.upsert_block(DAY, _block("w", "05:00 PM - 06:00 PM", category="Study"))
        await planner.upsert_block(
            "2026-10-18", _block("x", "09:00 AM - 10:00 AM", status="completed"),
        )

        stats = await planner.weekly_stats(today=date(2026, 10, 19))
        today = stats[-1]
        assert today.completion == 67
        assert today.study_hours == 5
        assert stats[-2].completion == 100
        assert stats[-2].study_hours == 0

    @pytest.mark.asyncio
    async def test_excludes_days_outside_window(self, planner):
        await planner.upsert_block(
            "2026-10-12", _block("old", "09:00 AM - 10:00 AM", status="completed"),
        )
        stats = await planner.weekly_stats(today=date(2026, 10, 19))
        assert all(s.completion == 0 for s in stats)
