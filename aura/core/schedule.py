"""
Aura Coach — Schedule arithmetic.

Pure helpers over time-block lists: parse "HH:MM AM - HH:MM PM" ranges,
order blocks by start time, cycle task status and compute the per-day
numbers behind the weekly progress chart.
"""

from __future__ import annotations

import logging
import math
import re
from datetime import date

from aura.data.models import (
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
    STATUS_PENDING,
    DayStats,
    TimeBlock,
)

logger = logging.getLogger(__name__)

_STATUS_CYCLE = {
    STATUS_PENDING: STATUS_IN_PROGRESS,
    STATUS_IN_PROGRESS: STATUS_COMPLETED,
    STATUS_COMPLETED: STATUS_PENDING,
}

_STUDY_MARKERS = ("study", "deep work")

_CLOCK_RE = re.compile(r"^(\d{1,2})(?::(\d{2}))?\s*(AM|PM)?$", re.IGNORECASE)


def clock_to_minutes(text: str) -> int | None:
    """Convert "H:MM", "H:MM AM" or "H:MMPM" to minutes since midnight.

    Returns None if the text is not a clock time.
    """
    match = _CLOCK_RE.match(text.strip())
    if match is None:
        return None
    hours = int(match.group(1))
    minutes = int(match.group(2) or 0)
    modifier = (match.group(3) or "").upper()
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        return None

    if modifier == "PM" and hours < 12:
        hours += 12
    if modifier == "AM" and hours == 12:
        hours = 0
    return hours * 60 + minutes


def parse_start_minutes(time_range: str) -> int:
    """Minutes since midnight of a range's start. Malformed input sorts first (0)."""
    start = (time_range or "").split("-", 1)[0]
    minutes = clock_to_minutes(start)
    return 0 if minutes is None else minutes


def sort_blocks(blocks: list[TimeBlock]) -> list[TimeBlock]:
    return sorted(blocks, key=lambda b: parse_start_minutes(b.time))


def next_status(status: str) -> str:
    """pending -> in-progress -> completed -> pending.

    `skipped` is only ever set by an explicit edit; toggling it restarts the
    cycle at pending.
    """
    return _STATUS_CYCLE.get(status, STATUS_PENDING)


def is_study_block(block: TimeBlock) -> bool:
    category = (block.category or "").lower()
    return any(marker in category for marker in _STUDY_MARKERS)


def block_hours(time_range: str) -> int:
    """Whole-hour length of a range, wrapping past midnight. 0 if malformed."""
    parts = (time_range or "").split("-")
    if len(parts) != 2:
        return 0
    start = clock_to_minutes(parts[0])
    end = clock_to_minutes(parts[1])
    if start is None or end is None:
        return 0
    diff = end // 60 - start // 60
    if diff < 0:
        diff += 24
    return diff


def block_study_hours(block: TimeBlock) -> int:
    if block.status != STATUS_COMPLETED or not is_study_block(block):
        return 0
    return block_hours(block.time)


def completion_percent(blocks: list[TimeBlock]) -> int:
    if not blocks:
        return 0
    completed = sum(1 for b in blocks if b.status == STATUS_COMPLETED)
    # Half-up, so 12.5 reports as 13
    return math.floor(100 * completed / len(blocks) + 0.5)


def summarize_day(day: str, blocks: list[TimeBlock]) -> DayStats:
    return DayStats(
        date=day,
        day_name=date.fromisoformat(day).strftime("%A"),
        completion=completion_percent(blocks),
        study_hours=sum(block_study_hours(b) for b in blocks),
    )
