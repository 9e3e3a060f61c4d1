"""
Aura Coach — Data Models.

Plain records persisted as JSON blobs in the key-value store. Schedule and
lifestyle records are owned by a calendar date (YYYY-MM-DD); everything else
lives in a single collection per kind.
"""

from __future__ import annotations

from dataclasses import dataclass, field

STATUS_PENDING = "pending"
STATUS_IN_PROGRESS = "in-progress"
STATUS_COMPLETED = "completed"
STATUS_SKIPPED = "skipped"

BLOCK_STATUSES = (STATUS_PENDING, STATUS_IN_PROGRESS, STATUS_COMPLETED, STATUS_SKIPPED)

PLAN_FREE = "free"
PLAN_PRO = "pro"


@dataclass
class TimeBlock:
    """A scheduled task occupying a labeled time range within one day."""

    id: str
    time: str                          # e.g. "09:00 AM - 10:00 AM"
    activity: str
    category: str | None = None        # "Work", "Study", "AI Plan", ...
    status: str = STATUS_PENDING
    description: str | None = None
    is_ai_generated: bool = False


@dataclass
class Message:
    id: str
    role: str      # "user" | "assistant" | "system"
    content: str


@dataclass
class ChatSession:
    """One persisted conversation thread between the user and a coach."""

    id: str
    coach_id: str
    title: str
    messages: list[Message] = field(default_factory=list)
    last_modified: int = 0             # epoch milliseconds
    preview: str = ""


@dataclass
class SkinCare:
    morning: bool = False
    night: bool = False


@dataclass
class Nutrition:
    water_liters: float = 0.0
    calories: int | None = None


@dataclass
class HairCare:
    wash_day: bool = False


@dataclass
class LifestyleLog:
    """Daily lifestyle check-in. At most one per date."""

    date: str
    skin_care: SkinCare = field(default_factory=SkinCare)
    nutrition: Nutrition = field(default_factory=Nutrition)
    hair_care: HairCare = field(default_factory=HairCare)


@dataclass
class Quote:
    id: str
    text: str
    author: str
    is_custom: bool = False


@dataclass
class User:
    """An account as exposed to callers. The password never leaves the auth store."""

    id: str
    email: str
    name: str
    plan: str = PLAN_FREE


@dataclass
class Snippet:
    """A saved piece of coach advice."""

    id: str
    content: str
    coach_name: str
    date: int                          # epoch milliseconds
    tags: list[str] | None = None


@dataclass
class DayStats:
    date: str
    day_name: str
    completion: int                    # 0-100
    study_hours: int
