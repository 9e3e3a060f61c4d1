"""
Aura Coach — AI schedule generation.

Asks the chat-completion model for a daily or weekly plan and parses the
JSON it returns into typed blocks. An empty list always means "generation
failed"; a successful plan is never empty.
"""

from __future__ import annotations

import json
import logging
import re

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from aura.core.llm import complete

logger = logging.getLogger(__name__)

MODE_DAY = "day"
MODE_WEEK = "week"

# ---------------------------------------------------------------------------
# JSON contract
# ---------------------------------------------------------------------------


class GeneratedBlock(BaseModel):
    """One proposed time block.

    JSON example:
    {"time": "06:00 AM - 07:00 AM", "activity": "Morning Routine",
     "description": "Hydrate, meditate, and stretch to wake up the body."}
    """
    time: str
    activity: str
    description: str = ""


class GeneratedDay(BaseModel):
    """One day of a weekly plan, offset from the plan's base date.

    JSON example:
    {"dayOffset": 0, "blocks": [{"time": "...", "activity": "...", "description": "..."}]}
    """
    model_config = ConfigDict(populate_by_name=True)

    day_offset: int = Field(alias="dayOffset", ge=0, le=6)
    blocks: list[GeneratedBlock]


GeneratedPlan = list[GeneratedBlock] | list[GeneratedDay]


# ---------------------------------------------------------------------------
# System prompts
# ---------------------------------------------------------------------------

_DAY_PROMPT = """\
You are an expert productivity architect.
Create a detailed daily schedule (6:00 AM to 10:00 PM) based on the user's goals.
Return ONLY a JSON array of objects with this structure:
[
  {
    "time": "06:00 AM - 07:00 AM",
    "activity": "Morning Routine",
    "description": "Hydrate, meditate, and stretch to wake up the body."
  },
  ...
]
Do not include any markdown formatting, just the raw JSON array.
Ensure the schedule covers the entire day from morning to night.
Use 12-hour format with AM/PM for "time".
"activity" should be concise (2-5 words).
"description" should explain the "why" or "how" (10-15 words).
"""

_WEEK_PROMPT = """\
You are an expert productivity architect.
Create a 7-day weekly plan (Day 1 to Day 7) based on the user's goals.
IMPORTANT: Vary the schedule across the week. Do NOT repeat the same day 7 times. \
Adapt to the rhythm of a week (e.g., Deep work on Mon-Wed, meetings/admin on Thu, \
reflection/creative on Fri, Rest on Sat/Sun).
Return ONLY a JSON array of objects, where each object represents a day containing an array of time blocks:
[
  {
    "dayOffset": 0,
    "blocks": [
      { "time": "09:00 AM - 10:00 AM", "activity": "...", "description": "..." },
      ...
    ]
  },
  ...
]
Do not include any markdown formatting.
Cover 7 days, with dayOffset 0 through 6.
Use 12-hour format with AM/PM.
Activities should be concise (2-5 words).
Descriptions must explain the specific focus for that day/time (10-15 words).
"""

_PROMPTS = {MODE_DAY: _DAY_PROMPT, MODE_WEEK: _WEEK_PROMPT}

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Response cleaning
# ---------------------------------------------------------------------------

def _clean_llm_response(raw_text: str) -> str:
    """Remove markdown code fences wherever the model put them."""
    return _FENCE_RE.sub("", raw_text).strip()


def _parse_plan(mode: str, data: object) -> GeneratedPlan:
    # Day mode tolerates a lone object instead of an array
    if mode == MODE_DAY and isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array, got {type(data).__name__}")

    if mode == MODE_DAY:
        return [GeneratedBlock.model_validate(item) for item in data]

    days = [GeneratedDay.model_validate(item) for item in data]
    return sorted(days, key=lambda d: d.day_offset)


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


async def generate_schedule(
    prompt: str, mode: str = MODE_DAY, context_date: str | None = None,
) -> GeneratedPlan:
    """Generate a plan for `prompt`.

    Day mode returns GeneratedBlock items; week mode returns GeneratedDay
    items ordered by offset. Returns [] on any failure.
    """
    if mode not in _PROMPTS:
        logger.error("Unknown schedule generation mode: %r", mode)
        return []
    if not prompt.strip():
        return []

    logger.info("Generating %s schedule", mode)
    raw_text = ""
    try:
        raw_text = await complete(
            system=_PROMPTS[mode],
            user_message=f"Context Date: {context_date or 'Today'}\nUser Goal: {prompt}",
        )
        raw_text = _clean_llm_response(raw_text)
        logger.debug("LLM raw schedule: %s", raw_text)

        plan = _parse_plan(mode, json.loads(raw_text))
        if not plan:
            logger.warning("Model returned an empty %s plan", mode)
        return plan

    except json.JSONDecodeError as exc:
        logger.error("Failed to parse schedule as JSON: %s — raw: '%s'", exc, raw_text[:200])
        return []
    except ValidationError as exc:
        logger.error("Schedule JSON did not match the expected shape: %s", exc)
        return []
    except Exception as exc:
        logger.error("AI schedule generation failed: %s", exc)
        return []
