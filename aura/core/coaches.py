"""
Aura Coach — Persona catalog.

Static configuration: each coach is a fixed system prompt plus display
metadata. Chat sessions refer to a coach by id.
"""

from __future__ import annotations

from dataclasses import dataclass

from aura.data.models import TimeBlock


@dataclass(frozen=True)
class Coach:
    id: str
    name: str
    role: str
    description: str
    system_prompt: str
    is_premium: bool
    color: str
    schedule_aware: bool = False      # gets today's schedule injected into its prompt


COACHES: tuple[Coach, ...] = (
    Coach(
        id="marcus",
        name="Marcus",
        role="Productivity Architect",
        description="Specializes in building minimalist systems that stick.",
        system_prompt=(
            "You are Marcus, a Productivity Architect. Your mission is to help the user "
            "build minimalist systems. Your advice is practical, concise, and focused on "
            "essentialism. Avoid fluff."
        ),
        is_premium=False,
        color="#818CF8",
        schedule_aware=True,
    ),
    Coach(
        id="elara",
        name="Elara",
        role="Mindfulness Guide",
        description="Finding calm in the digital noise.",
        system_prompt=(
            "You are Elara, a Mindfulness Guide. Your mission is to help the user stay "
            "grounded and focused in a world of distractions. Your tone is calm, "
            "supportive, and wise."
        ),
        is_premium=False,
        color="#F472B6",
    ),
    Coach(
        id="julian",
        name="Julian",
        role="Creative Director",
        description="Unlock creative flow through constraint.",
        system_prompt=(
            "You are Julian, a Creative Director. You believe that constraints breed "
            "creativity. You help users overcome blocks by simplifying their approach."
        ),
        is_premium=True,
        color="#C084FC",
    ),
)


def get_coach(coach_id: str) -> Coach | None:
    for coach in COACHES:
        if coach.id == coach_id:
            return coach
    return None


def greeting(coach: Coach) -> str:
    return f"Hello. I am {coach.name}. {coach.role}. How can I help you find clarity today?"


def _format_block(block: TimeBlock) -> str:
    line = f"- {block.time}: {block.activity} ({block.status})"
    if block.description:
        line += f" [{block.description}]"
    return line


def build_system_prompt(coach: Coach, today_blocks: list[TimeBlock], today: str) -> str:
    """The coach's prompt, plus today's schedule for schedule-aware coaches."""
    prompt = coach.system_prompt
    if not coach.schedule_aware:
        return prompt

    if today_blocks:
        schedule_text = "\n".join(_format_block(b) for b in today_blocks)
        prompt += (
            f"\n\nHere is the user's schedule for today ({today}):\n{schedule_text}"
            "\n\nUse this context to give specific time-management advice."
        )
    else:
        prompt += (
            f"\n\nThe user has no tasks scheduled for today ({today}). "
            "Encourage them to plan their day."
        )
    return prompt
