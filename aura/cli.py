"""
Aura Coach — Terminal front end.

A minimal text UI over AuraApp: chat with a coach, generate and accept a
plan, view today's blocks, weekly stats and quotes.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import date

from aura.app import AuraApp, build_app
from aura.core.chat_service import PremiumRequired
from aura.core.coaches import COACHES
from aura.core.schedule_generator import MODE_DAY, MODE_WEEK, generate_schedule

logger = logging.getLogger(__name__)


async def _chat(app: AuraApp, coach_id: str, session_id: str | None) -> None:
    try:
        session = await app.chat.open_session(coach_id, session_id)
    except PremiumRequired as exc:
        print(f"🔒 {exc}")
        return

    for message in session.messages:
        print(f"{message.role}> {message.content}")

    while True:
        try:
            text = input("you> ").strip()
        except EOFError:
            break
        if text in ("", "/quit", "/exit"):
            break
        try:
            reply = await app.chat.send_message(session, text)
        except PremiumRequired as exc:
            print(f"🔒 {exc}")
            break
        print(f"{coach_id}> {reply.content}")


async def _plan(app: AuraApp, goal: str, mode: str, day: str) -> None:
    plan = await generate_schedule(goal, mode=mode, context_date=day)
    if not plan:
        print("Could not generate a schedule. Please try again.")
        return

    written = await app.schedule.accept_generated_plan(mode, plan, day)
    for plan_day, blocks in written.items():
        print(f"\n{plan_day}")
        for block in blocks:
            print(f"  {block.time:<22} {block.activity}")


async def _today(app: AuraApp, day: str) -> None:
    blocks = await app.schedule.get_day(day)
    if not blocks:
        print(f"No tasks scheduled for {day}.")
    for block in blocks:
        print(f"  [{block.status:<11}] {block.time:<22} {block.activity}")


async def _stats(app: AuraApp) -> None:
    for stats in await app.schedule.weekly_stats():
        print(f"  {stats.day_name:<10} {stats.completion:>3}%  {stats.study_hours}h study")


async def _quotes(app: AuraApp) -> None:
    for quote in await app.quotes.list_quotes():
        print(f"  “{quote.text}” — {quote.author}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="aura", description="Aura personal coach")
    sub = parser.add_subparsers(dest="command", required=True)

    chat = sub.add_parser("chat", help="talk to a coach")
    chat.add_argument("coach", choices=[c.id for c in COACHES])
    chat.add_argument("--session", default=None, help="resume a saved session id")

    plan = sub.add_parser("plan", help="generate and accept an AI schedule")
    plan.add_argument("goal")
    plan.add_argument("--mode", choices=[MODE_DAY, MODE_WEEK], default=MODE_DAY)
    plan.add_argument("--date", default=date.today().isoformat())

    today = sub.add_parser("today", help="show a day's schedule")
    today.add_argument("--date", default=date.today().isoformat())

    sub.add_parser("stats", help="weekly completion and study hours")
    sub.add_parser("quotes", help="list quotes")
    return parser


async def run(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    app = build_app()
    await app.load()

    if args.command == "chat":
        await _chat(app, args.coach, args.session)
    elif args.command == "plan":
        await _plan(app, args.goal, args.mode, args.date)
    elif args.command == "today":
        await _today(app, args.date)
    elif args.command == "stats":
        await _stats(app)
    elif args.command == "quotes":
        await _quotes(app)


def main(argv: list[str] | None = None) -> None:
    asyncio.run(run(argv))
