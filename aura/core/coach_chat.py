"""
Aura Coach — Coach replies.

`chat_reply()` never raises: every failure becomes display-ready text.
Internally each outcome is a CoachReply, so callers that care can tell a
real answer from a degraded one.

Outcome table:
    no API key            -> configuration message, no request sent
    network error         -> local fallback reply
    body is not JSON      -> "[System Error]" message with the status code
    401                   -> invalid-key message
    any other non-2xx     -> local fallback reply
    2xx without choices   -> message embedding the raw payload
    2xx with choices      -> choices[0].message.content, trimmed
"""

from __future__ import annotations

import json
import logging
import random
from dataclasses import dataclass

from aura.core.llm import api_key_configured, post_chat_completion

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = (
    "[System]: OpenAI API Key is missing. Set OPENAI_API_KEY in .env to enable AI."
)
INVALID_KEY_MESSAGE = (
    "[Config Error]: Invalid OpenAI API Key. Please check OPENAI_API_KEY in .env."
)

FALLBACK_REPLIES = (
    "That is a profound perspective. Tell me more about how that impacts your daily flow.",
    "I see. To achieve clarity here, we must strip away the non-essential. What is the core blocker?",
    "Interesting. Let's reframe this constraint as an opportunity. How can we turn this into a strength?",
    "I am listening. In the context of your goals, how does this align with your long-term vision?",
)

REASON_MISSING_KEY = "missing_key"
REASON_NETWORK = "network_error"
REASON_INVALID_BODY = "invalid_body"
REASON_INVALID_KEY = "invalid_key"
REASON_HTTP_STATUS = "http_status"
REASON_NO_CHOICES = "no_choices"


@dataclass
class CoachReply:
    text: str
    degraded: bool = False
    reason: str | None = None
    status_code: int | None = None


def generate_local_fallback(user_input: str) -> str:
    """A generic coaching line used when the remote model is unreachable."""
    return random.choice(FALLBACK_REPLIES)


def _degraded(text: str, reason: str, status_code: int | None = None) -> CoachReply:
    return CoachReply(text=text, degraded=True, reason=reason, status_code=status_code)


async def request_reply(messages: list[dict]) -> CoachReply:
    """Ask the remote model for the next assistant turn."""
    from aura.config import settings

    last_message = messages[-1]["content"] if messages else ""

    if not api_key_configured(settings.OPENAI_API_KEY):
        logger.error("Chat request skipped: OPENAI_API_KEY is missing")
        return _degraded(MISSING_KEY_MESSAGE, REASON_MISSING_KEY)

    try:
        response = await post_chat_completion(
            [{"role": m["role"], "content": m["content"]} for m in messages],
            temperature=settings.CHAT_TEMPERATURE,
            max_tokens=settings.CHAT_MAX_TOKENS,
        )
    except Exception as exc:
        logger.warning("Chat endpoint unreachable, using local fallback: %s", exc)
        return _degraded(generate_local_fallback(last_message), REASON_NETWORK)

    status = response.status_code
    try:
        data = response.json()
    except ValueError:
        logger.error("Chat endpoint returned non-JSON (status %d): %s", status, response.text[:100])
        return _degraded(
            f"[System Error]: OpenAI API returned invalid format. Status: {status}.",
            REASON_INVALID_BODY,
            status,
        )

    if not response.is_success:
        logger.warning("Chat endpoint returned status %d", status)
        if status == 401:
            return _degraded(INVALID_KEY_MESSAGE, REASON_INVALID_KEY, status)
        return _degraded(generate_local_fallback(last_message), REASON_HTTP_STATUS, status)

    choices = data.get("choices") if isinstance(data, dict) else None
    if choices:
        try:
            return CoachReply(text=choices[0]["message"]["content"].strip(), status_code=status)
        except (KeyError, TypeError, AttributeError) as exc:
            logger.error("Malformed choice in chat response: %s", exc)

    return _degraded(
        "[System]: API returned unexpected format. " + json.dumps(data),
        REASON_NO_CHOICES,
        status,
    )


async def chat_reply(messages: list[dict]) -> str:
    """Return display-ready reply text. Never raises."""
    reply = await request_reply(messages)
    if reply.degraded:
        logger.info("Degraded coach reply (%s)", reply.reason)
    return reply.text
