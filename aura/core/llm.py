"""
Aura Coach — Chat-completion transport.

Thin httpx wrapper around an OpenAI-compatible /chat/completions endpoint.
Higher layers decide how to degrade: coach_chat turns every failure into
display text, schedule_generator turns it into an empty plan.
"""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)

_PLACEHOLDER_MARKERS = ("YOUR_",)


class LLMError(Exception):
    """Raised by complete() when the endpoint gives no usable content."""


def api_key_configured(api_key: str) -> bool:
    """False for an empty key or an unfilled template value."""
    if not api_key or not api_key.strip():
        return False
    if api_key.startswith("your-"):
        return False
    return not any(marker in api_key for marker in _PLACEHOLDER_MARKERS)


def _settings():
    from aura.config import settings
    return settings


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


async def post_chat_completion(
    messages: list[dict],
    temperature: float,
    max_tokens: int | None = None,
) -> httpx.Response:
    """POST a chat-completion request and return the raw response.

    Raises httpx.HTTPError on transport failures; HTTP error statuses are
    returned, not raised.
    """
    settings = _settings()
    body: dict = {
        "model": settings.OPENAI_MODEL,
        "messages": messages,
        "temperature": temperature,
    }
    if max_tokens is not None:
        body["max_tokens"] = max_tokens

    logger.debug("POST %s (%d messages)", settings.OPENAI_API_URL, len(messages))
    async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as client:
        return await client.post(
            settings.OPENAI_API_URL,
            json=body,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {settings.OPENAI_API_KEY}",
            },
        )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def complete(system: str, user_message: str, temperature: float | None = None) -> str:
    """Send a system + user prompt and return the first choice's content.

    Raises on missing key, transport errors, error statuses and malformed
    payloads. Callers should handle exceptions.
    """
    settings = _settings()
    if not api_key_configured(settings.OPENAI_API_KEY):
        raise LLMError("OPENAI_API_KEY is not configured")

    response = await post_chat_completion(
        [
            {"role": "system", "content": system},
            {"role": "user", "content": user_message},
        ],
        temperature=settings.CHAT_TEMPERATURE if temperature is None else temperature,
    )
    response.raise_for_status()
    data = response.json()

    choices = data.get("choices") if isinstance(data, dict) else None
    if not choices:
        raise LLMError(f"Response had no choices: {data!r}")
    return choices[0]["message"]["content"]
