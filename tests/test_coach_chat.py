"""Tests for aura.core.coach_chat — every failure path becomes reply text."""

import httpx
import pytest
from unittest.mock import AsyncMock, patch

from aura.config import settings
from aura.core.coach_chat import (
    FALLBACK_REPLIES,
    INVALID_KEY_MESSAGE,
    MISSING_KEY_MESSAGE,
    chat_reply,
    request_reply,
)
from aura.core.llm import api_key_configured

MESSAGES = [
    {"role": "system", "content": "You are Marcus."},
    {"role": "user", "content": "How do I focus?"},
]


def _post_returning(response):
    return patch(
        "aura.core.coach_chat.post_chat_completion",
        new_callable=AsyncMock,
        return_value=response,
    )


class TestApiKeyConfigured:
    def test_real_key(self):
        assert api_key_configured("sk-abc123")

    def test_placeholders(self):
        assert not api_key_configured("")
        assert not api_key_configured("   ")
        assert not api_key_configured("your-openai-key")
        assert not api_key_configured("sk-YOUR_KEY_HERE")


class TestChatReply:
    @pytest.mark.asyncio
    async def test_success_is_trimmed(self):
        body = {"choices": [{"message": {"role": "assistant", "content": "  Do one thing.  \n"}}]}
        with _post_returning(httpx.Response(200, json=body)) as mock_post:
            text = await chat_reply(MESSAGES)

        assert text == "Do one thing."
        sent = mock_post.call_args.args[0]
        assert sent == MESSAGES

    @pytest.mark.asyncio
    async def test_missing_key_sends_nothing(self):
        with patch.object(settings, "OPENAI_API_KEY", ""), \
             patch("aura.core.coach_chat.post_chat_completion", new_callable=AsyncMock) as mock_post:
            text = await chat_reply(MESSAGES)

        assert text == MISSING_KEY_MESSAGE
        mock_post.assert_not_called()

    @pytest.mark.asyncio
    async def test_network_error_uses_local_fallback(self):
        with patch(
            "aura.core.coach_chat.post_chat_completion",
            new_callable=AsyncMock,
            side_effect=httpx.ConnectError("connection refused"),
        ):
            reply = await request_reply(MESSAGES)

        assert reply.text in FALLBACK_REPLIES
        assert reply.degraded is True
        assert reply.reason == "network_error"

    @pytest.mark.asyncio
    async def test_non_json_body_reports_status(self):
        with _post_returning(httpx.Response(502, text="<html>Bad Gateway</html>")):
            text = await chat_reply(MESSAGES)

        assert text == "[System Error]: OpenAI API returned invalid format. Status: 502."

    @pytest.mark.asyncio
    async def test_unauthorized(self):
        body = {"error": {"message": "Incorrect API key provided"}}
        with _post_returning(httpx.Response(401, json=body)):
            reply = await request_reply(MESSAGES)

        assert reply.text == INVALID_KEY_MESSAGE
        assert reply.status_code == 401

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [429, 500])
    async def test_other_error_status_uses_fallback(self, status):
        with _post_returning(httpx.Response(status, json={"error": {"message": "busy"}})):
            reply = await request_reply(MESSAGES)

        assert reply.text in FALLBACK_REPLIES
        assert reply.reason == "http_status"

    @pytest.mark.asyncio
    async def test_no_choices_embeds_payload(self):
        with _post_returning(httpx.Response(200, json={"choices": []})):
            text = await chat_reply(MESSAGES)

        assert text.startswith("[System]: API returned unexpected format. ")
        assert '"choices": []' in text

    @pytest.mark.asyncio
    async def test_never_raises_on_unexpected_error(self):
        with patch(
            "aura.core.coach_chat.post_chat_completion",
            new_callable=AsyncMock,
            side_effect=RuntimeError("boom"),
        ):
            text = await chat_reply(MESSAGES)

        assert text in FALLBACK_REPLIES
