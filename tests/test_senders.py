"""
Test cases for the Telegram and Discord webhook destinations.
"""

import io
import json

import httpx
import pytest
from unittest.mock import AsyncMock
from telegram.error import TelegramError

from discord_relay.models.event_models import MediaItem
from discord_relay.services.telegram_sender import (
    TelegramSender, apply_replacements, load_replacements, split_message
)
from discord_relay.services.webhook_sender import DiscordWebhookSender, webhook_id_from_url


class TestSplitMessage:

    def test_short_text_untouched(self):
        assert split_message("hello") == ["hello"]

    def test_long_text_split_at_limit(self):
        chunks = split_message("a" * 5000)

        assert [len(chunk) for chunk in chunks] == [4096, 904]

    def test_prefers_line_breaks(self):
        text = "x" * 10 + "\n" + "y" * 10

        assert split_message(text, limit=15) == ["x" * 10, "y" * 10]


class TestReplacements:

    def test_apply(self):
        assert apply_replacements("Join @old now", {"@old": "@new"}) == "Join @new now"

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "replacements.json"
        path.write_text(json.dumps({"foo": "bar"}), encoding="utf-8")

        assert load_replacements(str(path)) == {"foo": "bar"}

    def test_missing_file_gives_no_replacements(self, tmp_path):
        assert load_replacements(str(tmp_path / "missing.json")) == {}
        assert load_replacements("") == {}


class TestTelegramSender:
    """Test delivery to Telegram chats with a mocked Bot."""

    def setup_method(self):
        self.bot = AsyncMock()
        self.sender = TelegramSender(
            "token",
            ["-100", "-200"],
            replacements={"secret": "[redacted]"},
            topic_id=7,
            bot=self.bot
        )

    @pytest.mark.asyncio
    async def test_empty_batch_is_noop(self):
        await self.sender.send([], [])

        self.bot.send_message.assert_not_awaited()
        self.bot.send_photo.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_long_text_split_for_every_chat(self):
        await self.sender.send(["a" * 5000], [])

        assert self.bot.send_message.await_count == 4
        chat_ids = [call.kwargs["chat_id"] for call in self.bot.send_message.await_args_list]
        assert chat_ids == ["-100", "-100", "-200", "-200"]
        assert all(call.kwargs["message_thread_id"] == 7 for call in self.bot.send_message.await_args_list)

    @pytest.mark.asyncio
    async def test_replacements_applied(self):
        await self.sender.send(["the secret plan"], [])

        assert self.bot.send_message.await_args_list[0].kwargs["text"] == "the [redacted] plan"

    @pytest.mark.asyncio
    async def test_single_photo(self):
        await self.sender.send([], [MediaItem(url="https://img.test/a.png")])

        assert self.bot.send_photo.await_count == 2
        assert self.bot.send_photo.await_args_list[0].kwargs["photo"] == "https://img.test/a.png"
        self.bot.send_media_group.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_media_group_chunks_of_ten(self):
        media = [MediaItem(url=f"https://img.test/{index}.png") for index in range(11)]
        sender = TelegramSender("token", ["-100"], bot=self.bot)

        await sender.send([], media)

        assert self.bot.send_media_group.await_count == 1
        assert len(self.bot.send_media_group.await_args.kwargs["media"]) == 10
        # The eleventh photo is sent on its own
        assert self.bot.send_photo.await_args.kwargs["photo"] == "https://img.test/10.png"
        self.bot.send_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failure_in_one_chat_does_not_block_others(self):
        self.bot.send_message = AsyncMock(side_effect=[TelegramError("Chat not found"), None])

        await self.sender.send(["hello"], [])

        assert self.bot.send_message.await_count == 2

    @pytest.mark.asyncio
    async def test_streams_closed_after_send(self):
        stream = io.BytesIO(b"image")
        sender = TelegramSender("token", ["-100"], bot=self.bot)

        await sender.send([], [MediaItem(stream=stream, filename="big.png")])

        assert self.bot.send_photo.await_args.kwargs["photo"] is stream
        assert stream.closed


class TestDiscordWebhookSender:
    """Test delivery to a Discord webhook over a mocked transport."""

    def setup_method(self):
        self.requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return httpx.Response(204)

        self.client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        self.sender = DiscordWebhookSender("https://discord.com/api/webhooks/123/abc", client=self.client)

    def test_webhook_id_from_url(self):
        assert webhook_id_from_url("https://discord.com/api/webhooks/123456/tok-en") == "123456"
        assert webhook_id_from_url("") is None

    @pytest.mark.asyncio
    async def test_text_split_at_discord_limit(self):
        await self.sender.send(["b" * 2500], [])

        assert len(self.requests) == 2
        assert json.loads(self.requests[0].content)["content"] == "b" * 2000

    @pytest.mark.asyncio
    async def test_url_media_sent_as_embeds(self):
        await self.sender.send([], [MediaItem(url="https://img.test/a.png")])

        body = json.loads(self.requests[0].content)
        assert body == {"embeds": [{"image": {"url": "https://img.test/a.png"}}]}

    @pytest.mark.asyncio
    async def test_stream_uploaded_and_closed(self):
        stream = io.BytesIO(b"image")

        await self.sender.send([], [MediaItem(stream=stream, filename="big.png")])

        assert len(self.requests) == 1
        assert b"big.png" in self.requests[0].read()
        assert stream.closed

    @pytest.mark.asyncio
    async def test_empty_batch_is_noop(self):
        await self.sender.send([], [])

        assert self.requests == []
