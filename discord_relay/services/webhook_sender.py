import json
import logging
import re
from typing import Optional, Sequence

import httpx

from discord_relay.models.event_models import MediaItem
from discord_relay.services.telegram_sender import split_message

logger = logging.getLogger(__name__)

DISCORD_MESSAGE_LIMIT = 2000
DISCORD_EMBED_LIMIT = 10
WEBHOOK_ID_PATTERN = re.compile(r"webhooks/(\d+)/")


def webhook_id_from_url(url: str) -> Optional[str]:
    """The webhook's own id, so its posts can be muted when it relays into a watched channel."""
    match = WEBHOOK_ID_PATTERN.search(url or "")
    return match.group(1) if match else None


class DiscordWebhookSender:
    """Delivers relayed batches to a Discord webhook."""

    def __init__(self, webhook_url: str, client: Optional[httpx.AsyncClient] = None):
        self.webhook_url = webhook_url
        self.client = client or httpx.AsyncClient(timeout=30.0)

    async def start(self) -> None:
        logger.info("✅ Discord webhook sender ready")

    async def close(self) -> None:
        await self.client.aclose()

    async def _post_text(self, text: str) -> None:
        for chunk in split_message(text, DISCORD_MESSAGE_LIMIT):
            response = await self.client.post(self.webhook_url, json={"content": chunk})
            response.raise_for_status()

    async def _post_media(self, media: Sequence[MediaItem]) -> None:
        urls = [item for item in media if not item.is_stream]
        streams = [item for item in media if item.is_stream]

        for start in range(0, len(urls), DISCORD_EMBED_LIMIT):
            embeds = [{"image": {"url": item.url}} for item in urls[start:start + DISCORD_EMBED_LIMIT]]
            response = await self.client.post(self.webhook_url, json={"embeds": embeds})
            response.raise_for_status()

        for item in streams:
            item.stream.seek(0)
            response = await self.client.post(
                self.webhook_url,
                data={"payload_json": json.dumps({"content": ""})},
                files={"files[0]": (item.filename, item.stream)}
            )
            response.raise_for_status()

    async def send(self, texts: Sequence[str], media: Sequence[MediaItem]) -> None:
        """Post texts, then media. Empty batches are a no-op."""
        if not texts and not media:
            return

        try:
            for text in texts:
                if text.strip():
                    await self._post_text(text)
            if media:
                await self._post_media(media)
            logger.info(f"✅ Relayed {len(texts)} message(s) and {len(media)} media item(s) to webhook")
        except httpx.HTTPError as e:
            logger.error(f"❌ Failed to relay to Discord webhook: {e}")
        finally:
            for item in media:
                item.close()
