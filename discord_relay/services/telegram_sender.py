import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from telegram import Bot, InputMediaPhoto, LinkPreviewOptions
from telegram.error import TelegramError

from discord_relay.models.event_models import MediaItem

logger = logging.getLogger(__name__)

TELEGRAM_MESSAGE_LIMIT = 4096
TELEGRAM_MEDIA_GROUP_LIMIT = 10


def split_message(text: str, limit: int = TELEGRAM_MESSAGE_LIMIT) -> List[str]:
    """Split text into chunks no longer than limit, preferring line breaks."""
    if len(text) <= limit:
        return [text]

    chunks = []
    remaining = text
    while len(remaining) > limit:
        cut = remaining.rfind("\n", 0, limit)
        if cut <= 0:
            cut = limit
        chunks.append(remaining[:cut])
        remaining = remaining[cut:].lstrip("\n")
    if remaining:
        chunks.append(remaining)
    return chunks


def apply_replacements(text: str, replacements: Dict[str, str]) -> str:
    for old, new in replacements.items():
        text = text.replace(old, new)
    return text


def load_replacements(path: str) -> Dict[str, str]:
    """Load a JSON object of text replacements. Missing or invalid files give no replacements."""
    if not path:
        return {}
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load replacements from {path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.error(f"Replacements file {path} must contain a JSON object")
        return {}
    return {str(key): str(value) for key, value in data.items()}


class TelegramSender:
    """Delivers relayed batches to one or more Telegram chats."""

    def __init__(
        self,
        bot_token: str,
        chat_ids: Sequence[str],
        disable_link_preview: bool = False,
        replacements: Optional[Dict[str, str]] = None,
        topic_id: Optional[int] = None,
        bot: Optional[Bot] = None
    ):
        self.bot = bot or Bot(token=bot_token)
        self.chat_ids = list(chat_ids)
        self.replacements = replacements or {}
        self.topic_id = topic_id
        self.link_preview_options = LinkPreviewOptions(is_disabled=disable_link_preview)

    async def start(self) -> None:
        await self.bot.initialize()
        logger.info(f"✅ Telegram sender ready for {len(self.chat_ids)} chat(s)")

    async def close(self) -> None:
        await self.bot.shutdown()

    def _photo_input(self, item: MediaItem):
        if item.is_stream:
            item.stream.seek(0)
            return item.stream
        return item.url

    async def _send_texts(self, chat_id: str, texts: Sequence[str]) -> None:
        for text in texts:
            text = apply_replacements(text, self.replacements)
            if not text.strip():
                continue
            for chunk in split_message(text):
                await self.bot.send_message(
                    chat_id=chat_id,
                    text=chunk,
                    link_preview_options=self.link_preview_options,
                    message_thread_id=self.topic_id
                )

    async def _send_media(self, chat_id: str, media: Sequence[MediaItem]) -> None:
        for start in range(0, len(media), TELEGRAM_MEDIA_GROUP_LIMIT):
            batch = media[start:start + TELEGRAM_MEDIA_GROUP_LIMIT]
            if len(batch) == 1:
                await self.bot.send_photo(
                    chat_id=chat_id,
                    photo=self._photo_input(batch[0]),
                    filename=batch[0].filename,
                    message_thread_id=self.topic_id
                )
                continue

            group = [
                InputMediaPhoto(media=self._photo_input(item), filename=item.filename)
                for item in batch
            ]
            await self.bot.send_media_group(chat_id=chat_id, media=group, message_thread_id=self.topic_id)

    async def send(self, texts: Sequence[str], media: Sequence[MediaItem]) -> None:
        """
        Send texts, then media, to every configured chat.

        Empty batches are a no-op. Failures are logged per chat and do not
        stop delivery to the other chats.
        """
        if not texts and not media:
            return

        try:
            for chat_id in self.chat_ids:
                try:
                    await self._send_texts(chat_id, texts)
                    if media:
                        await self._send_media(chat_id, media)
                    logger.info(f"✅ Relayed {len(texts)} message(s) and {len(media)} media item(s) to {chat_id}")
                except TelegramError as e:
                    logger.error(f"❌ Failed to relay to Telegram chat {chat_id}: {e}")
        finally:
            for item in media:
                item.close()
