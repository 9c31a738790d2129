"""
Content Renderer

Turns one Discord message event into delivery-ready text and media.
"""

import logging
from typing import List

from discord_relay.core.errors import AttachmentFetchError, ReferenceFetchError
from discord_relay.models.event_models import (
    EVENT_DELETED, EVENT_UPDATED, AttachmentDescriptor, InboundEvent, MediaItem,
    RenderedPayload
)
from discord_relay.rendering.entity_resolver import resolve_mentions

logger = logging.getLogger(__name__)

KIND_LABELS = {
    EVENT_UPDATED: "✏️ Edited message",
    EVENT_DELETED: "🗑️ Deleted message",
}


def quote_block(content: str) -> str:
    """Prefix every line of content with '> '."""
    return "\n".join(f"> {line}" for line in content.split("\n"))


class ContentRenderer:
    """
    Renders InboundEvents into RenderedPayloads.

    Responsibilities:
    - Quote the replied-to message, recursively
    - Resolve user, channel and role mentions
    - Flatten embeds into text lines
    - Classify attachments into media items or text markers
    """

    def __init__(
        self,
        source_client,
        augmenter=None,
        images_as_media: bool = True,
        max_image_size: int = 10 * 1024 * 1024,
        stream_threshold: int = 5 * 1024 * 1024,
        max_reference_depth: int = 5
    ):
        """
        Args:
            source_client: Discord client with fetch_message, fetch_channel_name and open_attachment_stream
            augmenter: AnnotationAugmenter applied to the top-level render, or None
            images_as_media: Forward images as media instead of text markers
            max_image_size: Images at or above this size are sent as text markers
            stream_threshold: Images at or above this size are streamed instead of sent by URL
            max_reference_depth: Maximum number of nested replies to quote
        """
        self.source_client = source_client
        self.augmenter = augmenter
        self.images_as_media = images_as_media
        self.max_image_size = max_image_size
        self.stream_threshold = stream_threshold
        self.max_reference_depth = max_reference_depth

    async def render(self, event: InboundEvent) -> RenderedPayload:
        """
        Render an event and add annotations.

        Raises:
            ReferenceFetchError: If a replied-to message cannot be fetched
        """
        payload = await self._render(event, depth=0)

        if event.kind in KIND_LABELS:
            payload.content = f"{KIND_LABELS[event.kind]}\n{payload.content}" if payload.content else KIND_LABELS[event.kind]

        if self.augmenter:
            payload.content = await self.augmenter.augment(payload.content, event.text)

        return payload

    async def _render(self, event: InboundEvent, depth: int) -> RenderedPayload:
        parts: List[str] = []
        media: List[MediaItem] = []

        if event.reference:
            if depth >= self.max_reference_depth:
                logger.warning(
                    f"Reference chain deeper than {self.max_reference_depth} at message {event.message_id}, not quoting further"
                )
            else:
                referenced = await self._fetch_reference(event)
                quoted = await self._render(referenced, depth + 1)
                if quoted.content:
                    parts.append(quote_block(quoted.content))
                media.extend(quoted.media)

        text = await resolve_mentions(
            event.text,
            event.mentioned_users,
            event.mentioned_channels,
            event.mentioned_roles,
            self.source_client.fetch_channel_name
        )
        if text:
            parts.append(text)

        for embed in event.embeds:
            for value in (embed.title, embed.description, embed.url):
                if value:
                    parts.append(value)
            if embed.image_url and self.images_as_media:
                media.append(MediaItem(url=embed.image_url))

        for attachment in event.attachments:
            if self._forward_as_media(attachment):
                try:
                    media.append(await self.attachment_to_media(attachment))
                    continue
                except AttachmentFetchError as e:
                    logger.warning(f"Sending {attachment.name} as a marker instead of media: {e}")
            parts.append(f"📎 {attachment.name}")

        return RenderedPayload(content="\n".join(parts), media=media)

    async def _fetch_reference(self, event: InboundEvent) -> InboundEvent:
        reference = event.reference
        try:
            return await self.source_client.fetch_message(
                reference.channel_id, reference.message_id, guild_id=event.guild_id
            )
        except ReferenceFetchError:
            raise
        except Exception as e:
            raise ReferenceFetchError(reference.channel_id, reference.message_id, str(e)) from e

    def _forward_as_media(self, attachment: AttachmentDescriptor) -> bool:
        return self.images_as_media and attachment.is_image and attachment.size < self.max_image_size

    async def attachment_to_media(self, attachment: AttachmentDescriptor) -> MediaItem:
        """Small images go by URL; large ones are streamed so they are not held in memory."""
        if attachment.size < self.stream_threshold:
            return MediaItem(url=attachment.url, size=attachment.size, filename=attachment.name)

        stream = await self.source_client.open_attachment_stream(attachment.url)
        return MediaItem(stream=stream, size=attachment.size, filename=attachment.name)

