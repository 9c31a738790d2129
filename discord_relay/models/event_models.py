"""
Relay Data Models

Dataclasses for events observed on Discord and the payloads rendered from them.
"""

from dataclasses import dataclass, field
from typing import Any, BinaryIO, Dict, List, Optional, Tuple

EVENT_CREATED = "created"
EVENT_UPDATED = "updated"
EVENT_DELETED = "deleted"
SUPPORTED_EVENT_KINDS = [EVENT_CREATED, EVENT_UPDATED, EVENT_DELETED]


@dataclass(frozen=True)
class MentionedUser:
    id: str
    display_name: str


@dataclass(frozen=True)
class MentionedChannel:
    id: str


@dataclass(frozen=True)
class MentionedRole:
    id: str
    name: str


@dataclass(frozen=True)
class EmbedDescriptor:
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    image_url: Optional[str] = None


@dataclass(frozen=True)
class AttachmentDescriptor:
    name: str
    url: str
    size: int = 0
    content_type: Optional[str] = None

    @property
    def is_image(self) -> bool:
        return bool(self.content_type) and self.content_type.startswith("image")


@dataclass(frozen=True)
class MessageReference:
    channel_id: str
    message_id: str


@dataclass(frozen=True)
class InboundEvent:
    """One observed create/update/delete of a Discord message."""
    kind: str
    message_id: str
    channel_id: str
    author_id: Optional[str] = None
    author_is_bot: bool = False
    guild_id: Optional[str] = None
    text: str = ""
    embeds: Tuple[EmbedDescriptor, ...] = ()
    attachments: Tuple[AttachmentDescriptor, ...] = ()
    mentioned_users: Tuple[MentionedUser, ...] = ()
    mentioned_channels: Tuple[MentionedChannel, ...] = ()
    mentioned_roles: Tuple[MentionedRole, ...] = ()
    reference: Optional[MessageReference] = None


@dataclass
class MediaItem:
    """
    A photo to deliver, referenced by URL or carried as a binary stream.

    Streams are spooled to disk while downloading. Uploading through
    python-telegram-bot still reads the whole file into memory, so the
    spool bounds download memory only.
    """
    url: Optional[str] = None
    stream: Optional[BinaryIO] = None
    size: int = 0
    filename: str = "photo"

    @property
    def is_stream(self) -> bool:
        return self.stream is not None

    def close(self) -> None:
        if self.stream is not None:
            self.stream.close()


@dataclass
class RenderedPayload:
    """Delivery-ready text plus ordered media for one inbound event."""
    content: str
    media: List[MediaItem] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Summary used for API responses and logs."""
        return {
            'content': self.content,
            'media': [
                {'url': item.url, 'stream': item.is_stream, 'size': item.size}
                for item in self.media
            ]
        }


@dataclass
class FilterConfig:
    """Source membership rules. Empty allow-lists mean no restriction."""
    allowed_channel_ids: List[str] = field(default_factory=list)
    allowed_user_ids: List[str] = field(default_factory=list)
    muted_ids: List[str] = field(default_factory=list)
    ignore_bots: bool = True


def event_summary(event: InboundEvent) -> dict:
    """Compact description of an event for logging."""
    summary: Dict[str, Any] = {
        'kind': event.kind,
        'message_id': event.message_id,
        'channel_id': event.channel_id,
        'author_id': event.author_id,
        'embeds': len(event.embeds),
        'attachments': len(event.attachments),
    }
    if event.reference:
        summary['reference'] = event.reference.message_id
    return summary
