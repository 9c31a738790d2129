"""
API Models for the Discord Relay

Pydantic models for Discord message payloads, as delivered by the gateway
forwarder to the intake endpoints and as returned by Discord's REST API.
"""

import re
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from discord_relay.models.event_models import (
    EVENT_CREATED, AttachmentDescriptor, EmbedDescriptor, InboundEvent,
    MentionedChannel, MentionedRole, MentionedUser, MessageReference
)

CHANNEL_MENTION_PATTERN = re.compile(r"<#(\d+)>")


class DiscordUser(BaseModel):
    id: str
    username: Optional[str] = None
    global_name: Optional[str] = None
    bot: bool = False

    @property
    def display_name(self) -> str:
        return self.global_name or self.username or self.id


class DiscordEmbedImage(BaseModel):
    url: str


class DiscordEmbed(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    image: Optional[DiscordEmbedImage] = None


class DiscordAttachment(BaseModel):
    id: Optional[str] = None
    filename: str
    url: str
    size: int = 0
    content_type: Optional[str] = None


class DiscordRole(BaseModel):
    id: str
    name: str


class DiscordMessageReference(BaseModel):
    message_id: Optional[str] = None
    channel_id: Optional[str] = None
    guild_id: Optional[str] = None


class DiscordMessage(BaseModel):
    id: str
    channel_id: str
    guild_id: Optional[str] = None
    author: Optional[DiscordUser] = None
    content: str = ""
    embeds: List[DiscordEmbed] = Field(default_factory=list)
    attachments: List[DiscordAttachment] = Field(default_factory=list)
    mentions: List[DiscordUser] = Field(default_factory=list)
    mention_roles: List[str] = Field(default_factory=list)
    message_reference: Optional[DiscordMessageReference] = None

    def to_event(self, kind: str = EVENT_CREATED, role_names: Optional[Dict[str, str]] = None) -> InboundEvent:
        """
        Convert to an InboundEvent.

        Channel mentions are taken from the content tokens, as Discord does not
        send them with the message. Role mentions whose name is unknown are dropped.
        """
        role_names = role_names or {}

        channel_ids: List[str] = []
        for channel_id in CHANNEL_MENTION_PATTERN.findall(self.content or ""):
            if channel_id not in channel_ids:
                channel_ids.append(channel_id)

        reference = None
        if self.message_reference and self.message_reference.message_id:
            reference = MessageReference(
                channel_id=self.message_reference.channel_id or self.channel_id,
                message_id=self.message_reference.message_id
            )

        return InboundEvent(
            kind=kind,
            message_id=self.id,
            channel_id=self.channel_id,
            author_id=self.author.id if self.author else None,
            author_is_bot=self.author.bot if self.author else False,
            guild_id=self.guild_id,
            text=self.content or "",
            embeds=tuple(
                EmbedDescriptor(
                    title=embed.title,
                    description=embed.description,
                    url=embed.url,
                    image_url=embed.image.url if embed.image else None
                )
                for embed in self.embeds
            ),
            attachments=tuple(
                AttachmentDescriptor(
                    name=attachment.filename,
                    url=attachment.url,
                    size=attachment.size,
                    content_type=attachment.content_type
                )
                for attachment in self.attachments
            ),
            mentioned_users=tuple(
                MentionedUser(id=user.id, display_name=user.display_name)
                for user in self.mentions
            ),
            mentioned_channels=tuple(MentionedChannel(id=channel_id) for channel_id in channel_ids),
            mentioned_roles=tuple(
                MentionedRole(id=role_id, name=role_names[role_id])
                for role_id in self.mention_roles
                if role_id in role_names
            ),
            reference=reference
        )


class DiscordMessageEvent(BaseModel):
    """Envelope posted by the gateway forwarder for one message event."""
    kind: str = EVENT_CREATED
    message: DiscordMessage
    roles: List[DiscordRole] = Field(default_factory=list, description="Resolved names of mentioned roles")


class DiscordMessageEventBatch(BaseModel):
    events: List[DiscordMessageEvent]
