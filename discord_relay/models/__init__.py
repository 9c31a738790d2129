from .event_models import (
    EVENT_CREATED, EVENT_UPDATED, EVENT_DELETED, SUPPORTED_EVENT_KINDS,
    AttachmentDescriptor, EmbedDescriptor, FilterConfig, InboundEvent, MediaItem,
    MentionedChannel, MentionedRole, MentionedUser, MessageReference, RenderedPayload
)
from .api_models import DiscordMessage, DiscordMessageEvent, DiscordMessageEventBatch
