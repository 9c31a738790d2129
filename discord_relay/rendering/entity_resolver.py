import logging
from typing import Awaitable, Callable, Iterable

from discord_relay.models.event_models import MentionedChannel, MentionedRole, MentionedUser

logger = logging.getLogger(__name__)

ChannelLookup = Callable[[str], Awaitable[str]]


async def resolve_mentions(
    text: str,
    users: Iterable[MentionedUser],
    channels: Iterable[MentionedChannel],
    roles: Iterable[MentionedRole],
    channel_lookup: ChannelLookup
) -> str:
    """
    Replace Discord mention tokens with readable names.

    Each entity's token is replaced once (first occurrence). A channel whose
    name cannot be fetched keeps its raw token.

    Args:
        text: Raw message content
        users: Mentioned users, rendered as @displayName
        channels: Mentioned channels, rendered as #name after a lookup
        roles: Mentioned roles, rendered as @roleName
        channel_lookup: Coroutine returning a channel's name by id

    Returns:
        Text with mentions resolved
    """
    for user in users:
        text = text.replace(f"<@{user.id}>", f"@{user.display_name}", 1)

    for channel in channels:
        try:
            name = await channel_lookup(channel.id)
        except Exception as e:
            logger.warning(f"Could not fetch channel {channel.id} for mention: {e}")
            continue
        text = text.replace(f"<#{channel.id}>", f"#{name}", 1)

    for role in roles:
        text = text.replace(f"<@&{role.id}>", f"@{role.name}", 1)

    return text
