"""
Discord REST Client

Fetches what the relay needs beyond the inbound event itself: replied-to
messages, channel names, guild role names and attachment bytes.
"""

import logging
from tempfile import SpooledTemporaryFile
from typing import Dict, Optional

import httpx

from discord_relay.core.errors import AttachmentFetchError, ReferenceFetchError
from discord_relay.models.api_models import DiscordMessage
from discord_relay.models.event_models import EVENT_CREATED, InboundEvent

logger = logging.getLogger(__name__)

# Attachment streams spill to disk beyond this many bytes
SPOOL_MAX_MEMORY = 1024 * 1024
STREAM_CHUNK_SIZE = 64 * 1024


class DiscordClient:
    """Async Discord REST client for a bot or user token."""

    def __init__(self, token: str, backend: str = "bot", api_base: str = "https://discord.com/api/v10"):
        authorization = f"Bot {token}" if backend == "bot" else token
        self.client = httpx.AsyncClient(
            base_url=api_base,
            headers={"Authorization": authorization},
            timeout=10.0
        )
        self._channel_names: Dict[str, str] = {}
        self._guild_roles: Dict[str, Dict[str, str]] = {}

    async def _get_json(self, path: str):
        response = await self.client.get(path)
        response.raise_for_status()
        return response.json()

    async def fetch_message(self, channel_id: str, message_id: str, guild_id: Optional[str] = None) -> InboundEvent:
        """
        Fetch a message by id and convert it to an InboundEvent.

        Raises:
            ReferenceFetchError: If the message cannot be fetched or parsed
        """
        try:
            data = await self._get_json(f"/channels/{channel_id}/messages/{message_id}")
            message = DiscordMessage.model_validate(data)
        except (httpx.HTTPError, ValueError) as e:
            raise ReferenceFetchError(channel_id, message_id, str(e)) from e

        if guild_id and not message.guild_id:
            message.guild_id = guild_id

        role_names = await self.resolve_role_names(message.guild_id, message.mention_roles)
        return message.to_event(EVENT_CREATED, role_names)

    async def fetch_channel_name(self, channel_id: str) -> str:
        """Fetch a channel's name, cached after the first lookup."""
        if channel_id in self._channel_names:
            return self._channel_names[channel_id]

        data = await self._get_json(f"/channels/{channel_id}")
        name = data.get("name") or channel_id
        self._channel_names[channel_id] = name
        return name

    async def fetch_guild_roles(self, guild_id: str) -> Dict[str, str]:
        """Fetch a guild's role names by id, cached per guild."""
        if guild_id in self._guild_roles:
            return self._guild_roles[guild_id]

        data = await self._get_json(f"/guilds/{guild_id}/roles")
        roles = {str(role["id"]): role.get("name", "") for role in data}
        self._guild_roles[guild_id] = roles
        return roles

    async def resolve_role_names(self, guild_id: Optional[str], role_ids) -> Dict[str, str]:
        """Names for the given role ids. Lookup failures leave the roles unresolved."""
        if not guild_id or not role_ids:
            return {}
        try:
            roles = await self.fetch_guild_roles(guild_id)
        except httpx.HTTPError as e:
            logger.warning(f"Could not fetch roles for guild {guild_id}: {e}")
            return {}
        return {role_id: roles[role_id] for role_id in role_ids if role_id in roles}

    async def open_attachment_stream(self, url: str) -> SpooledTemporaryFile:
        """
        Download an attachment chunk by chunk into a spooled temporary file.

        The file is rewound and must be closed by whoever sends it.

        Raises:
            AttachmentFetchError: If the download fails
        """
        spool = SpooledTemporaryFile(max_size=SPOOL_MAX_MEMORY)
        try:
            # CDN URLs are absolute and need no Authorization header
            async with httpx.AsyncClient(timeout=30.0) as cdn:
                async with cdn.stream("GET", url) as response:
                    response.raise_for_status()
                    async for chunk in response.aiter_bytes(STREAM_CHUNK_SIZE):
                        spool.write(chunk)
        except httpx.HTTPError as e:
            spool.close()
            raise AttachmentFetchError(f"Failed to download attachment {url}: {e}") from e

        spool.seek(0)
        return spool

    async def close(self) -> None:
        await self.client.aclose()
