"""
Relay Bot Core Orchestrator

This module contains the relay pipeline context: it owns the collaborators,
the skip counters and the batch state for the lifetime of the service, and
runs every inbound event through filter, render and delivery.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from discord_relay.core.bot_config import OUTPUT_TELEGRAM, RelayConfig
from discord_relay.core.errors import ReferenceFetchError
from discord_relay.delivery.delivery_batcher import DeliveryBatcher
from discord_relay.filtering.membership_filter import SkipCounter, rejection_reason
from discord_relay.models.event_models import (
    EVENT_DELETED, EVENT_UPDATED, InboundEvent, event_summary
)
from discord_relay.rendering.annotation_augmenter import AnnotationAugmenter
from discord_relay.rendering.content_renderer import ContentRenderer
from discord_relay.services.command_listener import TradingCommandListener
from discord_relay.services.discord_client import DiscordClient
from discord_relay.services.oracle_client import create_oracle
from discord_relay.services.telegram_sender import TelegramSender, load_replacements
from discord_relay.services.webhook_sender import DiscordWebhookSender
from discord_relay.signal_processing.signal_processor import SignalProcessor

logger = logging.getLogger(__name__)

# Event outcomes reported back to the caller
STATUS_RELAYED = "relayed"
STATUS_SKIPPED = "skipped"
STATUS_FAILED = "failed"


class RelayBot:
    """
    Relay pipeline orchestrator.

    Responsibilities:
    - Gate inbound events through the membership filter
    - Render them, with annotations, into payloads
    - Hand payloads to the delivery batcher
    - Manage the lifecycle of the sender, the flush task and the command listener
    """

    def __init__(
        self,
        config: RelayConfig,
        source_client,
        sender,
        oracle=None,
        command_listener: Optional[TradingCommandListener] = None
    ):
        self.config = config
        self.source_client = source_client
        self.sender = sender
        self.oracle = oracle
        self.command_listener = command_listener

        augmenter = AnnotationAugmenter(
            oracle=oracle if config.enable_ai_summary else None,
            enable_breakdown=config.enable_breakdown
        )
        self.renderer = ContentRenderer(
            source_client,
            augmenter=augmenter,
            images_as_media=config.images_as_media,
            max_image_size=config.max_image_size,
            stream_threshold=config.stream_threshold,
            max_reference_depth=config.max_reference_depth
        )
        self.batcher = DeliveryBatcher(sender, config.stack_messages, config.stack_interval)
        self.skip_counter = SkipCounter(config.skip_log_every)

    @classmethod
    def from_config(cls, config: RelayConfig) -> "RelayBot":
        """Create the relay and all of its collaborators from a validated configuration."""
        source_client = DiscordClient(config.discord_token, config.discord_backend, config.discord_api_base)

        if config.output_backend == OUTPUT_TELEGRAM:
            sender = TelegramSender(
                config.telegram_bot_token,
                config.output_chat_ids,
                disable_link_preview=config.disable_link_preview,
                replacements=load_replacements(config.replacements_file),
                topic_id=config.telegram_topic_id
            )
        else:
            sender = DiscordWebhookSender(config.discord_webhook_url)

        oracle = create_oracle(config.openai_api_key, config.openai_model, config.summary_language)

        command_listener = None
        if config.command_listener_enabled:
            command_listener = TradingCommandListener(
                config.telegram_bot_token,
                config.trading_chat_id,
                SignalProcessor(oracle)
            )

        logger.info(
            f"RelayBot initialized with {config.output_backend} output, "
            f"{'AI' if oracle else 'no AI'} annotations, "
            f"stacking {'on' if config.stack_messages else 'off'}"
        )
        return cls(config, source_client, sender, oracle, command_listener)

    def _kind_enabled(self, event: InboundEvent) -> bool:
        if event.kind == EVENT_UPDATED:
            return self.config.show_message_updates
        if event.kind == EVENT_DELETED:
            return self.config.show_message_deletions
        return True

    async def handle_event(self, event: InboundEvent) -> Dict[str, Any]:
        """
        Run one inbound event through the pipeline.

        Returns:
            Dict with the outcome status and a short message
        """
        if not self._kind_enabled(event):
            logger.debug(f"Ignoring {event.kind} event for message {event.message_id}")
            return {"status": STATUS_SKIPPED, "message": f"{event.kind} events are disabled"}

        reason = rejection_reason(event, self.config.filter)
        if reason:
            self.skip_counter.record(reason, event)
            return {"status": STATUS_SKIPPED, "message": reason}

        logger.info(f"Relaying message: {event_summary(event)}")
        try:
            payload = await self.renderer.render(event)
        except ReferenceFetchError as e:
            logger.error(f"❌ Dropping message {event.message_id}: {e}")
            return {"status": STATUS_FAILED, "message": str(e)}

        if not payload.content and not payload.media:
            logger.info(f"Message {event.message_id} rendered to nothing, not relaying")
            return {"status": STATUS_SKIPPED, "message": "empty message"}

        await self.batcher.submit(payload)
        return {"status": STATUS_RELAYED, "message": f"Message {event.message_id} relayed"}

    async def start(self) -> None:
        await self.sender.start()
        self.batcher.start()
        if self.command_listener:
            try:
                await self.command_listener.start()
            except Exception as e:
                logger.error(f"❌ Failed to start trading command listener: {e}")
                self.command_listener = None
        logger.info("✅ Relay started")

    async def stop(self) -> None:
        await self.batcher.stop()
        if self.command_listener:
            await self.command_listener.stop()
        await self.sender.close()
        await self.source_client.close()
        if self.oracle:
            await self.oracle.close()
        logger.info("🛑 Relay stopped")


async def self_ping_loop(url: str, interval: float) -> None:
    """Request our own health URL periodically so hosted instances stay awake."""
    async with httpx.AsyncClient(timeout=10.0) as client:
        while True:
            await asyncio.sleep(interval)
            try:
                response = await client.get(url)
                logger.debug(f"Self-ping {url}: {response.status_code}")
            except httpx.HTTPError as e:
                logger.warning(f"Self-ping to {url} failed: {e}")
