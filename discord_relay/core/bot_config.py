"""
Relay Configuration Management

This module validates the environment-driven settings and assembles them into
the configuration objects used by the relay pipeline.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from config import settings
from discord_relay.models.event_models import FilterConfig
from discord_relay.services.webhook_sender import webhook_id_from_url

logger = logging.getLogger(__name__)

OUTPUT_TELEGRAM = "telegram"
OUTPUT_DISCORD_WEBHOOK = "discord_webhook"
SUPPORTED_OUTPUT_BACKENDS = [OUTPUT_TELEGRAM, OUTPUT_DISCORD_WEBHOOK]


@dataclass
class RelayConfig:
    """Everything the relay pipeline needs, validated."""
    discord_token: str
    discord_backend: str = "bot"
    discord_api_base: str = "https://discord.com/api/v10"
    filter: FilterConfig = field(default_factory=FilterConfig)
    images_as_media: bool = True
    max_image_size: int = 10 * 1024 * 1024
    stream_threshold: int = 5 * 1024 * 1024
    max_reference_depth: int = 5
    show_message_updates: bool = False
    show_message_deletions: bool = False
    enable_breakdown: bool = True
    enable_ai_summary: bool = True
    stack_messages: bool = False
    stack_interval: float = 5.0
    skip_log_every: int = 25
    output_backend: str = OUTPUT_TELEGRAM
    telegram_bot_token: str = ""
    output_chat_ids: List[str] = field(default_factory=list)
    telegram_topic_id: Optional[int] = None
    disable_link_preview: bool = False
    replacements_file: str = ""
    discord_webhook_url: str = ""
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    summary_language: str = "Telugu"
    trading_chat_id: str = ""

    @property
    def oracle_enabled(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def command_listener_enabled(self) -> bool:
        return bool(self.trading_chat_id and self.telegram_bot_token and self.oracle_enabled)


class BotConfig:
    """
    Builds and validates the relay configuration.

    Responsibilities:
    - Validate mandatory connectivity settings (fatal when missing)
    - Disable optional features whose credentials are missing
    - Assemble RelayConfig and FilterConfig
    """

    def __init__(self):
        self.config = self._build()
        self._validate_configuration(self.config)

    def _build(self) -> RelayConfig:
        chat_ids = list(settings.OUTPUT_CHANNELS)
        if settings.TELEGRAM_CHAT_ID and settings.TELEGRAM_CHAT_ID not in chat_ids:
            chat_ids.insert(0, settings.TELEGRAM_CHAT_ID)

        muted_ids = list(settings.MUTED_IDS)
        webhook_id = webhook_id_from_url(settings.DISCORD_WEBHOOK_URL)
        if webhook_id and webhook_id not in muted_ids:
            muted_ids.append(webhook_id)

        topic_id = int(settings.TELEGRAM_TOPIC_ID) if settings.TELEGRAM_TOPIC_ID else None

        return RelayConfig(
            discord_token=settings.DISCORD_TOKEN or "",
            discord_backend=settings.DISCORD_BOT_BACKEND,
            discord_api_base=settings.DISCORD_API_BASE,
            filter=FilterConfig(
                allowed_channel_ids=list(settings.DISCORD_CHANNEL_IDS),
                allowed_user_ids=list(settings.ALLOWED_USER_IDS),
                muted_ids=muted_ids,
                ignore_bots=settings.IGNORE_BOTS
            ),
            images_as_media=settings.IMAGES_AS_MEDIA,
            max_image_size=settings.MAX_IMAGE_SIZE,
            stream_threshold=settings.STREAM_THRESHOLD,
            max_reference_depth=settings.MAX_REFERENCE_DEPTH,
            show_message_updates=settings.SHOW_MESSAGE_UPDATES,
            show_message_deletions=settings.SHOW_MESSAGE_DELETIONS,
            enable_breakdown=settings.ENABLE_BREAKDOWN,
            enable_ai_summary=settings.ENABLE_AI_SUMMARY,
            stack_messages=settings.STACK_MESSAGES,
            stack_interval=settings.STACK_INTERVAL_SECONDS,
            skip_log_every=settings.SKIP_LOG_EVERY,
            output_backend=settings.OUTPUT_BACKEND,
            telegram_bot_token=settings.TELEGRAM_BOT_TOKEN,
            output_chat_ids=chat_ids,
            telegram_topic_id=topic_id,
            disable_link_preview=settings.DISABLE_LINK_PREVIEW,
            replacements_file=settings.REPLACEMENTS_FILE,
            discord_webhook_url=settings.DISCORD_WEBHOOK_URL,
            openai_api_key=settings.OPENAI_API_KEY,
            openai_model=settings.OPENAI_MODEL,
            summary_language=settings.SUMMARY_LANGUAGE,
            trading_chat_id=settings.TRADING_CHAT_ID
        )

    @staticmethod
    def _validate_configuration(config: RelayConfig) -> None:
        """Validate that all required configuration is present."""
        missing_settings = []
        if not config.discord_token:
            missing_settings.append('DISCORD_TOKEN')

        if config.output_backend not in SUPPORTED_OUTPUT_BACKENDS:
            error_msg = f"Unsupported OUTPUT_BACKEND: {config.output_backend}"
            logger.critical(error_msg)
            raise ValueError(error_msg)

        if config.output_backend == OUTPUT_TELEGRAM:
            if not config.telegram_bot_token:
                missing_settings.append('TELEGRAM_BOT_TOKEN')
            if not config.output_chat_ids:
                missing_settings.append('TELEGRAM_CHAT_ID')
        elif not config.discord_webhook_url:
            missing_settings.append('DISCORD_WEBHOOK_URL')

        if missing_settings:
            error_msg = f"Missing required configuration: {', '.join(missing_settings)}"
            logger.critical(error_msg)
            raise ValueError(error_msg)

        if not config.oracle_enabled:
            logger.warning("OPENAI_API_KEY missing - AI summaries and trading analysis will be disabled")
        if config.trading_chat_id and not config.command_listener_enabled:
            logger.warning("TRADING_CHAT_ID set but Telegram token or OpenAI key missing - trading analysis disabled")

        logger.info("Configuration validation passed")
