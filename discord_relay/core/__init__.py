"""
Discord Relay Core Module

This module contains the core components for the relay:
- BotConfig: Configuration management
- RelayError and subclasses: Pipeline error types

The RelayBot orchestrator lives in discord_relay.core.relay_bot.
"""

from .bot_config import BotConfig, RelayConfig
from .errors import AttachmentFetchError, ReferenceFetchError, RelayError

__all__ = ['BotConfig', 'RelayConfig', 'RelayError', 'ReferenceFetchError', 'AttachmentFetchError']
