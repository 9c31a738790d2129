"""
Membership Filter

Decides whether an inbound event comes from an allowed source before any
rendering work is done.
"""

import logging
from collections import defaultdict
from typing import Dict, Optional, Tuple

from discord_relay.models.event_models import FilterConfig, InboundEvent

logger = logging.getLogger(__name__)

REJECT_CHANNEL = "channel_not_allowed"
REJECT_BOT = "bot_author"
REJECT_USER = "user_not_allowed"
REJECT_MUTED = "muted"


def rejection_reason(event: InboundEvent, config: FilterConfig) -> Optional[str]:
    """
    Evaluate the filter rules in order and return the first failing rule.

    Order: channel allow-list, bot exclusion, user allow-list, deny-list.

    Returns:
        None if the event is allowed, otherwise a REJECT_* reason
    """
    if config.allowed_channel_ids and event.channel_id not in config.allowed_channel_ids:
        return REJECT_CHANNEL

    if config.ignore_bots and event.author_is_bot:
        return REJECT_BOT

    if config.allowed_user_ids and event.author_id not in config.allowed_user_ids:
        return REJECT_USER

    if event.author_id in config.muted_ids or event.channel_id in config.muted_ids:
        return REJECT_MUTED

    return None


def is_allowed(event: InboundEvent, config: FilterConfig) -> bool:
    return rejection_reason(event, config) is None


class SkipCounter:
    """Counts rejections per (reason, id) and logs every Nth occurrence."""

    def __init__(self, log_every: int = 25):
        self.log_every = max(1, log_every)
        self.counts: Dict[Tuple[str, str], int] = defaultdict(int)

    def record(self, reason: str, event: InboundEvent) -> int:
        key_id = event.channel_id if reason == REJECT_CHANNEL else (event.author_id or "unknown")
        key = (reason, key_id)
        self.counts[key] += 1
        count = self.counts[key]

        if count == 1 or count % self.log_every == 0:
            logger.info(f"Skipped message from {key_id} ({reason}), {count} time(s) so far")
        return count
