"""
Delivery Batcher

Sends rendered payloads immediately, or stacks them and flushes the stack
on a fixed interval.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from discord_relay.models.event_models import MediaItem, RenderedPayload

logger = logging.getLogger(__name__)


@dataclass
class BatchState:
    """Pending texts and media waiting for the next flush."""
    texts: List[str] = field(default_factory=list)
    media: List[MediaItem] = field(default_factory=list)

    def drain(self) -> Tuple[List[str], List[MediaItem]]:
        texts, media = self.texts, self.media
        self.texts, self.media = [], []
        return texts, media

    def is_empty(self) -> bool:
        return not self.texts and not self.media


class DeliveryBatcher:
    """
    Hands rendered payloads to the destination sender.

    In immediate mode every payload is sent on its own. In stacked mode
    payloads accumulate in BatchState and a background task flushes them
    every `interval` seconds.
    """

    def __init__(self, sender, stack_messages: bool = False, interval: float = 5.0):
        self.sender = sender
        self.stack_messages = stack_messages
        self.interval = interval
        self.state = BatchState()
        self._flush_lock = asyncio.Lock()
        self._task: Optional[asyncio.Task] = None

    async def submit(self, payload: RenderedPayload) -> None:
        if self.stack_messages:
            self.state.texts.append(payload.content)
            self.state.media.extend(payload.media)
            logger.debug(f"Stacked message ({len(self.state.texts)} pending)")
            return

        await self.sender.send([payload.content], payload.media)

    async def flush(self) -> Tuple[int, int]:
        """
        Drain the stacked texts and media and send them as one batch.

        The sender is called even when nothing is pending.

        Returns:
            Tuple of (texts sent, media sent)
        """
        async with self._flush_lock:
            texts, media = self.state.drain()
            if texts or media:
                logger.info(f"Flushing {len(texts)} message(s) and {len(media)} media item(s)")
            await self.sender.send(texts, media)
            return len(texts), len(media)

    async def _run_periodic_flush(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.flush()
            except Exception as e:
                logger.error(f"❌ Periodic flush failed: {e}", exc_info=True)

    def start(self) -> None:
        """Start the periodic flush task when stacking is enabled."""
        if not self.stack_messages or self._task:
            return
        self._task = asyncio.create_task(self._run_periodic_flush())
        logger.info(f"✅ Message stacking enabled, flushing every {self.interval}s")

    async def stop(self) -> None:
        """Cancel the periodic flush task and send whatever is still pending."""
        if self._task:
            # Let a flush that is already sending finish before cancelling
            async with self._flush_lock:
                self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        if self.stack_messages and not self.state.is_empty():
            await self.flush()
