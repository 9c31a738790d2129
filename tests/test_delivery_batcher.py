"""
Test cases for immediate and stacked delivery.
"""

import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock

from discord_relay.delivery.delivery_batcher import BatchState, DeliveryBatcher
from discord_relay.models.event_models import MediaItem, RenderedPayload


def make_sender():
    sender = MagicMock()
    sender.send = AsyncMock()
    return sender


class TestImmediateDelivery:

    @pytest.mark.asyncio
    async def test_payload_sent_straight_away(self):
        sender = make_sender()
        batcher = DeliveryBatcher(sender, stack_messages=False)
        media = [MediaItem(url="https://img.test/a.png")]

        await batcher.submit(RenderedPayload(content="hello", media=media))

        sender.send.assert_awaited_once_with(["hello"], media)
        assert batcher.state.is_empty()


class TestStackedDelivery:
    """Test stacking and flushing."""

    def setup_method(self):
        self.sender = make_sender()
        self.batcher = DeliveryBatcher(self.sender, stack_messages=True, interval=3600)

    @pytest.mark.asyncio
    async def test_flush_sends_everything_pending(self):
        image = MediaItem(url="https://img.test/a.png")
        await self.batcher.submit(RenderedPayload(content="first"))
        await self.batcher.submit(RenderedPayload(content="second", media=[image]))

        self.sender.send.assert_not_awaited()

        counts = await self.batcher.flush()

        assert counts == (2, 1)
        self.sender.send.assert_awaited_once_with(["first", "second"], [image])

    @pytest.mark.asyncio
    async def test_second_flush_sends_empty_batch(self):
        await self.batcher.submit(RenderedPayload(content="first"))
        await self.batcher.flush()

        counts = await self.batcher.flush()

        assert counts == (0, 0)
        assert self.sender.send.await_args_list[-1].args == ([], [])

    @pytest.mark.asyncio
    async def test_stop_flushes_pending(self):
        self.batcher.start()
        await self.batcher.submit(RenderedPayload(content="late"))

        await self.batcher.stop()

        self.sender.send.assert_awaited_once_with(["late"], [])
        assert self.batcher._task is None

    @pytest.mark.asyncio
    async def test_stop_waits_for_flush_in_progress(self):
        started = asyncio.Event()
        release = asyncio.Event()
        delivered = []

        async def slow_send(texts, media):
            if not texts:
                return
            started.set()
            await release.wait()
            delivered.extend(texts)

        self.sender.send = AsyncMock(side_effect=slow_send)
        batcher = DeliveryBatcher(self.sender, stack_messages=True, interval=0.01)
        await batcher.submit(RenderedPayload(content="in flight"))
        batcher.start()
        await asyncio.wait_for(started.wait(), timeout=1)

        stop_task = asyncio.create_task(batcher.stop())
        await asyncio.sleep(0)
        release.set()
        await asyncio.wait_for(stop_task, timeout=1)

        assert delivered == ["in flight"]
        assert batcher._task is None

    @pytest.mark.asyncio
    async def test_start_is_noop_without_stacking(self):
        batcher = DeliveryBatcher(self.sender, stack_messages=False)
        batcher.start()

        assert batcher._task is None


class TestBatchState:

    def test_drain_resets_state(self):
        state = BatchState(texts=["a"], media=[MediaItem(url="u")])

        texts, media = state.drain()

        assert texts == ["a"]
        assert len(media) == 1
        assert state.is_empty()
