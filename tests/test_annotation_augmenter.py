"""
Test cases for the breakdown and AI summary annotations.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from discord_relay.rendering.annotation_augmenter import (
    BREAKDOWN_HEADER, SUMMARY_HEADER, AnnotationAugmenter, build_breakdown
)
from discord_relay.rendering.breakdown_rules import SECOND_ENTRIES_NOTE


class TestBuildBreakdown:
    """Test the rule-based breakdown."""

    def test_symbol_line_sets_context(self):
        result = build_breakdown("BTC\nStopped BE\nSecond entries not valid")

        lines = result.split("\n")
        assert lines[0] == "BTC: Stop moved to breakeven (no loss on the trade)"
        assert lines[1] == "BTC: Second entries not valid"
        assert lines[-1] == SECOND_ENTRIES_NOTE

    def test_recap_header_is_dropped(self):
        result = build_breakdown("Daily Recap\nETH tp1 hit")

        assert result == "ETH: First target (TP1) hit"

    def test_unmatched_line_falls_back_to_status_update(self):
        assert build_breakdown("hello world") == "• Status update: hello world"

    def test_empty_text_gives_none(self):
        assert build_breakdown("") is None
        assert build_breakdown("  \n \n") is None
        assert build_breakdown("Weekly recap") is None

    def test_word_be_is_not_breakeven(self):
        result = build_breakdown("ETH SL hit, will be re-entering later")

        assert result == "ETH: Stopped out, position closed at the stop loss"

    def test_stop_moved_to_be(self):
        assert build_breakdown("LINK SL moved to BE") == "LINK: Stop moved to breakeven (no loss on the trade)"

    def test_negated_active_is_not_trade_active(self):
        assert build_breakdown("SOL trade not active yet") == "SOL: Trade not active yet"
        assert build_breakdown("SOL not yet active") == "SOL: Trade not active yet"

    def test_negated_filled_is_not_limit_filled(self):
        assert build_breakdown("BTC entry not filled") == "BTC: Entry not triggered yet"

    def test_plain_filled_still_matches(self):
        assert build_breakdown("BTC entry filled") == "BTC: Limit order filled, position is open"

    def test_note_only_when_second_entries_seen(self):
        result = build_breakdown("SOL trade active")

        assert result == "SOL: Trade active"
        assert SECOND_ENTRIES_NOTE not in result


class TestAnnotationAugmenter:
    """Test combining content with the annotation sections."""

    def setup_method(self):
        self.oracle = MagicMock()
        self.oracle.summarize = AsyncMock(return_value="• BTC stop is at breakeven")

    @pytest.mark.asyncio
    async def test_both_sections_in_order(self):
        augmenter = AnnotationAugmenter(oracle=self.oracle)

        result = await augmenter.augment("BTC\nStopped BE", "BTC\nStopped BE")

        assert result.startswith("BTC\nStopped BE\n\n" + BREAKDOWN_HEADER)
        assert result.index(BREAKDOWN_HEADER) < result.index(SUMMARY_HEADER)
        assert result.endswith(f"{SUMMARY_HEADER}\n• BTC stop is at breakeven")

    @pytest.mark.asyncio
    async def test_oracle_failure_is_swallowed(self):
        self.oracle.summarize = AsyncMock(side_effect=RuntimeError("rate limited"))
        augmenter = AnnotationAugmenter(oracle=self.oracle)

        result = await augmenter.augment("hello world", "hello world")

        assert SUMMARY_HEADER not in result
        assert BREAKDOWN_HEADER in result

    @pytest.mark.asyncio
    async def test_empty_summary_is_omitted(self):
        self.oracle.summarize = AsyncMock(return_value="   ")
        augmenter = AnnotationAugmenter(oracle=self.oracle, enable_breakdown=False)

        assert await augmenter.augment("hello", "hello") == "hello"

    @pytest.mark.asyncio
    async def test_nothing_enabled_returns_content(self):
        augmenter = AnnotationAugmenter(oracle=None, enable_breakdown=False)

        assert await augmenter.augment("hello", "hello") == "hello"

    @pytest.mark.asyncio
    async def test_blank_raw_text_skips_oracle(self):
        augmenter = AnnotationAugmenter(oracle=self.oracle)

        assert await augmenter.augment("📎 chart.png", "") == "📎 chart.png"
        self.oracle.summarize.assert_not_awaited()
