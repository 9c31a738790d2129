"""
Test cases for source membership filtering.
"""

from discord_relay.filtering.membership_filter import (
    REJECT_BOT, REJECT_CHANNEL, REJECT_MUTED, REJECT_USER, SkipCounter, is_allowed,
    rejection_reason
)
from discord_relay.models.event_models import EVENT_CREATED, FilterConfig, InboundEvent


def make_event(channel_id="100", author_id="1", author_is_bot=False):
    return InboundEvent(
        kind=EVENT_CREATED,
        message_id="m1",
        channel_id=channel_id,
        author_id=author_id,
        author_is_bot=author_is_bot,
        text="hello"
    )


class TestRejectionReason:
    """Test filter rule precedence."""

    def test_no_rules_allows_everything(self):
        assert is_allowed(make_event(), FilterConfig(ignore_bots=False))

    def test_channel_allow_list(self):
        config = FilterConfig(allowed_channel_ids=["100"])

        assert rejection_reason(make_event(channel_id="100"), config) is None
        assert rejection_reason(make_event(channel_id="200"), config) == REJECT_CHANNEL

    def test_channel_checked_before_bots(self):
        config = FilterConfig(allowed_channel_ids=["100"], ignore_bots=True)

        assert rejection_reason(make_event(channel_id="200", author_is_bot=True), config) == REJECT_CHANNEL

    def test_bots_ignored(self):
        assert rejection_reason(make_event(author_is_bot=True), FilterConfig()) == REJECT_BOT
        assert rejection_reason(make_event(author_is_bot=True), FilterConfig(ignore_bots=False)) is None

    def test_user_allow_list(self):
        config = FilterConfig(allowed_user_ids=["1"])

        assert rejection_reason(make_event(author_id="1"), config) is None
        assert rejection_reason(make_event(author_id="2"), config) == REJECT_USER

    def test_muted_author_wins_over_allow_lists(self):
        config = FilterConfig(allowed_channel_ids=["100"], allowed_user_ids=["1"], muted_ids=["1"])

        assert rejection_reason(make_event(), config) == REJECT_MUTED

    def test_muted_channel(self):
        config = FilterConfig(muted_ids=["100"])

        assert rejection_reason(make_event(channel_id="100"), config) == REJECT_MUTED


class TestSkipCounter:
    """Test skip counting per reason and id."""

    def test_counts_per_reason_and_id(self):
        counter = SkipCounter(log_every=2)

        assert counter.record(REJECT_USER, make_event(author_id="2")) == 1
        assert counter.record(REJECT_USER, make_event(author_id="2")) == 2
        assert counter.record(REJECT_USER, make_event(author_id="3")) == 1
        assert counter.record(REJECT_CHANNEL, make_event(channel_id="200")) == 1
