"""
Test cases for the HTTP surface: event intake and liveness.
"""

from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient

from discord_relay.main import BOT_NAME, create_app
from discord_relay.models.api_models import DiscordMessage
from discord_relay.models.event_models import EVENT_UPDATED


def message_json(message_id="m1", content="hello <@1> in <#10> <@&5>"):
    return {
        "id": message_id,
        "channel_id": "100",
        "guild_id": "900",
        "author": {"id": "2", "username": "trader", "bot": False},
        "content": content,
        "mentions": [{"id": "1", "username": "alice", "global_name": "Alice"}],
        "mention_roles": ["5", "6"],
        "attachments": [
            {"filename": "chart.png", "url": "https://cdn.test/chart.png", "size": 1024, "content_type": "image/png"}
        ],
        "message_reference": {"message_id": "m0"}
    }


class TestDiscordMessageConversion:

    def test_to_event(self):
        message = DiscordMessage.model_validate(message_json())

        event = message.to_event(EVENT_UPDATED, {"5": "Traders"})

        assert event.kind == EVENT_UPDATED
        assert event.author_id == "2"
        assert [user.display_name for user in event.mentioned_users] == ["Alice"]
        assert [channel.id for channel in event.mentioned_channels] == ["10"]
        assert [(role.id, role.name) for role in event.mentioned_roles] == [("5", "Traders")]
        assert event.attachments[0].is_image
        assert event.reference.channel_id == "100"
        assert event.reference.message_id == "m0"


class TestDiscordEndpoint:
    """Test the intake routes with a mocked relay."""

    def setup_method(self):
        self.app = create_app(use_lifespan=False)
        self.relay_bot = MagicMock()
        self.relay_bot.handle_event = AsyncMock(return_value={"status": "relayed", "message": "ok"})
        self.app.state.relay_bot = self.relay_bot
        self.client = TestClient(self.app)

    def test_single_event_relayed(self):
        response = self.client.post(
            "/api/v1/discord/events",
            json={"kind": "created", "message": message_json(), "roles": [{"id": "5", "name": "Traders"}]}
        )

        assert response.status_code == 200
        assert response.json()["status"] == "success"
        self.relay_bot.handle_event.assert_awaited_once()
        event = self.relay_bot.handle_event.await_args.args[0]
        assert event.message_id == "m1"
        assert [role.name for role in event.mentioned_roles] == ["Traders"]

    def test_batch_relays_each_event(self):
        response = self.client.post(
            "/api/v1/discord/events/batch",
            json={"events": [
                {"kind": "created", "message": message_json("m1")},
                {"kind": "deleted", "message": message_json("m2")},
            ]}
        )

        assert response.status_code == 200
        assert self.relay_bot.handle_event.await_count == 2

    def test_unsupported_kind_rejected(self):
        response = self.client.post(
            "/api/v1/discord/events",
            json={"kind": "pinned", "message": message_json()}
        )

        assert response.status_code == 400
        self.relay_bot.handle_event.assert_not_awaited()

    def test_relay_not_running(self):
        self.app.state.relay_bot = None

        response = self.client.post("/api/v1/discord/events", json={"message": message_json()})

        assert response.status_code == 503

    def test_health(self):
        response = self.client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["bot"] == BOT_NAME
        assert "timestamp" in body

    def test_root_is_plain_text(self):
        response = self.client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "Discord to Telegram Bot is running!"
