import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from config import settings
from discord_relay.core.bot_config import BotConfig
from discord_relay.core.relay_bot import RelayBot, self_ping_loop
from discord_relay.endpoints.discord_endpoint import router as discord_router

logger = logging.getLogger(__name__)

BOT_NAME = "Discord to Telegram Forwarding Bot"
ROOT_MESSAGE = "Discord to Telegram Bot is running!"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("🚀 Starting Discord Relay Service...")

    bot_config = BotConfig()
    relay_bot = RelayBot.from_config(bot_config.config)
    await relay_bot.start()
    app.state.relay_bot = relay_bot

    ping_task = None
    if settings.SELF_PING_URL:
        ping_task = asyncio.create_task(self_ping_loop(settings.SELF_PING_URL, settings.SELF_PING_INTERVAL_SECONDS))
        logger.info(f"✅ Self-ping enabled for {settings.SELF_PING_URL}")

    logger.info("✅ Discord Relay Service started")

    yield

    # Shutdown
    logger.info("🛑 Shutting down Discord Relay Service...")
    if ping_task:
        ping_task.cancel()
        try:
            await ping_task
        except asyncio.CancelledError:
            pass
    try:
        await relay_bot.stop()
    except Exception as e:
        logger.error(f"❌ Error stopping relay: {e}")
    app.state.relay_bot = None
    logger.info("🛑 Discord Relay Service stopped")


def create_app(use_lifespan: bool = True) -> FastAPI:
    """Create and configure the FastAPI application for the relay service."""
    app = FastAPI(title="Discord Relay Service", lifespan=lifespan if use_lifespan else None)
    app.state.relay_bot = None

    app.include_router(discord_router, prefix="/api/v1", tags=["discord"])

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return ROOT_MESSAGE

    @app.get("/health")
    async def health_check():
        """Health check endpoint for keep-alive pings and load balancers."""
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "bot": BOT_NAME
        }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    from config.logging_config import setup_production_logging

    setup_production_logging()
    logger.info("🚀 Starting Discord Relay Service...")
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
