#!/usr/bin/env python3
"""
Discord Relay - Main Entry Point
"""
import logging
import sys

from config import settings

logger = logging.getLogger(__name__)


def setup_logging():
    """Configure logging for the application."""
    from config.logging_config import setup_production_logging

    setup_production_logging()

    # Windows consoles need UTF-8 for the emoji in log lines
    if sys.platform.startswith('win'):
        try:
            sys.stdout.reconfigure(encoding='utf-8')
        except (AttributeError, ValueError):
            pass


def main():
    """Main entry point for the relay service."""
    try:
        from discord_relay.main import app
        import uvicorn

        logger.info("🚀 Starting Discord Relay...")
        logger.info(f"📡 Service will be available at: http://0.0.0.0:{settings.PORT}")
        logger.info(f"🩺 Health check: http://0.0.0.0:{settings.PORT}/health")

        uvicorn.run(app, host="0.0.0.0", port=settings.PORT, log_level="info")

    except KeyboardInterrupt:
        logger.info("🛑 Shutting down...")
    except Exception as e:
        logger.error(f"❌ Error in main: {str(e)}")
        raise


if __name__ == "__main__":
    setup_logging()
    main()
