import os
from dotenv import load_dotenv


def _get_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() == "true"


def _get_list(name: str) -> list:
    raw = os.getenv(name, "")
    return [
        item.strip().strip('"').strip("'")
        for item in raw.split(",")
        if item.strip().strip('"').strip("'")
    ]


load_dotenv()

# Discord (source)
DISCORD_TOKEN = os.getenv("DISCORD_TOKEN")
DISCORD_BOT_BACKEND = os.getenv("DISCORD_BOT_BACKEND", "bot").lower()
DISCORD_API_BASE = os.getenv("DISCORD_API_BASE", "https://discord.com/api/v10")

# Message filtering
DISCORD_CHANNEL_IDS = _get_list("DISCORD_CHANNEL_IDS")
ALLOWED_USER_IDS = _get_list("ALLOWED_USER_IDS")
MUTED_IDS = _get_list("MUTED_IDS")
IGNORE_BOTS = _get_bool("IGNORE_BOTS", "True")

# Rendering
IMAGES_AS_MEDIA = _get_bool("IMAGES_AS_MEDIA", "True")
MAX_IMAGE_SIZE = int(os.getenv("MAX_IMAGE_SIZE", str(10 * 1024 * 1024)))
STREAM_THRESHOLD = int(os.getenv("STREAM_THRESHOLD", str(5 * 1024 * 1024)))
MAX_REFERENCE_DEPTH = int(os.getenv("MAX_REFERENCE_DEPTH", "5"))
SHOW_MESSAGE_UPDATES = _get_bool("SHOW_MESSAGE_UPDATES", "False")
SHOW_MESSAGE_DELETIONS = _get_bool("SHOW_MESSAGE_DELETIONS", "False")
ENABLE_BREAKDOWN = _get_bool("ENABLE_BREAKDOWN", "True")
ENABLE_AI_SUMMARY = _get_bool("ENABLE_AI_SUMMARY", "True")

# Delivery
STACK_MESSAGES = _get_bool("STACK_MESSAGES", "False")
STACK_INTERVAL_SECONDS = float(os.getenv("STACK_INTERVAL_SECONDS", "5"))
SKIP_LOG_EVERY = int(os.getenv("SKIP_LOG_EVERY", "25"))
OUTPUT_BACKEND = os.getenv("OUTPUT_BACKEND", "telegram").lower()

# Telegram (destination)
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN", "")
TELEGRAM_CHAT_ID = os.getenv("TELEGRAM_CHAT_ID", "")
OUTPUT_CHANNELS = _get_list("OUTPUT_CHANNELS")
TELEGRAM_TOPIC_ID = os.getenv("TELEGRAM_TOPIC_ID", "")
DISABLE_LINK_PREVIEW = _get_bool("DISABLE_LINK_PREVIEW", "False")
REPLACEMENTS_FILE = os.getenv("REPLACEMENTS_FILE", "")

# Discord webhook (alternative destination)
DISCORD_WEBHOOK_URL = os.getenv("DISCORD_WEBHOOK_URL", "")

# OpenAI
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
SUMMARY_LANGUAGE = os.getenv("SUMMARY_LANGUAGE", "Telugu")

# Trading analysis feedback chat
TRADING_CHAT_ID = os.getenv("TRADING_CHAT_ID", "")

# Liveness
PORT = int(os.getenv("PORT", "3000"))
SELF_PING_URL = os.getenv("SELF_PING_URL", "")
SELF_PING_INTERVAL_SECONDS = int(os.getenv("SELF_PING_INTERVAL_SECONDS", str(4 * 60)))
