"""
Trading Analysis Command Listener

Listens to the Telegram feedback chat: answers the analysis commands and
runs every other text message through the signal processor.
"""

import logging
from typing import Optional

from telegram import BotCommand, Update
from telegram.constants import ParseMode
from telegram.error import TelegramError
from telegram.ext import Application, CommandHandler, ContextTypes, MessageHandler, filters

from discord_relay.signal_processing.signal_processor import SignalProcessor

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "🤖 <b>Trading Bot Commands</b>\n\n"
    "📊 <b>/trading_status</b> - Show bot status\n"
    "✅ <b>/enable_trading</b> - Enable message analysis\n"
    "❌ <b>/disable_trading</b> - Disable message analysis\n"
    "❓ <b>/help</b> - Show this help message\n\n"
    "⚠️ <b>Note</b>: This bot only analyzes messages for trading signals. No trades are executed."
)


class TradingCommandListener:
    """Telegram adapter for trading signal analysis."""

    def __init__(self, bot_token: str, target_chat_id: str, processor: SignalProcessor):
        self.bot_token = bot_token
        self.target_chat_id = str(target_chat_id)
        self.processor = processor
        self.app: Optional[Application] = None

    def _is_target_chat(self, update: Update) -> bool:
        chat = update.effective_chat
        if not chat or str(chat.id) != self.target_chat_id:
            logger.debug(f"Ignoring message from chat {chat.id if chat else None} (target: {self.target_chat_id})")
            return False
        return True

    def status_text(self) -> str:
        state = "✅ ENABLED" if self.processor.is_active() else "❌ DISABLED"
        return (
            "📊 <b>Trading Bot Status Report</b>\n\n"
            f"🤖 <b>Bot Status</b>: {state}\n\n"
            "📈 <b>Mode</b>: Analysis Only (No Trading Execution)\n"
            "🔍 <b>Function</b>: Analyzes messages for trading signals"
        )

    async def _cmd_status(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        if not self._is_target_chat(update):
            return
        await update.message.reply_text(self.status_text(), parse_mode=ParseMode.HTML)

    async def _cmd_enable(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        if not self._is_target_chat(update):
            return
        self.processor.enable()
        await update.message.reply_text("✅ Trading analysis enabled")

    async def _cmd_disable(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        if not self._is_target_chat(update):
            return
        self.processor.disable()
        await update.message.reply_text("❌ Trading analysis disabled")

    async def _cmd_help(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        if not self._is_target_chat(update):
            return
        await update.message.reply_text(HELP_TEXT, parse_mode=ParseMode.HTML)

    async def _cmd_unknown(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        if not self._is_target_chat(update):
            return
        command = update.message.text.split()[0] if update.message.text else ""
        await update.message.reply_text(f"❓ Unknown command: {command}\n\nUse /help to see available commands.")

    async def _handle_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        if not self._is_target_chat(update) or not update.message or not update.message.text:
            return

        if not self.processor.is_active():
            logger.info("Trading analysis is disabled, ignoring message")
            return

        logger.info(f"Analyzing message for trading signals: {update.message.text!r}")
        try:
            result = await self.processor.process_message(update.message.text)
        except Exception as e:
            logger.error(f"Error processing trading signal: {e}", exc_info=True)
            await update.message.reply_text(f"❌ Error analyzing trading signal: {e}")
            return

        if result.success and result.report:
            await update.message.reply_text(result.report, parse_mode=ParseMode.HTML)
        else:
            logger.info(f"No report sent: {result.error_message}")

    async def _handle_error(self, update: object, context: ContextTypes.DEFAULT_TYPE):
        logger.error(f"Telegram handler error: {context.error}", exc_info=context.error)

    async def start(self) -> None:
        """Start polling the feedback chat."""
        self.app = Application.builder().token(self.bot_token).build()

        self.app.add_handler(CommandHandler("trading_status", self._cmd_status))
        self.app.add_handler(CommandHandler("enable_trading", self._cmd_enable))
        self.app.add_handler(CommandHandler("disable_trading", self._cmd_disable))
        self.app.add_handler(CommandHandler("help", self._cmd_help))
        self.app.add_handler(MessageHandler(filters.COMMAND, self._cmd_unknown))
        self.app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, self._handle_message))
        self.app.add_error_handler(self._handle_error)

        logger.info("Starting trading command listener...")
        await self.app.initialize()
        await self.app.start()
        await self.app.updater.start_polling(drop_pending_updates=True)

        try:
            await self.app.bot.set_my_commands([
                BotCommand("trading_status", "Show bot status"),
                BotCommand("enable_trading", "Enable message analysis"),
                BotCommand("disable_trading", "Disable message analysis"),
                BotCommand("help", "Show available commands"),
            ])
        except TelegramError as e:
            logger.warning(f"Could not register bot commands: {e}")

        logger.info(f"✅ Trading command listener polling chat {self.target_chat_id}")

    async def stop(self) -> None:
        if not self.app:
            return
        await self.app.updater.stop()
        await self.app.stop()
        await self.app.shutdown()
        self.app = None
