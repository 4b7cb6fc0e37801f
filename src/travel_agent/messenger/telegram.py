"""Telegram messenger adapter using python-telegram-bot v21+."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any

from telegram import Update
from telegram.constants import ChatAction
from telegram.ext import Application, CommandHandler, MessageHandler as TGMessageHandler, filters

from travel_agent.ai.client import AIClientError, AIErrorKind
from travel_agent.ai.handler import MessageHandler
from travel_agent.config import TelegramConfig
from travel_agent.core.state import AppState
from travel_agent.core.types import Platform
from travel_agent.log import get_logger, mask_user_id
from travel_agent.messenger.base import MessengerAdapter
from travel_agent.messenger.models import IncomingMessage, OutgoingMessage
from travel_agent.utils.validation import MessageValidationError

logger = get_logger(__name__)

TELEGRAM_MAX_LENGTH = 4000

WELCOME_TEXT = """🤖 Welcome to the AI Travel Agent!

I can help you with:
✈️ Travel planning and recommendations
🌐 Real-time web search for travel info
🌤️ Current weather for any destination
💱 Currency conversion and local times
🏨 Sample flight and hotel options

Just send me a message to get started!"""

HELP_TEXT = """🤖 AI Travel Agent Commands:

/start - Start the bot
/help - Show this help message
/clear - Clear conversation history
/stats - Show bot statistics

Just send me any message and I'll help you with travel-related questions!

Examples:
• "What's the weather in Paris?"
• "Find flights to Tokyo"
• "Convert 100 USD to EUR"
• "Plan a 3-day trip to Rome\""""

CLEARED_TEXT = "🧹 Conversation history cleared!"
GENERIC_ERROR_TEXT = "❌ Sorry, I encountered an error processing your request."


def friendly_error(error: Exception) -> str:
    """Short user-facing text for a failed message."""
    match error:
        case MessageValidationError():
            return f"✏️ {error}"
        case AIClientError(kind=AIErrorKind.INVALID_CREDENTIALS | AIErrorKind.UPSTREAM_UNAVAILABLE):
            return "🔑 Service temporarily unavailable. Please try again later."
        case AIClientError(kind=AIErrorKind.RATE_LIMITED):
            return "⏱️ Please slow down! Try again in a few moments."
        case _:
            return GENERIC_ERROR_TEXT


def format_stats(state: AppState) -> str:
    stats = state.store.get_stats()
    memory = stats["memory_usage"]
    return (
        "📊 Bot Statistics:\n\n"
        f"🗣️ Active conversations: {stats['total_conversations']}\n"
        f"⏱️ Uptime: {round(state.uptime / 3600)} hours\n"
        f"💾 Stored messages: {memory['messages']} ({memory['content_bytes'] // 1024} KB)"
    )


def split_message(text: str, max_length: int = TELEGRAM_MAX_LENGTH) -> list[str]:
    """Split a message into chunks that fit within platform limits."""
    if len(text) <= max_length:
        return [text]

    chunks = []
    while text:
        if len(text) <= max_length:
            chunks.append(text)
            break
        # Prefer splitting at a newline
        split_pos = text.rfind("\n", 0, max_length)
        if split_pos <= 0:
            split_pos = max_length
        chunks.append(text[:split_pos])
        text = text[split_pos:].lstrip("\n")
    return chunks


class TelegramAdapter(MessengerAdapter):
    """Telegram bot adapter. Conversations are keyed by chat id."""

    def __init__(self, config: TelegramConfig, state: AppState, handler: MessageHandler):
        self._config = config
        self._state = state
        self._handler = handler
        self._app: Application | None = None  # type: ignore[type-arg]

    @property
    def platform_name(self) -> str:
        return Platform.TELEGRAM

    async def start(self) -> None:
        if not self._config.token:
            raise ValueError("Telegram bot token not configured")

        self._app = Application.builder().token(self._config.token).build()
        self._app.add_handler(CommandHandler("start", self._on_start))
        self._app.add_handler(CommandHandler("help", self._on_help))
        self._app.add_handler(CommandHandler("clear", self._on_clear))
        self._app.add_handler(CommandHandler("stats", self._on_stats))
        self._app.add_handler(TGMessageHandler(filters.TEXT & ~filters.COMMAND, self._on_telegram_message))
        self._app.add_error_handler(self._on_error)

        await self._app.initialize()
        await self._app.start()
        await self._app.updater.start_polling(drop_pending_updates=True)  # type: ignore[union-attr]
        logger.info("telegram_adapter_started")

    async def stop(self) -> None:
        if self._app:
            await self._app.updater.stop()  # type: ignore[union-attr]
            await self._app.stop()
            await self._app.shutdown()
            self._app = None
            logger.info("telegram_adapter_stopped")

    async def send_message(self, message: OutgoingMessage) -> None:
        if not self._app or not self._app.bot:
            return
        for chunk in split_message(message.text):
            await self._app.bot.send_message(chat_id=int(message.chat_id), text=chunk)

    async def send_typing_indicator(self, chat_id: str) -> None:
        if self._app and self._app.bot:
            await self._app.bot.send_chat_action(chat_id=int(chat_id), action=ChatAction.TYPING)

    async def handle_incoming(self, message: IncomingMessage) -> None:
        started = time.monotonic()
        await self.send_typing_indicator(message.chat_id)
        try:
            reply = await self._handler.handle_message(Platform.TELEGRAM, message.chat_id, message.text)
        except (MessageValidationError, AIClientError) as e:
            self._state.metrics.record_request("telegram", time.monotonic() - started, success=False)
            logger.warning("telegram_message_failed", user=mask_user_id(message.user_id), error=str(e))
            await self.send_message(OutgoingMessage(chat_id=message.chat_id, text=friendly_error(e)))
            return

        self._state.metrics.record_request("telegram", time.monotonic() - started, success=True)
        await self.send_message(OutgoingMessage(chat_id=message.chat_id, text=reply.text))
        logger.info("telegram_response_sent", user=mask_user_id(message.user_id), length=len(reply.text))

    async def _on_start(self, update: Update, context: Any) -> None:
        if update.message:
            await update.message.reply_text(WELCOME_TEXT)
            logger.info("telegram_user_started", chat_id=mask_user_id(str(update.message.chat_id)))

    async def _on_help(self, update: Update, context: Any) -> None:
        if update.message:
            await update.message.reply_text(HELP_TEXT)

    async def _on_clear(self, update: Update, context: Any) -> None:
        if update.message:
            self._state.store.clear_conversation(Platform.TELEGRAM, str(update.message.chat_id))
            await update.message.reply_text(CLEARED_TEXT)

    async def _on_stats(self, update: Update, context: Any) -> None:
        if update.message:
            await update.message.reply_text(format_stats(self._state))

    async def _on_telegram_message(self, update: Update, context: Any) -> None:
        msg = update.message
        if not msg or not msg.text:
            return

        incoming = IncomingMessage(
            platform=Platform.TELEGRAM,
            chat_id=str(msg.chat_id),
            user_id=str(msg.from_user.id) if msg.from_user else "unknown",
            user_display_name=msg.from_user.full_name if msg.from_user else "Unknown",
            text=msg.text,
            timestamp=msg.date or datetime.now(timezone.utc),
        )
        try:
            await self.handle_incoming(incoming)
        except Exception as e:
            logger.error("telegram_handler_error", error=str(e), chat_id=incoming.chat_id)
            await msg.reply_text(GENERIC_ERROR_TEXT)

    async def _on_error(self, update: object, context: Any) -> None:
        logger.error("telegram_bot_error", error=str(context.error))
