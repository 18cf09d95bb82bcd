"""
main.py
-------
Entry point for the BotGuide Telegram bot.

Responsibilities:
    - Validate configuration and refuse to start without a token or channel.
    - Configure and start the Telegram bot with all handlers.
    - Advertise the bot commands in the Telegram menu.
"""

import sys

from telegram import BotCommand
from telegram.error import TelegramError
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
)

from config import ADMIN_CHAT_ID, CHANNEL_ID, GUIDES_PATH, TELEGRAM_BOT_TOKEN, validate_config
from handlers.callback_handler import callback_query_handler
from handlers.command_handler import (
    about_command,
    guides_command,
    price_command,
    start_command,
)
from handlers.error_handler import error_handler
from utils.logger import get_logger

logger = get_logger(__name__)


async def set_bot_commands(application: Application) -> None:
    """Register bot commands menu in Telegram on startup."""
    commands = [
        BotCommand("start", "🚀 Главное меню"),
        BotCommand("price", "📈 Цены"),
        BotCommand("guides", "🎁 Получить подарок"),
        BotCommand("about_me", "👋 Обо мне"),
    ]
    try:
        await application.bot.set_my_commands(commands)
        logger.info("Bot commands menu registered successfully.")
    except TelegramError as e:
        logger.error(f"Failed to set bot commands: {e}")


def register_handlers(app: Application) -> None:
    """Attach command, button and error handlers to the application."""
    app.add_handler(CommandHandler("start", start_command))
    app.add_handler(CommandHandler("price", price_command))
    app.add_handler(CommandHandler("guides", guides_command))
    # /about is not advertised in the menu but still works when typed
    app.add_handler(CommandHandler(["about_me", "about"], about_command))
    app.add_handler(CallbackQueryHandler(callback_query_handler))
    app.add_error_handler(error_handler)


def main() -> None:
    """Initialize and run the bot."""

    # ── 1. Configuration ──────────────────────────────────
    problems = validate_config()
    if problems:
        for problem in problems:
            logger.error(problem)
        sys.exit(1)

    if ADMIN_CHAT_ID is None:
        logger.warning("ADMIN_CHAT_ID is not set: consultation requests will not be forwarded.")
    logger.info(f"Gating guides from {GUIDES_PATH} behind channel {CHANNEL_ID}")

    # ── 2. Build the Telegram application ─────────────────
    logger.info("Starting Telegram bot...")
    app = Application.builder().token(TELEGRAM_BOT_TOKEN).post_init(set_bot_commands).build()

    # ── 3. Register handlers ──────────────────────────────
    register_handlers(app)

    # ── 4. Start polling ──────────────────────────────────
    logger.info("🚀 BotGuide is running! Press Ctrl+C to stop.")
    app.run_polling(drop_pending_updates=True, allowed_updates=["message", "callback_query"])
    logger.info("BotGuide stopped.")


if __name__ == "__main__":
    main()
