"""
handlers/callback_handler.py
-----------------------------
Handles inline button presses. The callback data is decoded here, once,
and the dispatcher only sees a structured CallbackAction.
"""

from telegram import Update
from telegram.ext import ContextTypes

from clients.telegram_client import TelegramTransport
from handlers.update_parser import origin_from_update
from models.events import CallbackAction
from services.dispatcher import InteractionDispatcher
from utils.logger import get_logger

logger = get_logger(__name__)


async def callback_query_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Decode callback_query.data and dispatch it."""
    query = update.callback_query
    if query is None:
        return

    action = CallbackAction.decode(query.data)
    origin = origin_from_update(update)
    if origin is None:
        # Inline-mode messages have no chat; nothing to render, just stop the spinner.
        logger.warning(f"Callback '{query.data}' without a chat, answering only")
        await query.answer()
        return

    dispatcher = InteractionDispatcher(TelegramTransport(context.bot))
    await dispatcher.dispatch(action, origin)
