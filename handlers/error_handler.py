"""
handlers/error_handler.py
--------------------------
Application-wide error handler of last resort. The dispatcher catches its
own errors; this only sees what escapes the handler layer itself.
"""

from telegram import Update
from telegram.error import TelegramError
from telegram.ext import ContextTypes

from services.dispatcher import GENERIC_FAILURE_ALERT
from utils.logger import get_logger

logger = get_logger(__name__)


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Log the error and, for button presses, stop the client's loading spinner."""
    logger.error("Unhandled error while processing an update", exc_info=context.error)

    if not isinstance(update, Update) or update.callback_query is None:
        return

    try:
        await update.callback_query.answer(GENERIC_FAILURE_ALERT, show_alert=True)
    except TelegramError as e:
        # Already answered, or the query expired.
        logger.warning(f"Could not answer callback after error: {e}")
