"""
handlers/command_handler.py
----------------------------
Handles /start (with optional deep-link payload), /price, /guides and /about_me.
Each handler turns the update into an event and hands it to the dispatcher.
"""

from telegram import Update
from telegram.ext import ContextTypes

from clients.telegram_client import TelegramTransport
from handlers.update_parser import origin_from_update
from models.events import InboundEvent, SlashCommand, StartCommand
from services.dispatcher import InteractionDispatcher
from utils.logger import get_logger

logger = get_logger(__name__)


async def _dispatch(update: Update, context: ContextTypes.DEFAULT_TYPE, event: InboundEvent) -> None:
    origin = origin_from_update(update)
    if origin is None:
        logger.warning(f"Dropping {event!r}: update has no chat")
        return
    dispatcher = InteractionDispatcher(TelegramTransport(context.bot))
    await dispatcher.dispatch(event, origin)


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /start.

    `t.me/<bot>?start=detox` arrives as "/start detox"; the first argument is
    the guide slug to preselect.
    """
    payload = context.args[0].strip() if context.args else None
    user = update.effective_user
    if user:
        logger.info(f"User {user.id} ({user.first_name}) started the bot, payload={payload!r}")
    await _dispatch(update, context, StartCommand(payload=payload or None))


async def price_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /price - formats of work and prices."""
    await _dispatch(update, context, SlashCommand("price"))


async def guides_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /guides - list of free guides."""
    await _dispatch(update, context, SlashCommand("guides"))


async def about_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /about_me."""
    await _dispatch(update, context, SlashCommand("about_me"))
