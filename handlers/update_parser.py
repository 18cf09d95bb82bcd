"""
handlers/update_parser.py
--------------------------
Extracts the bot-independent EventOrigin from a python-telegram-bot Update.
"""

from typing import Optional

from telegram import Update

from models.events import EventOrigin, UserProfile


def origin_from_update(update: Update) -> Optional[EventOrigin]:
    """
    Build an EventOrigin for the update.

    Returns:
        None if the update has no chat to answer in.
    """
    chat = update.effective_chat
    if chat is None:
        return None

    user = update.effective_user
    profile = None
    if user is not None:
        profile = UserProfile(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            username=user.username,
        )

    query = update.callback_query
    if query is None:
        return EventOrigin(chat_id=chat.id, user=profile)

    message_id = query.message.message_id if query.message else None
    return EventOrigin(
        chat_id=chat.id,
        user=profile,
        message_id=message_id,
        callback_query_id=query.id,
    )
