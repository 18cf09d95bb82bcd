"""
clients/telegram_client.py
--------------------------
Transport implementation on top of python-telegram-bot's `telegram.Bot`.
"""

from typing import BinaryIO, Optional

from telegram import Bot, InlineKeyboardButton, InlineKeyboardMarkup
from telegram.error import TelegramError

from clients.transport import ChatId, Transport, TransportError
from models.screen import ButtonLayout, CallbackButton, LinkButton


def to_inline_keyboard(layout: Optional[ButtonLayout]) -> Optional[InlineKeyboardMarkup]:
    """Convert a ButtonLayout into Telegram's inline keyboard markup."""
    if not layout:
        return None
    rows = []
    for row in layout:
        buttons = []
        for button in row:
            if isinstance(button, LinkButton):
                buttons.append(InlineKeyboardButton(button.label, url=button.url))
            elif isinstance(button, CallbackButton):
                buttons.append(InlineKeyboardButton(button.label, callback_data=button.action))
        rows.append(buttons)
    return InlineKeyboardMarkup(rows)


class TelegramTransport(Transport):
    """Thin adapter: one Bot API call per method, TelegramError -> TransportError."""

    def __init__(self, bot: Bot):
        self.bot = bot

    async def send_message(
        self,
        chat_id: ChatId,
        text: str,
        reply_markup: Optional[ButtonLayout] = None,
        parse_mode: Optional[str] = None,
    ) -> None:
        try:
            await self.bot.send_message(
                chat_id=chat_id,
                text=text,
                reply_markup=to_inline_keyboard(reply_markup),
                parse_mode=parse_mode,
            )
        except TelegramError as e:
            raise TransportError(f"sendMessage failed: {e}") from e

    async def edit_message_text(
        self,
        chat_id: ChatId,
        message_id: int,
        text: str,
        reply_markup: Optional[ButtonLayout] = None,
        parse_mode: Optional[str] = None,
    ) -> None:
        try:
            await self.bot.edit_message_text(
                text=text,
                chat_id=chat_id,
                message_id=message_id,
                reply_markup=to_inline_keyboard(reply_markup),
                parse_mode=parse_mode,
            )
        except TelegramError as e:
            raise TransportError(f"editMessageText failed: {e}") from e

    async def answer_callback(
        self,
        callback_query_id: str,
        text: Optional[str] = None,
        show_alert: bool = False,
    ) -> None:
        try:
            await self.bot.answer_callback_query(
                callback_query_id=callback_query_id,
                text=text,
                show_alert=show_alert,
            )
        except TelegramError as e:
            raise TransportError(f"answerCallbackQuery failed: {e}") from e

    async def get_chat_member(self, channel_id: ChatId, user_id: int) -> str:
        try:
            member = await self.bot.get_chat_member(chat_id=channel_id, user_id=user_id)
        except TelegramError as e:
            raise TransportError(f"getChatMember failed: {e}") from e
        # ChatMemberStatus is a str enum whose str() is the raw value
        return str(member.status)

    async def send_document(
        self,
        chat_id: ChatId,
        stream: BinaryIO,
        filename: str,
        caption: Optional[str] = None,
    ) -> None:
        try:
            await self.bot.send_document(
                chat_id=chat_id,
                document=stream,
                filename=filename,
                caption=caption,
            )
        except TelegramError as e:
            raise TransportError(f"sendDocument failed: {e}") from e
