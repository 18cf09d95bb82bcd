"""
clients/transport.py
--------------------
The chat transport the bot core talks to.

Every call is request/response and every failure is raised as
TransportError, so call sites only ever catch one exception type.
"""

from abc import ABC, abstractmethod
from typing import BinaryIO, Optional, Union

from models.screen import ButtonLayout

ChatId = Union[int, str]


class TransportError(RuntimeError):
    """Raised when the messaging platform rejects a call or cannot be reached."""
    pass


class Transport(ABC):
    @abstractmethod
    async def send_message(
        self,
        chat_id: ChatId,
        text: str,
        reply_markup: Optional[ButtonLayout] = None,
        parse_mode: Optional[str] = None,
    ) -> None:
        raise NotImplementedError

    @abstractmethod
    async def edit_message_text(
        self,
        chat_id: ChatId,
        message_id: int,
        text: str,
        reply_markup: Optional[ButtonLayout] = None,
        parse_mode: Optional[str] = None,
    ) -> None:
        raise NotImplementedError

    @abstractmethod
    async def answer_callback(
        self,
        callback_query_id: str,
        text: Optional[str] = None,
        show_alert: bool = False,
    ) -> None:
        raise NotImplementedError

    @abstractmethod
    async def get_chat_member(self, channel_id: ChatId, user_id: int) -> str:
        """Return the raw member status string ('member', 'left', ...)."""
        raise NotImplementedError

    @abstractmethod
    async def send_document(
        self,
        chat_id: ChatId,
        stream: BinaryIO,
        filename: str,
        caption: Optional[str] = None,
    ) -> None:
        raise NotImplementedError
