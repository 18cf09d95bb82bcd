"""
services/render_adapter.py
---------------------------
Puts rendered screens on the user's screen.

Button presses edit the message that carried the button; if the edit is
rejected (message too old, deleted, content unchanged...) a new message is
sent instead. Commands and deep links always get a new message.
"""

from pathlib import Path
from typing import Optional

from clients.transport import Transport, TransportError
from models.events import EventOrigin
from models.screen import RenderedScreen
from utils.logger import get_logger

logger = get_logger(__name__)


class RenderAdapter:
    """Edit-or-send rendering, callback acknowledgements and document delivery."""

    def __init__(self, transport: Transport):
        self.transport = transport

    async def render(self, origin: EventOrigin, rendered: RenderedScreen) -> None:
        """Show a screen: edit in place for callbacks, otherwise send a new message."""
        if origin.is_callback and origin.message_id is not None:
            try:
                await self.transport.edit_message_text(
                    origin.chat_id,
                    origin.message_id,
                    rendered.text,
                    reply_markup=rendered.layout,
                    parse_mode=rendered.parse_mode,
                )
                return
            except TransportError as e:
                logger.debug(f"Edit failed in chat {origin.chat_id}, sending a new message: {e}")

        await self.reply(origin, rendered)

    async def reply(self, origin: EventOrigin, rendered: RenderedScreen) -> None:
        """Always send a new message."""
        await self.transport.send_message(
            origin.chat_id,
            rendered.text,
            reply_markup=rendered.layout,
            parse_mode=rendered.parse_mode,
        )

    async def acknowledge(
        self,
        origin: EventOrigin,
        text: Optional[str] = None,
        show_alert: bool = False,
    ) -> None:
        """
        Answer the callback query so the client stops showing a spinner.
        A failed answer is logged and otherwise ignored.
        """
        if origin.callback_query_id is None:
            return
        try:
            await self.transport.answer_callback(origin.callback_query_id, text, show_alert)
        except TransportError as e:
            logger.warning(f"Failed to answer callback {origin.callback_query_id}: {e}")

    async def send_document(self, origin: EventOrigin, path: Path, caption: Optional[str] = None) -> None:
        """
        Stream a local file to the chat as a document.

        Raises:
            OSError: If the file cannot be opened.
            TransportError: If the upload fails.
        """
        with open(path, "rb") as stream:
            await self.transport.send_document(
                origin.chat_id,
                stream,
                filename=path.name,
                caption=caption,
            )
        logger.info(f"Sent document {path.name} to chat {origin.chat_id}")


class CallbackAcknowledger:
    """
    Per-event guard: a callback is answered exactly once.

    Created fresh for every event, so it carries no state across updates.
    """

    def __init__(self, adapter: RenderAdapter, origin: EventOrigin):
        self.adapter = adapter
        self.origin = origin
        self.done = not origin.is_callback

    async def acknowledge(self, text: Optional[str] = None, show_alert: bool = False) -> None:
        if self.done:
            return
        self.done = True
        await self.adapter.acknowledge(self.origin, text, show_alert)

    async def ensure(self) -> None:
        """Bare acknowledgement if nothing answered the callback yet."""
        await self.acknowledge()
