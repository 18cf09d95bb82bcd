"""
services/dispatcher.py
-----------------------
Maps one inbound event to a screen transition or a gated delivery.

The dispatcher keeps no "current screen": every transition is worked out
from the event and freshly read data, so replicas and restarts see the same
behavior and concurrent updates share nothing.

Workflow for a guide:
    1. /start <slug> or open:<slug> shows the guide preview (GUIDE_DETAIL).
    2. dl:<slug> checks channel membership, then sends the file
       and shows GIFT_UNLOCKED.
"""

from typing import Optional, Union

from clients.transport import Transport, TransportError
from config import CHANNEL_ID, CHANNEL_URL
from models.consultation import ConsultationStage
from models.events import (
    CallbackAction,
    CallbackKind,
    EventOrigin,
    InboundEvent,
    SlashCommand,
    StartCommand,
)
from models.screen import RenderedScreen, Screen
from repositories.guide_repo import GuideRepository
from services.booking_service import BookingService
from services.membership_service import MembershipService
from services.presentation_service import (
    PresentationContext,
    build_screen,
    build_subscribe_prompt,
)
from services.render_adapter import CallbackAcknowledger, RenderAdapter
from utils.logger import get_logger

logger = get_logger(__name__)

GUIDE_NOT_FOUND_ALERT = "Гайд не найден"
FILE_NOT_FOUND_ALERT = "Файл гайда не найден на сервере"
SENDING_FILE_NOTICE = "Отправляю файл…"
BOOKING_SENT_NOTICE = "Заявка отправлена ✅"
GENERIC_FAILURE_ALERT = "Ошибка. Попробуйте позже."
DELIVERY_FAILED_TEXT = "Не удалось отправить файл. Попробуйте позже."


class InteractionDispatcher:
    """
    Handles StartCommand, SlashCommand and CallbackAction events.

    Collaborators default to the production ones built on `transport`;
    tests pass their own.
    """

    def __init__(
        self,
        transport: Transport,
        guide_repo: Optional[GuideRepository] = None,
        membership: Optional[MembershipService] = None,
        booking: Optional[BookingService] = None,
        channel_id: Union[int, str] = CHANNEL_ID,
        channel_url: Optional[str] = CHANNEL_URL,
    ):
        self.renderer = RenderAdapter(transport)
        self.guide_repo = guide_repo or GuideRepository()
        self.membership = membership or MembershipService(transport)
        self.booking = booking or BookingService(transport)
        self.channel_id = channel_id
        self.channel_url = channel_url

        self._callback_routes = {
            CallbackKind.SHOW_MAIN_MENU: self._on_show_main_menu,
            CallbackKind.PRICE: self._on_price,
            CallbackKind.GET_GIFT: self._on_get_gift,
            CallbackKind.ABOUT: self._on_about,
            CallbackKind.BOOKING_INFO: self._on_booking_info,
            CallbackKind.BOOK: self._on_book,
            CallbackKind.OPEN: self._on_open,
            CallbackKind.DOWNLOAD: self._on_download,
        }

    async def dispatch(self, event: InboundEvent, origin: EventOrigin) -> None:
        """
        Handle one event to completion. Never raises.

        Callback events are answered exactly once whatever happens; an error
        that escapes a branch before the answer turns into a failure alert.
        """
        ack = CallbackAcknowledger(self.renderer, origin)
        try:
            if isinstance(event, StartCommand):
                await self._on_start(event, origin)
            elif isinstance(event, SlashCommand):
                await self._on_command(event, origin)
            elif isinstance(event, CallbackAction):
                await self._on_callback(event, origin, ack)
            else:
                logger.warning(f"Ignoring unsupported event {event!r}")
        except Exception:
            logger.exception(f"Failed to handle {event!r} in chat {origin.chat_id}")
            await ack.acknowledge(GENERIC_FAILURE_ALERT, show_alert=True)
        finally:
            await ack.ensure()

    # ── Helpers ───────────────────────────────────────────

    def _context(self, **kwargs) -> PresentationContext:
        return PresentationContext(channel_url=self.channel_url, **kwargs)

    async def _show(self, origin: EventOrigin, screen: Screen, ctx: Optional[PresentationContext] = None) -> None:
        logger.info(f"Chat {origin.chat_id} -> {screen}")
        await self.renderer.render(origin, build_screen(screen, ctx or self._context()))

    async def _show_guide_list(self, origin: EventOrigin) -> None:
        guides = tuple(self.guide_repo.list_guides())
        await self._show(origin, Screen.guide_list(), self._context(guides=guides))

    # ── Commands ──────────────────────────────────────────

    async def _on_start(self, event: StartCommand, origin: EventOrigin) -> None:
        payload = (event.payload or "").strip() or None
        if payload:
            guide = self.guide_repo.find_by_slug(payload)
            if guide:
                await self._show(origin, Screen.guide_detail(guide.slug), self._context(guide=guide))
                return
            logger.info(f"Start payload '{payload}' does not match any guide")

        await self._show(origin, Screen.main_menu(), self._context(payload_slug=payload))

    async def _on_command(self, event: SlashCommand, origin: EventOrigin) -> None:
        name = event.name.lower()
        if name == "price":
            await self._show(origin, Screen.price())
        elif name == "guides":
            await self._show_guide_list(origin)
        elif name == "about_me":
            await self._show(origin, Screen.about())
        else:
            await self._show(origin, Screen.main_menu())

    # ── Callbacks ─────────────────────────────────────────

    async def _on_callback(self, event: CallbackAction, origin: EventOrigin, ack: CallbackAcknowledger) -> None:
        handler = self._callback_routes.get(event.kind)
        if handler is None:
            logger.info(f"Unknown callback '{event.raw}' from chat {origin.chat_id}")
            await ack.acknowledge()
            return
        await handler(event, origin, ack)

    async def _on_show_main_menu(self, event, origin, ack) -> None:
        await ack.acknowledge()
        await self._show(origin, Screen.main_menu())

    async def _on_price(self, event, origin, ack) -> None:
        await ack.acknowledge()
        await self._show(origin, Screen.price())

    async def _on_get_gift(self, event, origin, ack) -> None:
        await ack.acknowledge()
        await self._show_guide_list(origin)

    async def _on_about(self, event, origin, ack) -> None:
        await ack.acknowledge()
        await self._show(origin, Screen.about())

    async def _on_booking_info(self, event, origin, ack) -> None:
        await ack.acknowledge()
        await self.booking.notify(origin, ConsultationStage.INFO)
        await self._show(origin, Screen.booking_info())

    async def _on_book(self, event, origin, ack) -> None:
        await ack.acknowledge(BOOKING_SENT_NOTICE)
        await self.booking.notify(origin, ConsultationStage.CONFIRMED)
        await self._show(origin, Screen.booking_confirmed())

    async def _on_open(self, event: CallbackAction, origin: EventOrigin, ack: CallbackAcknowledger) -> None:
        guide = self.guide_repo.find_by_slug(event.slug)
        if guide is None:
            await ack.acknowledge(GUIDE_NOT_FOUND_ALERT, show_alert=True)
            return
        await ack.acknowledge()
        await self._show(origin, Screen.guide_detail(guide.slug), self._context(guide=guide))

    async def _on_download(self, event: CallbackAction, origin: EventOrigin, ack: CallbackAcknowledger) -> None:
        """Gated delivery: guide lookup, membership, file check, send, thank-you screen."""
        guide = self.guide_repo.find_by_slug(event.slug)
        if guide is None:
            await ack.acknowledge(GUIDE_NOT_FOUND_ALERT, show_alert=True)
            return

        user_id = origin.user.id if origin.user else None
        status = await self.membership.check(self.channel_id, user_id)
        if not status.is_member:
            await ack.acknowledge()
            await self.renderer.reply(origin, build_subscribe_prompt(guide, self.channel_url))
            return

        path = self.guide_repo.asset_path(guide)
        if path is None:
            await ack.acknowledge(FILE_NOT_FOUND_ALERT, show_alert=True)
            return

        await ack.acknowledge(SENDING_FILE_NOTICE)
        try:
            await self.renderer.send_document(origin, path, caption=guide.display_title)
        except (OSError, TransportError) as e:
            logger.error(f"Failed to deliver guide '{guide.slug}' to chat {origin.chat_id}: {e}")
            await self.renderer.reply(origin, RenderedScreen(DELIVERY_FAILED_TEXT, parse_mode=None))
            return

        await self._show(origin, Screen.gift_unlocked(guide.slug), self._context(guide=guide))
