"""
services/booking_service.py
----------------------------
Forwards consultation requests to the administrator chat.
Best effort: a failed notification is logged and never reaches the user.
"""

from typing import Optional, Union

from clients.transport import Transport, TransportError
from config import ADMIN_CHAT_ID
from models.consultation import ConsultationRequest, ConsultationStage
from models.events import EventOrigin
from services.presentation_service import build_admin_notification
from utils.logger import get_logger

logger = get_logger(__name__)


class BookingService:
    """Sends ConsultationRequests to ADMIN_CHAT_ID."""

    def __init__(self, transport: Transport, admin_chat_id: Optional[Union[int, str]] = ADMIN_CHAT_ID):
        self.transport = transport
        self.admin_chat_id = admin_chat_id

    async def notify(self, origin: EventOrigin, stage: ConsultationStage) -> bool:
        """
        Tell the administrator that a user asked about (or booked) a consultation.

        Returns:
            True if the notification was sent, False if skipped or failed.
        """
        if self.admin_chat_id is None:
            return False

        if origin.user is None:
            logger.warning(f"Consultation request without a user in chat {origin.chat_id}")
            return False

        request = ConsultationRequest.from_user(origin.user, stage)
        message = build_admin_notification(request)
        try:
            await self.transport.send_message(
                self.admin_chat_id,
                message.text,
                parse_mode=message.parse_mode,
            )
        except TransportError as e:
            logger.error(f"Failed to notify admin about user {request.user_id}: {e}")
            return False

        logger.info(f"Consultation request ({stage.value}) from user {request.user_id} forwarded")
        return True
