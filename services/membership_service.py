"""
services/membership_service.py
-------------------------------
Decides whether a user counts as subscribed to the gated channel.
This is the only place that knows which member statuses pass the gate.
"""

from typing import Optional

from clients.transport import ChatId, Transport, TransportError
from models.membership import MembershipStatus
from utils.logger import get_logger

logger = get_logger(__name__)

MEMBER_STATUSES = frozenset({"member", "administrator", "creator"})


def classify_status(status: str) -> MembershipStatus:
    """Map a raw chat-member status string onto MembershipStatus."""
    if status in MEMBER_STATUSES:
        return MembershipStatus.MEMBER
    return MembershipStatus.NOT_MEMBER


class MembershipService:
    """Channel membership checks through the transport."""

    def __init__(self, transport: Transport):
        self.transport = transport

    async def check(self, channel_id: ChatId, user_id: Optional[int]) -> MembershipStatus:
        """
        Look up the user's status in the channel. One transport call, no retry.

        Returns:
            MEMBER, NOT_MEMBER, or UNKNOWN when the lookup failed
            (bot not admin in the channel, user never started the bot, network...).
        """
        if user_id is None:
            logger.warning("Membership check without a user id, treating as unknown")
            return MembershipStatus.UNKNOWN

        try:
            status = await self.transport.get_chat_member(channel_id, user_id)
        except TransportError as e:
            logger.warning(f"Membership check failed for user {user_id} in {channel_id}: {e}")
            return MembershipStatus.UNKNOWN

        result = classify_status(status)
        logger.info(f"User {user_id} status in {channel_id}: {status} -> {result.value}")
        return result
