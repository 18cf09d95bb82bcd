"""
models/consultation.py
----------------------
Consultation request forwarded to the administrator. Never stored.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from models.events import UserProfile


class ConsultationStage(str, Enum):
    # The user opened the booking info screen.
    INFO = "info"
    # The user pressed "book".
    CONFIRMED = "confirmed"


@dataclass(frozen=True)
class ConsultationRequest:
    """
    Attributes:
        user_id: Telegram user ID.
        display_name: First and last name as shown in Telegram.
        handle: '@username' or None when the user has no username.
        stage: How far the user went.
    """
    user_id: int
    display_name: str
    stage: ConsultationStage
    handle: Optional[str] = None

    @classmethod
    def from_user(cls, user: UserProfile, stage: ConsultationStage) -> "ConsultationRequest":
        return cls(
            user_id=user.id,
            display_name=user.display_name,
            handle=user.handle,
            stage=stage,
        )
