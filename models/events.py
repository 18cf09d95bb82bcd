"""
models/events.py
----------------
Inbound events and the context they arrive with.

Callback data strings ("open:detox", "menu:price", ...) are decoded exactly
once, in `CallbackAction.decode`; everything past the handlers layer works
with the structured values below.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class CallbackKind(str, Enum):
    SHOW_MAIN_MENU = "show_main_menu"
    PRICE = "menu:price"
    ABOUT = "menu:about-me"
    GET_GIFT = "menu:get-gift"
    BOOKING_INFO = "book_consultation_info"
    BOOK = "book_consultation"
    OPEN = "open"
    DOWNLOAD = "dl"
    UNKNOWN = "unknown"


# Kinds that carry a guide slug after a ':' separator.
_SLUG_KINDS = (CallbackKind.OPEN, CallbackKind.DOWNLOAD)

# Buttons on messages sent by earlier releases.
_LEGACY_ALIASES = {
    "menu:guides": CallbackKind.GET_GIFT,
}


@dataclass(frozen=True)
class CallbackAction:
    """
    A button press.

    Attributes:
        kind: Decoded action.
        slug: Guide slug for OPEN/DOWNLOAD.
        raw: The original callback data, kept for logging.
    """
    kind: CallbackKind
    slug: Optional[str] = None
    raw: str = ""

    @classmethod
    def decode(cls, data: Optional[str]) -> "CallbackAction":
        """Turn callback data into an action. Unrecognised data yields UNKNOWN."""
        data = data or ""

        for kind in _SLUG_KINDS:
            prefix = f"{kind.value}:"
            if data.startswith(prefix):
                slug = data[len(prefix):]
                if not slug:
                    break
                return cls(kind, slug, data)

        if data in _LEGACY_ALIASES:
            return cls(_LEGACY_ALIASES[data], raw=data)

        try:
            kind = CallbackKind(data)
        except ValueError:
            return cls(CallbackKind.UNKNOWN, raw=data)

        if kind in _SLUG_KINDS or kind is CallbackKind.UNKNOWN:
            return cls(CallbackKind.UNKNOWN, raw=data)
        return cls(kind, raw=data)

    def encode(self) -> str:
        """Callback data for an inline button."""
        if self.kind in _SLUG_KINDS:
            return f"{self.kind.value}:{self.slug}"
        return self.kind.value

    @classmethod
    def open(cls, slug: str) -> "CallbackAction":
        return cls(CallbackKind.OPEN, slug)

    @classmethod
    def download(cls, slug: str) -> "CallbackAction":
        return cls(CallbackKind.DOWNLOAD, slug)


@dataclass(frozen=True)
class StartCommand:
    """/start, optionally with a deep-link payload (a guide slug)."""
    payload: Optional[str] = None


@dataclass(frozen=True)
class SlashCommand:
    """Any other registered command, without the leading slash."""
    name: str


InboundEvent = Union[StartCommand, SlashCommand, CallbackAction]


@dataclass(frozen=True)
class UserProfile:
    """The Telegram user behind an event."""
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None

    @property
    def display_name(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) or "Без имени"

    @property
    def handle(self) -> Optional[str]:
        return f"@{self.username}" if self.username else None


@dataclass(frozen=True)
class EventOrigin:
    """
    Where an event came from.

    Attributes:
        chat_id: Chat to answer in.
        user: Sender, if Telegram provided one.
        message_id: Message carrying the pressed button (callbacks only).
        callback_query_id: Id to acknowledge (callbacks only).
    """
    chat_id: int
    user: Optional[UserProfile] = None
    message_id: Optional[int] = None
    callback_query_id: Optional[str] = None

    @property
    def is_callback(self) -> bool:
        return self.callback_query_id is not None
