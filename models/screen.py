"""
models/screen.py
----------------
Screens the bot can render and the button layouts that go with them.

A Screen is a plain value: rendering the same Screen against the same
catalog snapshot always yields the same RenderedScreen.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class ScreenKind(str, Enum):
    MAIN_MENU = "main_menu"
    PRICE = "price"
    ABOUT = "about"
    GUIDE_LIST = "guide_list"
    GUIDE_DETAIL = "guide_detail"
    BOOKING_INFO = "booking_info"
    BOOKING_CONFIRMED = "booking_confirmed"
    GIFT_UNLOCKED = "gift_unlocked"


@dataclass(frozen=True)
class Screen:
    """
    A conversational state.

    Attributes:
        kind: Which screen this is.
        slug: Guide slug for GUIDE_DETAIL and GIFT_UNLOCKED, None otherwise.
    """
    kind: ScreenKind
    slug: Optional[str] = None

    @classmethod
    def main_menu(cls) -> "Screen":
        return cls(ScreenKind.MAIN_MENU)

    @classmethod
    def price(cls) -> "Screen":
        return cls(ScreenKind.PRICE)

    @classmethod
    def about(cls) -> "Screen":
        return cls(ScreenKind.ABOUT)

    @classmethod
    def guide_list(cls) -> "Screen":
        return cls(ScreenKind.GUIDE_LIST)

    @classmethod
    def guide_detail(cls, slug: str) -> "Screen":
        return cls(ScreenKind.GUIDE_DETAIL, slug)

    @classmethod
    def booking_info(cls) -> "Screen":
        return cls(ScreenKind.BOOKING_INFO)

    @classmethod
    def booking_confirmed(cls) -> "Screen":
        return cls(ScreenKind.BOOKING_CONFIRMED)

    @classmethod
    def gift_unlocked(cls, slug: str) -> "Screen":
        return cls(ScreenKind.GIFT_UNLOCKED, slug)

    def __str__(self) -> str:
        return f"{self.kind.value}({self.slug})" if self.slug else self.kind.value


@dataclass(frozen=True)
class CallbackButton:
    """Inline button that sends `action` back to the bot when pressed."""
    label: str
    action: str


@dataclass(frozen=True)
class LinkButton:
    """Inline button that opens `url` on the client."""
    label: str
    url: str


Button = Union[CallbackButton, LinkButton]
ButtonRow = tuple[Button, ...]
ButtonLayout = tuple[ButtonRow, ...]


@dataclass(frozen=True)
class RenderedScreen:
    """Text body plus inline keyboard, ready for the transport."""
    text: str
    layout: ButtonLayout = ()
    parse_mode: Optional[str] = "HTML"
