"""
Shared fixtures: a recording fake transport, a temporary guides catalog and
ready-made event origins.
"""

import asyncio
import json

import pytest

from clients.transport import Transport, TransportError
from models.events import CallbackAction, EventOrigin, UserProfile
from repositories.guide_repo import GuideRepository
from services.booking_service import BookingService
from services.dispatcher import InteractionDispatcher

CHANNEL_ID = "@healthy_channel"
CHANNEL_URL = "https://t.me/healthy_channel"
ADMIN_CHAT_ID = 999


class FakeTransport(Transport):
    """Records every call; operations listed in `fail` raise TransportError."""

    def __init__(self, member_status: str = "member", fail=()):
        self.member_status = member_status
        self.fail = set(fail)
        self.calls: list[tuple[str, dict]] = []

    def _record(self, name: str, **kwargs) -> None:
        self.calls.append((name, kwargs))
        if name in self.fail:
            raise TransportError(f"{name} failed")

    def named(self, name: str) -> list[dict]:
        return [kwargs for call, kwargs in self.calls if call == name]

    @property
    def call_names(self) -> list[str]:
        return [call for call, _ in self.calls]

    async def send_message(self, chat_id, text, reply_markup=None, parse_mode=None):
        self._record("send_message", chat_id=chat_id, text=text,
                     reply_markup=reply_markup, parse_mode=parse_mode)

    async def edit_message_text(self, chat_id, message_id, text, reply_markup=None, parse_mode=None):
        self._record("edit_message_text", chat_id=chat_id, message_id=message_id, text=text,
                     reply_markup=reply_markup, parse_mode=parse_mode)

    async def answer_callback(self, callback_query_id, text=None, show_alert=False):
        self._record("answer_callback", callback_query_id=callback_query_id,
                     text=text, show_alert=show_alert)

    async def get_chat_member(self, channel_id, user_id):
        self._record("get_chat_member", channel_id=channel_id, user_id=user_id)
        return self.member_status

    async def send_document(self, chat_id, stream, filename, caption=None):
        self._record("send_document", chat_id=chat_id, filename=filename,
                     caption=caption, data=stream.read())


def write_catalog(path, entries) -> None:
    path.write_text(json.dumps(entries, ensure_ascii=False), encoding="utf-8")


def press(dispatcher, data, origin) -> None:
    """Simulate a button press carrying `data`."""
    asyncio.run(dispatcher.dispatch(CallbackAction.decode(data), origin))


@pytest.fixture
def storage(tmp_path):
    root = tmp_path / "guides"
    root.mkdir()
    (root / "detox.pdf").write_bytes(b"%PDF-1.4 detox")
    return root


@pytest.fixture
def catalog_path(tmp_path):
    path = tmp_path / "guides.json"
    write_catalog(path, [{"slug": "detox", "title": "Detox Guide", "file": "detox.pdf"}])
    return path


@pytest.fixture
def repo(catalog_path, storage):
    return GuideRepository(catalog_path, storage)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def user():
    return UserProfile(id=42, first_name="Anna", last_name="Ivanova", username="anna")


@pytest.fixture
def callback_origin(user):
    return EventOrigin(chat_id=100, user=user, message_id=7, callback_query_id="cb-1")


@pytest.fixture
def command_origin(user):
    return EventOrigin(chat_id=100, user=user)


@pytest.fixture
def make_dispatcher(repo):
    def make(transport, guide_repo=None, admin_chat_id=ADMIN_CHAT_ID):
        return InteractionDispatcher(
            transport,
            guide_repo=guide_repo or repo,
            booking=BookingService(transport, admin_chat_id=admin_chat_id),
            channel_id=CHANNEL_ID,
            channel_url=CHANNEL_URL,
        )
    return make
