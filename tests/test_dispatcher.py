"""
Tests for the interaction dispatcher: every transition, gated delivery,
acknowledgement accounting and error recovery.
"""

import asyncio

import pytest

from conftest import ADMIN_CHAT_ID, CHANNEL_ID, FakeTransport, press, write_catalog
from models.events import SlashCommand, StartCommand
from models.screen import Screen
from repositories.guide_repo import GuideRepository
from services.dispatcher import (
    BOOKING_SENT_NOTICE,
    DELIVERY_FAILED_TEXT,
    FILE_NOT_FOUND_ALERT,
    GENERIC_FAILURE_ALERT,
    GUIDE_NOT_FOUND_ALERT,
    SENDING_FILE_NOTICE,
)
from services.presentation_service import (
    BACK_TO_MENU_BUTTON,
    BOOKING_CONFIRMED_TEXT,
    BOOKING_INFO_TEXT,
    EMPTY_GUIDES_TEXT,
    MAIN_MENU_TEXT,
    PRICE_TEXT,
    PresentationContext,
    build_screen,
)


class BrokenRepository(GuideRepository):
    def find_by_slug(self, slug):
        raise RuntimeError("disk on fire")


def _acks(transport):
    return transport.named("answer_callback")


# ── Gated delivery ────────────────────────────────────────

def test_member_gets_document_then_gift_unlocked(transport, make_dispatcher, callback_origin, repo):
    press(make_dispatcher(transport), "dl:detox", callback_origin)

    assert transport.call_names == [
        "get_chat_member", "answer_callback", "send_document", "edit_message_text",
    ]
    assert transport.named("get_chat_member") == [{"channel_id": CHANNEL_ID, "user_id": 42}]
    assert _acks(transport)[0]["text"] == SENDING_FILE_NOTICE

    document = transport.named("send_document")[0]
    assert document["filename"] == "detox.pdf"
    assert document["caption"] == "Detox Guide"
    assert document["data"] == b"%PDF-1.4 detox"

    expected = build_screen(
        Screen.gift_unlocked("detox"),
        PresentationContext(channel_url="https://t.me/healthy_channel", guide=repo.find_by_slug("detox")),
    )
    edit = transport.named("edit_message_text")[0]
    assert edit["text"] == expected.text
    assert edit["reply_markup"] == expected.layout


@pytest.mark.parametrize("status", ["left", "kicked", "restricted"])
def test_non_member_gets_prompt_and_no_document(status, make_dispatcher, callback_origin):
    transport = FakeTransport(member_status=status)
    press(make_dispatcher(transport), "dl:detox", callback_origin)

    assert "send_document" not in transport.call_names
    assert "edit_message_text" not in transport.call_names
    assert _acks(transport) == [{"callback_query_id": "cb-1", "text": None, "show_alert": False}]

    prompt = transport.named("send_message")
    assert len(prompt) == 1
    assert "не подписаны" in prompt[0]["text"]
    verify = prompt[0]["reply_markup"][0][-1]
    assert verify.action == "dl:detox"


def test_failed_membership_lookup_fails_closed(make_dispatcher, callback_origin):
    transport = FakeTransport(fail={"get_chat_member"})
    press(make_dispatcher(transport), "dl:detox", callback_origin)

    assert "send_document" not in transport.call_names
    assert len(transport.named("send_message")) == 1
    assert len(_acks(transport)) == 1


def test_unknown_slug_only_alerts(transport, make_dispatcher, callback_origin):
    press(make_dispatcher(transport), "dl:unknownslug", callback_origin)

    assert transport.calls == [
        ("answer_callback", {"callback_query_id": "cb-1", "text": GUIDE_NOT_FOUND_ALERT, "show_alert": True}),
    ]


def test_missing_file_alerts_without_sending(transport, make_dispatcher, callback_origin, storage):
    (storage / "detox.pdf").unlink()
    press(make_dispatcher(transport), "dl:detox", callback_origin)

    assert transport.call_names == ["get_chat_member", "answer_callback"]
    assert _acks(transport)[0] == {
        "callback_query_id": "cb-1", "text": FILE_NOT_FOUND_ALERT, "show_alert": True,
    }


def test_failed_upload_reports_error_and_keeps_screen(make_dispatcher, callback_origin):
    transport = FakeTransport(fail={"send_document"})
    press(make_dispatcher(transport), "dl:detox", callback_origin)

    assert "edit_message_text" not in transport.call_names
    assert transport.named("send_message")[-1]["text"] == DELIVERY_FAILED_TEXT
    assert len(_acks(transport)) == 1


# ── Guide preview ─────────────────────────────────────────

def test_open_shows_guide_detail(transport, make_dispatcher, callback_origin):
    press(make_dispatcher(transport), "open:detox", callback_origin)

    assert transport.call_names == ["answer_callback", "edit_message_text"]
    edit = transport.named("edit_message_text")[0]
    assert "<b>Detox Guide</b>" in edit["text"]
    assert edit["reply_markup"][0][-1].action == "dl:detox"


def test_open_unknown_slug_alerts(transport, make_dispatcher, callback_origin):
    press(make_dispatcher(transport), "open:nope", callback_origin)

    assert transport.call_names == ["answer_callback"]
    assert _acks(transport)[0]["text"] == GUIDE_NOT_FOUND_ALERT
    assert _acks(transport)[0]["show_alert"] is True


# ── /start and commands ───────────────────────────────────

def test_start_with_known_payload_sends_guide_detail(transport, make_dispatcher, command_origin):
    asyncio.run(make_dispatcher(transport).dispatch(StartCommand(payload="detox"), command_origin))

    assert transport.call_names == ["send_message"]
    message = transport.named("send_message")[0]
    assert "Detox Guide" in message["text"]
    assert message["reply_markup"][0][-1].action == "dl:detox"


def test_start_with_unknown_payload_sends_main_menu(transport, make_dispatcher, command_origin):
    asyncio.run(make_dispatcher(transport).dispatch(StartCommand(payload="gone"), command_origin))

    expected = build_screen(Screen.main_menu(), PresentationContext(payload_slug="gone"))
    assert transport.named("send_message")[0]["text"] == expected.text


def test_start_without_payload_sends_main_menu(transport, make_dispatcher, command_origin):
    asyncio.run(make_dispatcher(transport).dispatch(StartCommand(), command_origin))

    assert transport.call_names == ["send_message"]
    assert transport.named("send_message")[0]["text"] == MAIN_MENU_TEXT


@pytest.mark.parametrize("name, marker", [
    ("price", PRICE_TEXT),
    ("about_me", "Обо мне"),
    ("whatever", MAIN_MENU_TEXT),
])
def test_slash_commands(name, marker, transport, make_dispatcher, command_origin):
    asyncio.run(make_dispatcher(transport).dispatch(SlashCommand(name), command_origin))

    assert transport.call_names == ["send_message"]
    assert marker in transport.named("send_message")[0]["text"]


def test_guides_command_lists_guides(transport, make_dispatcher, command_origin):
    asyncio.run(make_dispatcher(transport).dispatch(SlashCommand("guides"), command_origin))

    message = transport.named("send_message")[0]
    assert "• Detox Guide" in message["text"]
    assert message["reply_markup"][0][0].action == "open:detox"


def test_guides_command_with_empty_catalog(transport, make_dispatcher, command_origin, catalog_path, storage):
    write_catalog(catalog_path, [])
    asyncio.run(make_dispatcher(transport).dispatch(SlashCommand("guides"), command_origin))

    message = transport.named("send_message")[0]
    assert message["text"] == EMPTY_GUIDES_TEXT
    assert message["reply_markup"] == ((BACK_TO_MENU_BUTTON,),)


# ── Menu callbacks ────────────────────────────────────────

@pytest.mark.parametrize("data, marker", [
    ("show_main_menu", MAIN_MENU_TEXT),
    ("menu:price", PRICE_TEXT),
    ("menu:about-me", "Обо мне"),
    ("menu:get-gift", "Detox Guide"),
    ("menu:guides", "Detox Guide"),
])
def test_menu_callbacks_ack_first_then_edit(data, marker, transport, make_dispatcher, callback_origin):
    press(make_dispatcher(transport), data, callback_origin)

    assert transport.call_names == ["answer_callback", "edit_message_text"]
    assert marker in transport.named("edit_message_text")[0]["text"]


def test_edit_failure_falls_back_to_new_message(make_dispatcher, callback_origin):
    transport = FakeTransport(fail={"edit_message_text"})
    press(make_dispatcher(transport), "show_main_menu", callback_origin)

    assert transport.call_names == ["answer_callback", "edit_message_text", "send_message"]
    assert transport.named("send_message")[0]["text"] == MAIN_MENU_TEXT


def test_unknown_callback_is_acknowledged_and_ignored(transport, make_dispatcher, callback_origin):
    press(make_dispatcher(transport), "something:else", callback_origin)

    assert transport.calls == [
        ("answer_callback", {"callback_query_id": "cb-1", "text": None, "show_alert": False}),
    ]


# ── Consultation booking ──────────────────────────────────

def test_booking_info_notifies_admin(transport, make_dispatcher, callback_origin):
    press(make_dispatcher(transport), "book_consultation_info", callback_origin)

    assert transport.call_names == ["answer_callback", "send_message", "edit_message_text"]
    assert transport.named("send_message")[0]["chat_id"] == ADMIN_CHAT_ID
    assert transport.named("edit_message_text")[0]["text"] == BOOKING_INFO_TEXT


def test_book_consultation_notifies_admin(transport, make_dispatcher, callback_origin):
    press(make_dispatcher(transport), "book_consultation", callback_origin)

    assert _acks(transport)[0]["text"] == BOOKING_SENT_NOTICE
    admin = transport.named("send_message")[0]
    assert admin["chat_id"] == ADMIN_CHAT_ID
    assert "Новая заявка" in admin["text"]
    assert transport.named("edit_message_text")[0]["text"] == BOOKING_CONFIRMED_TEXT


def test_book_consultation_without_admin(transport, make_dispatcher, callback_origin):
    press(make_dispatcher(transport, admin_chat_id=None), "book_consultation", callback_origin)

    assert transport.call_names == ["answer_callback", "edit_message_text"]
    assert transport.named("edit_message_text")[0]["text"] == BOOKING_CONFIRMED_TEXT


def test_admin_failure_does_not_block_confirmation(make_dispatcher, callback_origin):
    transport = FakeTransport(fail={"send_message"})
    press(make_dispatcher(transport), "book_consultation", callback_origin)

    assert transport.named("edit_message_text")[0]["text"] == BOOKING_CONFIRMED_TEXT


# ── Acknowledgement accounting and errors ─────────────────

@pytest.mark.parametrize("data", [
    "show_main_menu", "menu:price", "menu:about-me", "menu:get-gift",
    "book_consultation_info", "book_consultation",
    "open:detox", "open:nope", "dl:detox", "dl:nope", "", "garbage",
])
@pytest.mark.parametrize("fail", [(), ("edit_message_text", "send_message"), ("answer_callback",)])
def test_every_callback_is_acknowledged_exactly_once(data, fail, make_dispatcher, callback_origin):
    transport = FakeTransport(fail=fail)
    press(make_dispatcher(transport), data, callback_origin)

    assert len(_acks(transport)) == 1


def test_unexpected_error_becomes_failure_alert(transport, make_dispatcher, callback_origin, catalog_path, storage):
    dispatcher = make_dispatcher(transport, guide_repo=BrokenRepository(catalog_path, storage))
    press(dispatcher, "dl:detox", callback_origin)

    assert transport.calls == [
        ("answer_callback", {"callback_query_id": "cb-1", "text": GENERIC_FAILURE_ALERT, "show_alert": True}),
    ]


def test_unexpected_error_on_command_is_swallowed(make_dispatcher, command_origin):
    transport = FakeTransport(fail={"send_message"})
    asyncio.run(make_dispatcher(transport).dispatch(SlashCommand("price"), command_origin))

    assert transport.call_names == ["send_message"]


def test_ack_failure_does_not_stop_render(make_dispatcher, callback_origin):
    transport = FakeTransport(fail={"answer_callback"})
    press(make_dispatcher(transport), "menu:price", callback_origin)

    assert transport.call_names == ["answer_callback", "edit_message_text"]


def test_dispatch_does_not_mutate_between_events(transport, make_dispatcher, callback_origin):
    dispatcher = make_dispatcher(transport)
    press(dispatcher, "menu:price", callback_origin)
    first = transport.named("edit_message_text")[0]
    press(dispatcher, "open:detox", callback_origin)
    press(dispatcher, "menu:price", callback_origin)

    assert transport.named("edit_message_text")[-1] == first
