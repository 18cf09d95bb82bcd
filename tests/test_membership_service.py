"""
Tests for channel membership classification.
"""

import asyncio

import pytest

from conftest import FakeTransport
from models.membership import MembershipStatus
from services.membership_service import MembershipService, classify_status


@pytest.mark.parametrize("status", ["member", "administrator", "creator"])
def test_member_statuses_pass(status):
    assert classify_status(status) is MembershipStatus.MEMBER


@pytest.mark.parametrize("status", ["left", "kicked", "restricted", "", "MEMBER"])
def test_other_statuses_do_not_pass(status):
    assert classify_status(status) is MembershipStatus.NOT_MEMBER


def test_check_calls_transport_once():
    transport = FakeTransport(member_status="administrator")
    status = asyncio.run(MembershipService(transport).check("@channel", 42))

    assert status is MembershipStatus.MEMBER
    assert transport.named("get_chat_member") == [{"channel_id": "@channel", "user_id": 42}]


def test_transport_error_is_unknown_and_not_retried():
    transport = FakeTransport(fail={"get_chat_member"})
    status = asyncio.run(MembershipService(transport).check("@channel", 42))

    assert status is MembershipStatus.UNKNOWN
    assert not status.is_member
    assert len(transport.named("get_chat_member")) == 1


def test_missing_user_is_unknown_without_lookup():
    transport = FakeTransport()
    status = asyncio.run(MembershipService(transport).check("@channel", None))

    assert status is MembershipStatus.UNKNOWN
    assert transport.calls == []


def test_only_member_is_member():
    assert MembershipStatus.MEMBER.is_member
    assert not MembershipStatus.NOT_MEMBER.is_member
    assert not MembershipStatus.UNKNOWN.is_member
