"""
models/membership.py
--------------------
Result of a channel membership check.
"""

from enum import Enum


class MembershipStatus(str, Enum):
    MEMBER = "member"
    NOT_MEMBER = "not_member"
    # The lookup failed or the bot cannot see the user/channel.
    UNKNOWN = "unknown"

    @property
    def is_member(self) -> bool:
        """Only a confirmed member passes the gate; UNKNOWN fails closed."""
        return self is MembershipStatus.MEMBER
