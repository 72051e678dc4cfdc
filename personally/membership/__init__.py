"""Membership rules package."""

from personally.membership.policy import (
    MembershipPolicy,
    member_role,
    pending_invitations_for,
)

__all__ = [
    "MembershipPolicy",
    "member_role",
    "pending_invitations_for",
]
