"""
Membership and Invitation Rules

Who may change a project, invite people, remove members or leave.

DESIGN DECISION: These rules are pure. They take the records the caller
already fetched (project with members, invitations) and either raise or
return the new records to persist. Nothing here talks to a database.

Role summary:
- owner: everything; cannot leave their own project
- admin member: update project, invite users
- owner-role member: invite users
- member / viewer: open the project, leave it
"""

from collections.abc import Iterable
from datetime import datetime, timedelta
from typing import Optional

from personally.access.errors import (
    ConflictError,
    InvalidOperationError,
    InvitationError,
    NotFoundError,
    PermissionDeniedError,
)
from personally.audit import AuditLogger
from personally.config import AppSettings, get_settings
from personally.models.project import (
    InvitationStatus,
    InviteMemberRequest,
    Member,
    MemberRole,
    ProjectInvitation,
    ProjectRef,
    ProjectType,
    UpdateProjectRequest,
    utcnow,
)


_INVITER_ROLES = (MemberRole.OWNER, MemberRole.ADMIN)


def member_role(project: ProjectRef, user_id: str) -> Optional[MemberRole]:
    """
    Effective role of a user in a project.

    The project owner is always OWNER, whether or not a member row exists.
    Returns None for users with no relationship to the project.
    """
    if project.user_id == user_id:
        return MemberRole.OWNER
    member = project.get_member(user_id)
    return member.role if member else None


def pending_invitations_for(
    invitations: Iterable[ProjectInvitation],
    user_id: str,
    user_email: str,
    now: Optional[datetime] = None,
) -> list[ProjectInvitation]:
    """
    Invitations to show in a user's notification panel.

    Pending and unexpired, addressed either to the user's ID or, for
    invitations not yet linked to an account, to the user's email.
    """
    now = now or utcnow()
    return [
        invitation for invitation in invitations
        if invitation.status == InvitationStatus.PENDING
        and not invitation.is_expired(now)
        and (
            invitation.invited_user_id == user_id
            or (
                invitation.invited_user_id is None
                and invitation.invited_email == user_email
            )
        )
    ]


class MembershipPolicy:
    """
    Applies the membership rules and audits refusals and invitation changes.
    """

    def __init__(
        self,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[AppSettings] = None,
    ):
        self._audit_logger = audit_logger
        self._settings = settings or get_settings()

    def _deny(self, project: ProjectRef, user_id: str, action: str, message: str):
        if self._audit_logger:
            self._audit_logger.log_permission_denied(
                project_id=project.id,
                user_id=user_id,
                action=action,
                reason=message,
            )
        raise PermissionDeniedError(message)

    # -------------------------------------------------------------------------
    # Project changes
    # -------------------------------------------------------------------------

    def ensure_can_update(self, project: ProjectRef, user_id: str) -> None:
        """Owner or admin member only."""
        if member_role(project, user_id) not in (MemberRole.OWNER, MemberRole.ADMIN):
            self._deny(
                project, user_id, "update_project",
                "You do not have permission to update this project",
            )

    @staticmethod
    def ensure_project_type_unchanged(
        project: ProjectRef,
        new_type: Optional[ProjectType],
    ) -> None:
        """The project type is fixed at creation."""
        if new_type is not None and new_type != project.project_type:
            raise InvalidOperationError("Project type cannot be changed after creation")

    def ensure_update_allowed(
        self,
        project: ProjectRef,
        user_id: str,
        request: UpdateProjectRequest,
    ) -> dict:
        """
        Check an update request end to end.

        Returns:
            The fields to write (project_type never included)
        """
        self.ensure_can_update(project, user_id)
        self.ensure_project_type_unchanged(project, request.project_type)
        return request.model_dump(exclude_unset=True, exclude={"project_type"})

    def ensure_can_delete(self, project: ProjectRef, user_id: str) -> None:
        if project.user_id != user_id:
            self._deny(
                project, user_id, "delete_project",
                "Only the project owner can delete the project",
            )

    # -------------------------------------------------------------------------
    # Invitations
    # -------------------------------------------------------------------------

    def ensure_can_invite(
        self,
        project: ProjectRef,
        user_id: str,
        invited_email: str,
        pending_invitations: Iterable[ProjectInvitation] = (),
    ) -> None:
        """
        Owner, or a member with an owner/admin role, may invite.
        Only one pending invitation per email per project.
        """
        if project.user_id != user_id:
            member = project.get_member(user_id)
            if member is None or member.role not in _INVITER_ROLES:
                self._deny(
                    project, user_id, "invite_user",
                    "You do not have permission to invite users",
                )

        for invitation in pending_invitations:
            if (
                invitation.project_id == project.id
                and invitation.invited_email == invited_email
                and invitation.status == InvitationStatus.PENDING
            ):
                raise ConflictError("An invitation has already been sent to this email")

    def create_invitation(
        self,
        project: ProjectRef,
        invited_by: str,
        request: InviteMemberRequest,
        invited_user_id: Optional[str] = None,
        pending_invitations: Iterable[ProjectInvitation] = (),
        now: Optional[datetime] = None,
    ) -> ProjectInvitation:
        """
        Build a new pending invitation.

        Args:
            invited_user_id: Account ID when the email belongs to an existing
                             user, so the invitation shows as a notification
        """
        invited_email = str(request.invited_email)
        self.ensure_can_invite(project, invited_by, invited_email, pending_invitations)

        now = now or utcnow()
        invitation = ProjectInvitation(
            project_id=project.id,
            invited_by=invited_by,
            invited_user_id=invited_user_id,
            invited_email=invited_email,
            invited_name=request.invited_name,
            invited_at=now,
            expires_at=now + timedelta(days=self._settings.invitation_expiry_days),
        )

        if self._audit_logger:
            self._audit_logger.log_invitation_created(
                project_id=project.id,
                invited_by=invited_by,
                invitation_id=invitation.id,
                invited_email=invited_email,
            )
        return invitation

    def accept_invitation(
        self,
        invitation: ProjectInvitation,
        user_id: str,
        user_email: Optional[str],
        project: ProjectRef,
        now: Optional[datetime] = None,
    ) -> tuple[Member, ProjectInvitation]:
        """
        Accept an invitation.

        Returns:
            (new member row, updated invitation)
        """
        now = now or utcnow()

        if invitation.status != InvitationStatus.PENDING:
            raise InvitationError("Invitation is no longer pending")
        if invitation.is_expired(now):
            raise InvitationError("Invitation has expired")
        if not invitation.is_addressed_to(user_id, user_email):
            raise PermissionDeniedError("You are not authorized to accept this invitation")
        if project.has_member(user_id):
            raise ConflictError("You are already a member of this project")

        member = Member(
            user_id=user_id,
            role=MemberRole.MEMBER,
            project_id=invitation.project_id,
            joined_at=now,
            added_by=invitation.invited_by,
        )
        accepted = invitation.model_copy(update={
            "status": InvitationStatus.ACCEPTED,
            "responded_at": now,
            "invited_user_id": user_id,
        })

        if self._audit_logger:
            self._audit_logger.log_invitation_responded(
                project_id=invitation.project_id,
                user_id=user_id,
                invitation_id=invitation.id,
                accepted=True,
            )
        return member, accepted

    def decline_invitation(
        self,
        invitation: ProjectInvitation,
        user_id: str,
        user_email: Optional[str],
        now: Optional[datetime] = None,
    ) -> ProjectInvitation:
        """Decline an invitation. Expired invitations may still be declined."""
        if invitation.status != InvitationStatus.PENDING:
            raise InvitationError("Invitation is no longer pending")
        if not invitation.is_addressed_to(user_id, user_email):
            raise PermissionDeniedError("You are not authorized to decline this invitation")

        declined = invitation.model_copy(update={
            "status": InvitationStatus.DECLINED,
            "responded_at": now or utcnow(),
            "invited_user_id": user_id,
        })

        if self._audit_logger:
            self._audit_logger.log_invitation_responded(
                project_id=invitation.project_id,
                user_id=user_id,
                invitation_id=invitation.id,
                accepted=False,
            )
        return declined

    @staticmethod
    def dismiss_notification(
        invitation: ProjectInvitation,
        user_id: str,
        user_email: Optional[str],
        mark_as_read: bool = True,
        dismiss: bool = False,
    ) -> ProjectInvitation:
        """Update the notification flags of an invitation addressed to the user."""
        if not invitation.is_addressed_to(user_id, user_email):
            raise PermissionDeniedError("You are not authorized to dismiss this notification")

        update = {}
        if mark_as_read:
            update["notification_read"] = True
        if dismiss:
            update["notification_dismissed"] = True
        return invitation.model_copy(update=update)

    def ensure_can_cancel_invitation(
        self,
        project: ProjectRef,
        invitation: ProjectInvitation,
        user_id: str,
    ) -> None:
        """Project owner or the user who sent the invitation."""
        if project.user_id != user_id and invitation.invited_by != user_id:
            self._deny(
                project, user_id, "cancel_invitation",
                "You do not have permission to cancel this invitation",
            )

    # -------------------------------------------------------------------------
    # Members
    # -------------------------------------------------------------------------

    def ensure_can_remove_member(
        self,
        project: ProjectRef,
        user_id: str,
        member: Optional[Member],
    ) -> None:
        if project.user_id != user_id:
            self._deny(
                project, user_id, "remove_member",
                "Only the project owner can remove members",
            )
        if member is None:
            raise NotFoundError("Member not found")
        if member.role == MemberRole.OWNER:
            self._deny(
                project, user_id, "remove_member",
                "Cannot remove the project owner",
            )

        if self._audit_logger:
            self._audit_logger.log_member_removed(
                project_id=project.id,
                removed_by=user_id,
                member_user_id=member.user_id,
            )

    def ensure_can_leave(self, project: ProjectRef, user_id: str) -> Member:
        """
        Check a user may leave a project.

        Returns:
            The membership row to delete
        """
        if project.user_id == user_id:
            self._deny(
                project, user_id, "leave_project",
                "Project owners cannot leave their own project. Delete the project instead.",
            )
        member = project.get_member(user_id)
        if member is None:
            raise NotFoundError("You are not a member of this project")

        if self._audit_logger:
            self._audit_logger.log_member_left(project_id=project.id, user_id=user_id)
        return member
