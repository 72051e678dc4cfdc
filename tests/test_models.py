"""
Tests for Personally

Test strategy:
1. Unit tests for individual components (models, validator, classifier)
2. Flow tests for the route guard and membership rules
3. No database or network (everything here is pure)
"""

import pytest
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from personally.models.project import (
    CreateProjectRequest,
    InvitationStatus,
    InviteMemberRequest,
    Member,
    MemberRole,
    ProjectInvitation,
    ProjectRef,
    ProjectType,
    UpdateProjectRequest,
    Visibility,
)
from personally.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestProjectModels:
    """Tests for project-related Pydantic models."""

    def test_project_ref_from_camel_case_payload(self):
        """Test ProjectRef accepts the RPC layer's camelCase keys."""
        project = ProjectRef.model_validate({
            "id": "project-1",
            "title": "My Loan Project",
            "projectType": "loan",
            "userId": "user-1",
            "visibility": "shared",
            "members": [{"userId": "user-2", "role": "admin"}],
        })
        assert project.project_type == ProjectType.LOAN
        assert project.user_id == "user-1"
        assert project.visibility == Visibility.SHARED
        assert project.members[0].role == MemberRole.ADMIN

    def test_project_ref_defaults(self):
        """Test visibility defaults to private and members to empty."""
        project = ProjectRef(
            id="project-1",
            title="Defaults",
            project_type=ProjectType.GENERAL,
            user_id="user-1",
        )
        assert project.visibility == Visibility.PRIVATE
        assert project.members == []
        assert project.description is None

    def test_project_ref_null_members(self):
        """Test a null members join is treated as no members."""
        project = ProjectRef.model_validate({
            "id": "project-1",
            "title": "No join",
            "projectType": "splitwise",
            "userId": "user-1",
            "members": None,
        })
        assert project.members == []

    def test_project_ref_rejects_unknown_type(self):
        """Test that project types outside the enum are rejected."""
        with pytest.raises(ValueError):
            ProjectRef(
                id="project-1",
                title="Bad",
                project_type="savings",
                user_id="user-1",
            )

    def test_project_ref_is_immutable(self):
        """Test that the access core cannot modify a fetched project."""
        project = ProjectRef(
            id="project-1",
            title="Frozen",
            project_type=ProjectType.LOAN,
            user_id="user-1",
        )
        with pytest.raises(ValueError):
            project.title = "Changed"

    def test_project_ref_keeps_ids_verbatim(self):
        """Test owner and member IDs are not trimmed."""
        project = ProjectRef.model_validate({
            "id": "project-1",
            "title": "Padded",
            "projectType": "loan",
            "userId": "user-1 ",
            "members": [{"userId": " user-2"}],
        })
        assert project.user_id == "user-1 "
        assert project.has_member(" user-2") is True

    def test_has_member_and_get_member(self):
        """Test membership lookup helpers."""
        project = ProjectRef(
            id="project-1",
            title="Team",
            project_type=ProjectType.SPLITWISE,
            user_id="user-1",
            members=[Member(user_id="user-2", role=MemberRole.VIEWER)],
        )
        assert project.has_member("user-2") is True
        assert project.has_member("user-3") is False
        assert project.get_member("user-2").role == MemberRole.VIEWER
        assert project.get_member("user-3") is None

    def test_member_role_defaults_to_member(self):
        """Test Member role default."""
        assert Member(user_id="user-2").role == MemberRole.MEMBER


class TestRequestModels:
    """Tests for request payload validation."""

    def test_create_project_request_defaults(self):
        """Test CreateProjectRequest applies visibility and member defaults."""
        request = CreateProjectRequest(title="Trip", project_type="splitwise")
        assert request.visibility == Visibility.PRIVATE
        assert request.max_members == 50

    def test_create_project_request_strips_title(self):
        """Test that whitespace is stripped from the title."""
        request = CreateProjectRequest(title="  Trip  ", projectType="loan")
        assert request.title == "Trip"

    def test_create_project_request_rejects_blank_title(self):
        """Test that a blank title is rejected."""
        with pytest.raises(ValueError):
            CreateProjectRequest(title="   ", project_type="loan")

    def test_create_project_request_member_limit(self):
        """Test max_members cannot exceed the configured limit."""
        with pytest.raises(ValueError, match="max_members cannot exceed 1000"):
            CreateProjectRequest(title="Big", project_type="loan", max_members=5000)

    def test_update_project_request_tracks_unset_fields(self):
        """Test that only provided fields are dumped."""
        request = UpdateProjectRequest(title="Renamed")
        assert request.model_dump(exclude_unset=True) == {"title": "Renamed"}

    def test_invite_member_request_rejects_bad_email(self):
        """Test that invalid emails are rejected."""
        with pytest.raises(ValueError):
            InviteMemberRequest(invited_email="not-an-email")

    def test_invite_member_request_accepts_alias(self):
        """Test camelCase payload for invitations."""
        request = InviteMemberRequest.model_validate({
            "invitedEmail": "friend@mail.com",
            "invitedName": "Friend",
        })
        assert str(request.invited_email) == "friend@mail.com"
        assert request.invited_name == "Friend"


class TestInvitationModel:
    """Tests for ProjectInvitation helpers."""

    def _invitation(self, **overrides) -> ProjectInvitation:
        now = datetime(2025, 1, 1, tzinfo=timezone.utc)
        data = {
            "project_id": "project-1",
            "invited_by": "user-1",
            "invited_email": "friend@mail.com",
            "invited_at": now,
            "expires_at": now + timedelta(days=7),
        }
        data.update(overrides)
        return ProjectInvitation(**data)

    def test_invitation_defaults(self):
        """Test a new invitation is pending and unread."""
        invitation = self._invitation()
        assert invitation.status == InvitationStatus.PENDING
        assert invitation.notification_read is False
        assert invitation.notification_dismissed is False

    def test_invitation_expiry(self):
        """Test is_expired against a fixed clock."""
        invitation = self._invitation()
        assert invitation.is_expired(datetime(2025, 1, 5, tzinfo=timezone.utc)) is False
        assert invitation.is_expired(datetime(2025, 1, 9, tzinfo=timezone.utc)) is True

    def test_naive_timestamps_read_as_utc(self):
        """Test zone-less timestamps from the database become UTC."""
        invitation = ProjectInvitation.model_validate({
            "projectId": "project-1",
            "invitedBy": "user-1",
            "invitedEmail": "friend@mail.com",
            "invitedAt": "2025-01-01T00:00:00",
            "respondedAt": "2025-01-02T00:00:00",
            "expiresAt": "2025-01-08T00:00:00",
        })
        assert invitation.invited_at.tzinfo == timezone.utc
        assert invitation.responded_at.tzinfo == timezone.utc
        assert invitation.expires_at == datetime(2025, 1, 8, tzinfo=timezone.utc)
        assert invitation.is_expired(datetime(2025, 1, 5)) is False
        assert invitation.is_expired() is True

    def test_invitation_addressed_by_id_or_email(self):
        """Test invitation matching by user ID or email."""
        by_email = self._invitation()
        assert by_email.is_addressed_to("user-9", "friend@mail.com") is True
        assert by_email.is_addressed_to("user-9", "other@mail.com") is False

        by_id = self._invitation(invited_user_id="user-2")
        assert by_id.is_addressed_to("user-2", None) is True


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.ACCESS_GRANTED,
            description="Project access granted",
        )
        assert event.event_type == AuditEventType.ACCESS_GRANTED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.type_mismatch(
            project_id="project-1",
            user_id="user-1",
            expected="loan",
            actual="splitwise",
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "project_type_mismatch"
        assert log_dict["severity"] == "warning"
        assert log_dict["details"]["expected_type"] == "loan"

    def test_audit_event_to_row(self):
        """Test conversion to a flat row."""
        event = AuditEventBuilder.access_denied(
            project_id="project-1",
            user_id="user-2",
        )
        row = event.to_row()
        assert len(row) == 10  # Expected number of columns
        assert row[2] == "access_denied"
        assert row[4] == "project-1"
        assert row[5] == "user-2"

    def test_audit_event_builder_invitation_responded(self):
        """Test AuditEventBuilder.invitation_responded picks the event type."""
        invitation_id = uuid4()
        accepted = AuditEventBuilder.invitation_responded(
            project_id="project-1",
            user_id="user-2",
            invitation_id=invitation_id,
            accepted=True,
        )
        declined = AuditEventBuilder.invitation_responded(
            project_id="project-1",
            user_id="user-2",
            invitation_id=invitation_id,
            accepted=False,
        )
        assert accepted.event_type == AuditEventType.INVITATION_ACCEPTED
        assert declined.event_type == AuditEventType.INVITATION_DECLINED
        assert accepted.details["invitation_id"] == str(invitation_id)


class TestEnums:
    """Tests for the closed enums."""

    def test_project_type_values(self):
        """Test project type string values."""
        assert [t.value for t in ProjectType] == ["loan", "splitwise", "general"]

    def test_visibility_values(self):
        """Test visibility string values."""
        assert [v.value for v in Visibility] == ["private", "shared", "public"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
