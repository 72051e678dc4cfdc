"""
Core Data Models for Personally Projects

These models define the schemas for project data handed to the access core.
They are designed to:
1. Turn loosely typed RPC payloads into closed enums at the boundary
2. Provide clear validation error messages
3. Stay immutable - the access core judges projects, it never edits them

DESIGN DECISION: Project type, visibility, role and invitation status are
closed enums rather than free strings. An unknown value is rejected when
the model is built instead of silently falling through a default branch.

The RPC layer speaks camelCase (projectType, userId). Every model accepts
both the camelCase alias and the snake_case field name.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
)

from personally.config import get_settings


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Read a naive timestamp as UTC. Aware values are returned unchanged."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ProjectType(str, Enum):
    """
    Kinds of project a user can create.

    DESIGN DECISION: The type is fixed at creation. Every dashboard URL
    carries it as a path segment, so changing it would break links.
    """
    LOAN = "loan"
    SPLITWISE = "splitwise"
    GENERAL = "general"


class Visibility(str, Enum):
    """
    Who may open a project without being owner or member.

    Only PRIVATE blocks outsiders in the access core.
    """
    PRIVATE = "private"
    SHARED = "shared"
    PUBLIC = "public"


class MemberRole(str, Enum):
    """Role of a collaborator inside a project."""
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"
    VIEWER = "viewer"


class InvitationStatus(str, Enum):
    """Lifecycle of a project invitation."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    EXPIRED = "expired"


class ErrorType(str, Enum):
    """Presentation taxonomy for access failures."""
    NOT_FOUND = "not-found"
    FORBIDDEN = "forbidden"
    TYPE_MISMATCH = "type-mismatch"
    UNKNOWN = "unknown"


# =============================================================================
# PROJECT MODELS
# =============================================================================

class Member(BaseModel):
    """
    A collaborator on a project.

    The access check only asks whether a member row exists for a user.
    Role matters for the membership rules (update, invite, remove).
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    user_id: str = Field(
        ...,
        alias="userId",
        min_length=1,
        description="ID of the member user"
    )
    role: MemberRole = Field(
        default=MemberRole.MEMBER,
        description="Role within the project"
    )
    id: Optional[str] = Field(
        default=None,
        description="Membership row ID, when known"
    )
    project_id: Optional[str] = Field(
        default=None,
        alias="projectId",
    )
    joined_at: Optional[datetime] = Field(
        default=None,
        alias="joinedAt",
    )
    added_by: Optional[str] = Field(
        default=None,
        alias="addedBy",
        description="User who added this member"
    )


class ProjectRef(BaseModel):
    """
    A project as fetched by the caller.

    CRITICAL: The access core never creates, mutates or persists these.
    They are built from query results, judged once, and discarded.
    IDs are kept exactly as stored; ownership is an exact string match.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    id: str = Field(
        ...,
        min_length=1,
        description="Project ID"
    )
    title: str = Field(
        ...,
        description="Project title"
    )
    description: Optional[str] = None
    project_type: ProjectType = Field(
        ...,
        alias="projectType",
        description="Kind of project"
    )
    user_id: str = Field(
        ...,
        alias="userId",
        description="Owner of the project"
    )
    visibility: Visibility = Field(
        default=Visibility.PRIVATE,
        description="Visibility policy"
    )
    members: list[Member] = Field(
        default_factory=list,
        description="Project collaborators"
    )
    max_members: Optional[int] = Field(
        default=None,
        alias="maxMembers",
        ge=1,
    )

    @field_validator('members', mode='before')
    @classmethod
    def default_missing_members(cls, v):
        """Queries without a members join return null; treat as no members."""
        return [] if v is None else v

    def has_member(self, user_id: str) -> bool:
        """Is there a membership row for this user?"""
        return any(member.user_id == user_id for member in self.members)

    def get_member(self, user_id: str) -> Optional[Member]:
        for member in self.members:
            if member.user_id == user_id:
                return member
        return None


class AccessibleProject(BaseModel):
    """Client-safe view of a project after a successful access check."""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: Optional[str] = None
    project_type: ProjectType
    user_id: str
    is_owner: bool


class AccessResult(BaseModel):
    """
    Outcome of a successful access check.

    NOTE: has_access reports the owner/member computation only.
    It can be False for shared or public projects the user merely views.
    """
    model_config = ConfigDict(frozen=True)

    project: AccessibleProject
    has_access: bool


class ClassifiedError(BaseModel):
    """A failure mapped onto the presentation taxonomy."""
    model_config = ConfigDict(frozen=True)

    type: ErrorType
    message: str


class ProjectTypeOption(BaseModel):
    """An entry in the "create new project" type picker."""
    model_config = ConfigDict(frozen=True)

    type: ProjectType
    name: str
    description: str
    icon: str


# =============================================================================
# INVITATION MODELS
# =============================================================================

class ProjectInvitation(BaseModel):
    """
    An invitation to join a project.

    Existing users are linked by invited_user_id so they see a dashboard
    notification. Unknown emails are linked on acceptance.

    Naive timestamps (as read from the invitations table) are taken as UTC.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: UUID = Field(
        default_factory=uuid4,
        description="Invitation ID"
    )
    project_id: str = Field(
        ...,
        alias="projectId",
    )
    invited_by: str = Field(
        ...,
        alias="invitedBy",
        description="User who sent the invitation"
    )
    invited_user_id: Optional[str] = Field(
        default=None,
        alias="invitedUserId",
    )
    invited_email: str = Field(
        ...,
        alias="invitedEmail",
    )
    invited_name: Optional[str] = Field(
        default=None,
        alias="invitedName",
    )
    status: InvitationStatus = Field(
        default=InvitationStatus.PENDING
    )
    notification_read: bool = Field(
        default=False,
        alias="notificationRead",
    )
    notification_dismissed: bool = Field(
        default=False,
        alias="notificationDismissed",
    )
    invited_at: datetime = Field(
        default_factory=utcnow,
        alias="invitedAt",
    )
    responded_at: Optional[datetime] = Field(
        default=None,
        alias="respondedAt",
    )
    expires_at: datetime = Field(
        ...,
        alias="expiresAt",
    )

    @field_validator('invited_at', 'responded_at', 'expires_at')
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Database timestamps carry no zone; they are stored in UTC."""
        return as_utc(v) if v is not None else v

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return as_utc(now or utcnow()) > self.expires_at

    def is_addressed_to(self, user_id: str, user_email: Optional[str]) -> bool:
        """Was this invitation sent to the given user (by ID or by email)?"""
        return self.invited_user_id == user_id or (
            user_email is not None and self.invited_email == user_email
        )


# =============================================================================
# REQUEST MODELS
# =============================================================================

class CreateProjectRequest(BaseModel):
    """Payload for creating a project."""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Project title"
    )
    description: Optional[str] = Field(
        default=None,
        max_length=1000,
    )
    project_type: ProjectType = Field(
        ...,
        alias="projectType",
    )
    visibility: Visibility = Field(
        default=Visibility.PRIVATE
    )
    max_members: int = Field(
        default_factory=lambda: get_settings().default_max_members,
        alias="maxMembers",
        ge=1,
    )

    @field_validator('max_members')
    @classmethod
    def validate_member_limit(cls, v: int) -> int:
        limit = get_settings().max_members_limit
        if v > limit:
            raise ValueError(f"max_members cannot exceed {limit}")
        return v


class UpdateProjectRequest(BaseModel):
    """
    Payload for updating a project.

    project_type is accepted only so it can be rejected explicitly when it
    differs from the stored type.
    """
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    title: Optional[str] = Field(
        default=None,
        min_length=1,
        max_length=255,
    )
    description: Optional[str] = Field(
        default=None,
        max_length=1000,
    )
    visibility: Optional[Visibility] = None
    max_members: Optional[int] = Field(
        default=None,
        alias="maxMembers",
        ge=1,
    )
    project_type: Optional[ProjectType] = Field(
        default=None,
        alias="projectType",
    )

    @field_validator('max_members')
    @classmethod
    def validate_member_limit(cls, v: Optional[int]) -> Optional[int]:
        limit = get_settings().max_members_limit
        if v is not None and v > limit:
            raise ValueError(f"max_members cannot exceed {limit}")
        return v


class InviteMemberRequest(BaseModel):
    """Payload for inviting someone to a project by email."""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    invited_email: EmailStr = Field(
        ...,
        alias="invitedEmail",
    )
    invited_name: Optional[str] = Field(
        default=None,
        alias="invitedName",
        min_length=1,
        max_length=255,
    )
