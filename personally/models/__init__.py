"""
Data Models Package

This package contains all Pydantic models used by the Personally access core.
All project data handed to the core must conform to these schemas.
"""

from personally.models.project import (
    AccessibleProject,
    AccessResult,
    ClassifiedError,
    CreateProjectRequest,
    ErrorType,
    InvitationStatus,
    InviteMemberRequest,
    Member,
    MemberRole,
    ProjectInvitation,
    ProjectRef,
    ProjectType,
    ProjectTypeOption,
    UpdateProjectRequest,
    Visibility,
)
from personally.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Project models
    "AccessibleProject",
    "AccessResult",
    "ClassifiedError",
    "CreateProjectRequest",
    "ErrorType",
    "InvitationStatus",
    "InviteMemberRequest",
    "Member",
    "MemberRole",
    "ProjectInvitation",
    "ProjectRef",
    "ProjectType",
    "ProjectTypeOption",
    "UpdateProjectRequest",
    "Visibility",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
