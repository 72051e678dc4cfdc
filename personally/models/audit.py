"""
Audit Models for Personally

Every access decision and membership change can be logged for audit.
This provides:
1. Traceability of who opened which project, and who was turned away
2. Debugging information when a link leads to "Access Denied"
3. A history of invitations and membership changes

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from personally.models.project import utcnow


class AuditEventType(str, Enum):
    """
    Types of events we audit.
    """
    # Access decisions
    ACCESS_GRANTED = "access_granted"
    ACCESS_DENIED = "access_denied"
    PROJECT_NOT_FOUND = "project_not_found"
    PROJECT_TYPE_MISMATCH = "project_type_mismatch"
    ROUTE_TYPE_MISMATCH = "route_type_mismatch"

    # Invitations
    INVITATION_CREATED = "invitation_created"
    INVITATION_ACCEPTED = "invitation_accepted"
    INVITATION_DECLINED = "invitation_declined"

    # Membership
    MEMBER_REMOVED = "member_removed"
    MEMBER_LEFT = "member_left"
    PERMISSION_DENIED = "permission_denied"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what is this about, and who asked?
    project_id: Optional[str] = Field(
        default=None,
        description="Project the event relates to"
    )
    user_id: Optional[str] = Field(
        default=None,
        description="User whose request triggered the event"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one page load)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "project_id": self.project_id,
            "user_id": self.user_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }

    def to_row(self) -> list:
        """
        Flatten to a row for tabular export.

        Returns columns in order:
        [event_id, timestamp, event_type, severity, project_id, user_id,
         correlation_id, description, details_json, error_message]
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.project_id or "",
            self.user_id or "",
            str(self.correlation_id) if self.correlation_id else "",
            self.description,
            json.dumps(self.details) if self.details else "",
            self.error_message or "",
        ]


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.access_granted(project_id, user_id, True, True)
        event = AuditEventBuilder.access_denied(project_id, user_id)
    """

    @staticmethod
    def access_granted(
        project_id: str,
        user_id: str,
        is_owner: bool,
        has_access: bool,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCESS_GRANTED,
            project_id=project_id,
            user_id=user_id,
            correlation_id=correlation_id,
            description="Project access granted",
            details={
                "is_owner": is_owner,
                "has_access": has_access,
            },
        )

    @staticmethod
    def access_denied(
        project_id: Optional[str],
        user_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCESS_DENIED,
            severity=AuditSeverity.WARNING,
            project_id=project_id,
            user_id=user_id,
            correlation_id=correlation_id,
            description="Project access denied: private project",
        )

    @staticmethod
    def project_not_found(
        user_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROJECT_NOT_FOUND,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            correlation_id=correlation_id,
            description="Requested project does not exist",
        )

    @staticmethod
    def type_mismatch(
        project_id: Optional[str],
        user_id: str,
        expected: str,
        actual: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROJECT_TYPE_MISMATCH,
            severity=AuditSeverity.WARNING,
            project_id=project_id,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"Project type mismatch: expected {expected}, got {actual}",
            details={
                "expected_type": expected,
                "actual_type": actual,
            },
        )

    @staticmethod
    def route_type_mismatch(
        project_id: str,
        user_id: str,
        path: str,
        project_type: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ROUTE_TYPE_MISMATCH,
            severity=AuditSeverity.WARNING,
            project_id=project_id,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"URL does not match project type {project_type}",
            details={
                "path": path,
                "project_type": project_type,
            },
        )

    @staticmethod
    def invitation_created(
        project_id: str,
        invited_by: str,
        invitation_id: UUID,
        invited_email: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVITATION_CREATED,
            project_id=project_id,
            user_id=invited_by,
            description=f"Invitation sent to {invited_email}",
            details={
                "invitation_id": str(invitation_id),
                "invited_email": invited_email,
            },
        )

    @staticmethod
    def invitation_responded(
        project_id: str,
        user_id: str,
        invitation_id: UUID,
        accepted: bool,
    ) -> AuditEvent:
        event_type = (
            AuditEventType.INVITATION_ACCEPTED
            if accepted
            else AuditEventType.INVITATION_DECLINED
        )
        return AuditEvent(
            event_type=event_type,
            project_id=project_id,
            user_id=user_id,
            description=f"Invitation {'accepted' if accepted else 'declined'}",
            details={
                "invitation_id": str(invitation_id),
            },
        )

    @staticmethod
    def permission_denied(
        project_id: str,
        user_id: str,
        action: str,
        reason: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERMISSION_DENIED,
            severity=AuditSeverity.WARNING,
            project_id=project_id,
            user_id=user_id,
            description=f"Permission denied: {action}",
            error_message=reason,
            details={
                "action": action,
            },
        )

    @staticmethod
    def member_removed(
        project_id: str,
        removed_by: str,
        member_user_id: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MEMBER_REMOVED,
            project_id=project_id,
            user_id=removed_by,
            description="Member removed from project",
            details={
                "member_user_id": member_user_id,
            },
        )

    @staticmethod
    def member_left(
        project_id: str,
        user_id: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MEMBER_LEFT,
            project_id=project_id,
            user_id=user_id,
            description="Member left project",
        )
