"""
Audit Logger

DESIGN DECISION: Every access decision is logged.
This provides:
1. Traceability of who opened what
2. Debugging capability for "Access Denied" reports
3. A record of membership and invitation changes

The audit logger:
- Is synchronous, like the checks it records
- Gracefully handles storage failures (never breaks an access check)
- Supports correlation IDs to trace related events
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from personally.audit.storage import AuditStorageInterface
from personally.config import get_settings
from personally.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit storage backend, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
        enabled: Optional[bool] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
            enabled: Override for the audit_enabled setting.
        """
        self._storage = storage
        self._enabled = get_settings().audit_enabled if enabled is None else enabled
        self._logger = structlog.get_logger(__name__)

    @property
    def enabled(self) -> bool:
        return self._enabled

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally (unless disabled). Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        if not self._enabled:
            return True

        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_access_granted(
        self,
        project_id: str,
        user_id: str,
        is_owner: bool,
        has_access: bool,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a successful access check."""
        self.log(AuditEventBuilder.access_granted(
            project_id=project_id,
            user_id=user_id,
            is_owner=is_owner,
            has_access=has_access,
            correlation_id=correlation_id,
        ))

    def log_access_denied(
        self,
        project_id: Optional[str],
        user_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a rejected access check on a private project."""
        self.log(AuditEventBuilder.access_denied(
            project_id=project_id,
            user_id=user_id,
            correlation_id=correlation_id,
        ))

    def log_project_not_found(
        self,
        user_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.project_not_found(
            user_id=user_id,
            correlation_id=correlation_id,
        ))

    def log_type_mismatch(
        self,
        project_id: Optional[str],
        user_id: str,
        expected: str,
        actual: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.type_mismatch(
            project_id=project_id,
            user_id=user_id,
            expected=expected,
            actual=actual,
            correlation_id=correlation_id,
        ))

    def log_route_type_mismatch(
        self,
        project_id: str,
        user_id: str,
        path: str,
        project_type: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.route_type_mismatch(
            project_id=project_id,
            user_id=user_id,
            path=path,
            project_type=project_type,
            correlation_id=correlation_id,
        ))

    def log_invitation_created(
        self,
        project_id: str,
        invited_by: str,
        invitation_id: UUID,
        invited_email: str,
    ) -> None:
        self.log(AuditEventBuilder.invitation_created(
            project_id=project_id,
            invited_by=invited_by,
            invitation_id=invitation_id,
            invited_email=invited_email,
        ))

    def log_invitation_responded(
        self,
        project_id: str,
        user_id: str,
        invitation_id: UUID,
        accepted: bool,
    ) -> None:
        self.log(AuditEventBuilder.invitation_responded(
            project_id=project_id,
            user_id=user_id,
            invitation_id=invitation_id,
            accepted=accepted,
        ))

    def log_permission_denied(
        self,
        project_id: str,
        user_id: str,
        action: str,
        reason: str,
    ) -> None:
        self.log(AuditEventBuilder.permission_denied(
            project_id=project_id,
            user_id=user_id,
            action=action,
            reason=reason,
        ))

    def log_member_removed(
        self,
        project_id: str,
        removed_by: str,
        member_user_id: str,
    ) -> None:
        self.log(AuditEventBuilder.member_removed(
            project_id=project_id,
            removed_by=removed_by,
            member_user_id=member_user_id,
        ))

    def log_member_left(self, project_id: str, user_id: str) -> None:
        self.log(AuditEventBuilder.member_left(
            project_id=project_id,
            user_id=user_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a page load or route guard run.
    """
    return uuid4()
