"""
Audit Storage Interface

DESIGN DECISION: We define an abstract interface for where audit events go.
This allows us to:
1. Plug in a database table later without touching the access core
2. Use in-memory storage for testing and local runs
3. Keep the access core free of I/O

Audit logs are append-only - we never delete or modify them.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from personally.models.audit import AuditEvent, AuditEventType


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Args:
            event: The audit event to log

        Returns:
            True if logged successfully

        Raises:
            AuditStorageError: If the write fails
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one page load).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    def get_events_by_project(
        self,
        project_id: str,
        event_type: Optional[AuditEventType] = None,
    ) -> list[AuditEvent]:
        """
        Get all events for a project, optionally of one type.

        Returns:
            List of events in chronological order
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class AuditStorageError(Exception):
    """Base exception for audit storage operations."""
    pass


class InMemoryAuditStorage(AuditStorageInterface):
    """Audit storage backed by a plain list. Process-local."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    def get_events_by_project(
        self,
        project_id: str,
        event_type: Optional[AuditEventType] = None,
    ) -> list[AuditEvent]:
        return [
            e for e in self._events
            if e.project_id == project_id
            and (event_type is None or e.event_type == event_type)
        ]

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]

    def __len__(self) -> int:
        return len(self._events)
