"""Audit logging package."""

from personally.audit.logger import AuditLogger, create_correlation_id
from personally.audit.storage import (
    AuditStorageError,
    AuditStorageInterface,
    InMemoryAuditStorage,
)

__all__ = [
    "AuditLogger",
    "AuditStorageError",
    "AuditStorageInterface",
    "InMemoryAuditStorage",
    "create_correlation_id",
]
