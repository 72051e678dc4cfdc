"""Project access package."""

from personally.access.classifier import classify
from personally.access.errors import (
    AccessErrorKind,
    ConflictError,
    InvalidOperationError,
    InvitationError,
    NotFoundError,
    PermissionDeniedError,
    ProjectAccessDeniedError,
    ProjectAccessError,
    ProjectError,
    ProjectNotFoundError,
    ProjectTypeMismatchError,
)
from personally.access.guard import PageOutcome, guard_project_route, resolve_project_page
from personally.access.validator import ProjectAccessValidator, validate_access

__all__ = [
    # Validation
    "ProjectAccessValidator",
    "validate_access",
    # Classification
    "classify",
    # Route guard
    "PageOutcome",
    "guard_project_route",
    "resolve_project_page",
    # Exceptions
    "AccessErrorKind",
    "ConflictError",
    "InvalidOperationError",
    "InvitationError",
    "NotFoundError",
    "PermissionDeniedError",
    "ProjectAccessDeniedError",
    "ProjectAccessError",
    "ProjectError",
    "ProjectNotFoundError",
    "ProjectTypeMismatchError",
]
