"""
Project Error Taxonomy

DESIGN DECISION: Access failures are raised as typed exceptions carrying a
discriminant (AccessErrorKind), not as bare strings. The error classifier
maps the kind directly. The human-readable messages are still fixed, word
for word, because callers show them and older callers match on them.
"""

from enum import Enum

from personally.models.project import ProjectType


NOT_FOUND_MESSAGE = "Project not found"
ACCESS_DENIED_MESSAGE = "You do not have access to this project"


class AccessErrorKind(str, Enum):
    """Which access gate failed."""
    NOT_FOUND = "not_found"
    TYPE_MISMATCH = "type_mismatch"
    FORBIDDEN = "forbidden"


class ProjectError(Exception):
    """Base exception for project access and membership errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ProjectAccessError(ProjectError):
    """An access gate rejected the request."""

    kind: AccessErrorKind


class ProjectNotFoundError(ProjectAccessError):
    """No project was supplied (the lookup returned nothing)."""

    kind = AccessErrorKind.NOT_FOUND

    def __init__(self):
        super().__init__(NOT_FOUND_MESSAGE)


class ProjectTypeMismatchError(ProjectAccessError):
    """The project exists but is not of the type the route expects."""

    kind = AccessErrorKind.TYPE_MISMATCH

    def __init__(self, expected: ProjectType, actual: ProjectType):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Project type mismatch. Expected {expected.value}, got {actual.value}"
        )


class ProjectAccessDeniedError(ProjectAccessError):
    """Private project, and the user is neither owner nor member."""

    kind = AccessErrorKind.FORBIDDEN

    def __init__(self):
        super().__init__(ACCESS_DENIED_MESSAGE)


# Membership rule errors

class PermissionDeniedError(ProjectError):
    """The user's role does not allow this action."""
    pass


class NotFoundError(ProjectError):
    """A membership or invitation record the action needs is missing."""
    pass


class InvalidOperationError(ProjectError):
    """The action is not allowed in the current state."""
    pass


class ConflictError(ProjectError):
    """The action would duplicate an existing record."""
    pass


class InvitationError(InvalidOperationError):
    """The invitation cannot be acted on (not pending, or expired)."""
    pass
