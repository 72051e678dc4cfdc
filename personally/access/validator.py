"""
Project Access Validator

DESIGN DECISION: Access is decided by a fixed sequence of gates:

GATE 1 - EXISTENCE:
- No project -> not found
- Checked before anything else, so a missing project never leaks type info

GATE 2 - TYPE:
- Route expects a loan project but got a splitwise one -> type mismatch
- Checked before ownership, so even the owner gets a mismatch

GATE 3 - ACCESS:
- Owner or member -> has access
- Otherwise only private projects are refused

Each gate raises its own error. They are never merged into one boolean,
because callers present each failure differently.

IMPORTANT: Validation is a pure function of its arguments. No I/O, no shared
state; it is safe to call from any number of requests at once.
"""

from collections.abc import Mapping
from typing import Any, Optional, Union
from uuid import UUID

import structlog

from personally.access.errors import (
    ProjectAccessDeniedError,
    ProjectNotFoundError,
    ProjectTypeMismatchError,
)
from personally.audit import AuditLogger
from personally.models.project import (
    AccessibleProject,
    AccessResult,
    ProjectRef,
    ProjectType,
    Visibility,
)


logger = structlog.get_logger(__name__)

ProjectInput = Union[ProjectRef, Mapping[str, Any], None]


def coerce_project(project: ProjectInput) -> Optional[ProjectRef]:
    """Accept a ProjectRef or a raw query row; None stays None."""
    if project is None or isinstance(project, ProjectRef):
        return project
    return ProjectRef.model_validate(project)


def coerce_project_type(
    project_type: Union[ProjectType, str, None],
) -> Optional[ProjectType]:
    """Turn "loan" into ProjectType.LOAN. Empty values mean "no expectation"."""
    if not project_type:
        return None
    return ProjectType(project_type)


def validate_access(
    project: ProjectInput,
    requesting_user_id: str,
    expected_type: Union[ProjectType, str, None] = None,
) -> AccessResult:
    """
    Decide whether a user may open a project.

    Args:
        project: The fetched project, or None if the lookup found nothing
        requesting_user_id: ID of the signed-in user
        expected_type: Project type implied by the route, if any

    Returns:
        AccessResult with the client-safe project view

    Raises:
        ProjectNotFoundError: project is None
        ProjectTypeMismatchError: expected_type given and different
        ProjectAccessDeniedError: private project, user neither owner nor member
    """
    ref = coerce_project(project)
    if ref is None:
        raise ProjectNotFoundError()

    expected = coerce_project_type(expected_type)
    if expected is not None and ref.project_type != expected:
        raise ProjectTypeMismatchError(expected=expected, actual=ref.project_type)

    is_owner = ref.user_id == requesting_user_id
    has_access = is_owner or ref.has_member(requesting_user_id)

    if not has_access and ref.visibility == Visibility.PRIVATE:
        raise ProjectAccessDeniedError()

    return AccessResult(
        project=AccessibleProject(
            id=ref.id,
            title=ref.title,
            description=ref.description,
            project_type=ref.project_type,
            user_id=ref.user_id,
            is_owner=is_owner,
        ),
        has_access=has_access,
    )


class ProjectAccessValidator:
    """
    Runs validate_access and records each decision in the audit trail.

    The decision itself is identical to validate_access; this class only
    adds the audit side effect.
    """

    def __init__(
        self,
        audit_logger: Optional[AuditLogger] = None,
    ):
        """
        Initialize validator.

        Args:
            audit_logger: Where to record decisions.
                         If None, decisions are not audited.
        """
        self._audit_logger = audit_logger

    @property
    def audit_logger(self) -> Optional[AuditLogger]:
        return self._audit_logger

    def validate(
        self,
        project: ProjectInput,
        requesting_user_id: str,
        expected_type: Union[ProjectType, str, None] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AccessResult:
        ref = coerce_project(project)
        project_id = ref.id if ref else None

        try:
            result = validate_access(ref, requesting_user_id, expected_type)
        except ProjectNotFoundError:
            if self._audit_logger:
                self._audit_logger.log_project_not_found(
                    user_id=requesting_user_id,
                    correlation_id=correlation_id,
                )
            raise
        except ProjectTypeMismatchError as e:
            if self._audit_logger:
                self._audit_logger.log_type_mismatch(
                    project_id=project_id,
                    user_id=requesting_user_id,
                    expected=e.expected.value,
                    actual=e.actual.value,
                    correlation_id=correlation_id,
                )
            raise
        except ProjectAccessDeniedError:
            if self._audit_logger:
                self._audit_logger.log_access_denied(
                    project_id=project_id,
                    user_id=requesting_user_id,
                    correlation_id=correlation_id,
                )
            raise

        logger.debug(
            "project_access_checked",
            project_id=project_id,
            user_id=requesting_user_id,
            is_owner=result.project.is_owner,
            has_access=result.has_access,
        )
        if self._audit_logger:
            self._audit_logger.log_access_granted(
                project_id=result.project.id,
                user_id=requesting_user_id,
                is_owner=result.project.is_owner,
                has_access=result.has_access,
                correlation_id=correlation_id,
            )
        return result
