"""
Project Route Guard

Ties the access core together for a dashboard page load:

1. Confirm the URL's type markers agree with the project's real type
2. Read the expected project type from the URL (/dashboard/loan/{id} -> loan)
3. Run the access validator with that expectation
4. On failure, classify the error for the error page

The project record itself is fetched by the caller.
"""

from typing import Optional
from uuid import UUID

import structlog
from pydantic import BaseModel, ConfigDict

from personally.access.classifier import classify
from personally.access.errors import ProjectError, ProjectTypeMismatchError
from personally.access.validator import (
    ProjectAccessValidator,
    ProjectInput,
    coerce_project,
    validate_access,
)
from personally.models.project import AccessResult, ClassifiedError, ProjectType
from personally.navigation import (
    DASHBOARD_PATH,
    is_type_valid_for_url_pattern,
    parse_project_path,
)


logger = structlog.get_logger(__name__)


class PageOutcome(BaseModel):
    """What a project page should render: the project, or an error."""
    model_config = ConfigDict(frozen=True)

    result: Optional[AccessResult] = None
    error: Optional[ClassifiedError] = None
    redirect_to: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _url_type_conflict(project_type: ProjectType, path: str) -> Optional[ProjectType]:
    """First type whose URL marker is in the path but is not the project's type."""
    for candidate in ProjectType:
        if f"/{candidate.value}/" in path and candidate != project_type:
            return candidate
    return None


def guard_project_route(
    path: str,
    project: ProjectInput,
    requesting_user_id: str,
    validator: Optional[ProjectAccessValidator] = None,
    correlation_id: Optional[UUID] = None,
) -> AccessResult:
    """
    Validate a project page load.

    Gate order matches validate_access: a missing project is not found,
    then any type conflict with the URL, and only then ownership.

    Args:
        path: The requested URL path
        project: The project fetched for the path's ID (None if missing)
        requesting_user_id: ID of the signed-in user
        validator: Auditing validator to use; plain validation if None
        correlation_id: Ties the audit events of one page load together

    Raises:
        ProjectAccessError: Any access gate failed
    """
    ref = coerce_project(project)
    if ref is not None and not is_type_valid_for_url_pattern(ref.project_type, path):
        if validator is not None and validator.audit_logger:
            validator.audit_logger.log_route_type_mismatch(
                project_id=ref.id,
                user_id=requesting_user_id,
                path=path,
                project_type=ref.project_type.value,
                correlation_id=correlation_id,
            )
        raise ProjectTypeMismatchError(
            expected=_url_type_conflict(ref.project_type, path),
            actual=ref.project_type,
        )

    parsed = parse_project_path(path)
    expected_type = parsed[0] if parsed else None

    if validator is not None:
        return validator.validate(
            ref, requesting_user_id, expected_type, correlation_id=correlation_id
        )
    return validate_access(ref, requesting_user_id, expected_type)


def resolve_project_page(
    path: str,
    project: ProjectInput,
    requesting_user_id: str,
    validator: Optional[ProjectAccessValidator] = None,
    correlation_id: Optional[UUID] = None,
) -> PageOutcome:
    """
    Like guard_project_route, but returns the classified failure instead of
    raising it. Failures point back to the dashboard.
    """
    try:
        result = guard_project_route(
            path,
            project,
            requesting_user_id,
            validator=validator,
            correlation_id=correlation_id,
        )
    except ProjectError as e:
        classified = classify(e)
        logger.info(
            "project_page_rejected",
            path=path,
            user_id=requesting_user_id,
            error_type=classified.type.value,
        )
        return PageOutcome(error=classified, redirect_to=DASHBOARD_PATH)

    return PageOutcome(result=result)
