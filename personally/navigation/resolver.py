"""
Project Navigation Resolver

Turns a project reference into its dashboard URL, and checks that a URL's
type segment agrees with a project's declared type.

URL scheme:
    /dashboard/loan/{id}
    /dashboard/splitwise/{id}
    /dashboard/general/{id}
    /dashboard                  (anything we cannot place)

Everything here is a pure string computation.
"""

import re
from collections.abc import Mapping
from typing import Any, Optional, Union

from personally.models.project import ProjectType, ProjectTypeOption


DASHBOARD_PATH = "/dashboard"

_DISPLAY_NAMES = {
    ProjectType.LOAN: "Loan",
    ProjectType.SPLITWISE: "Splitwise",
    ProjectType.GENERAL: "General",
}
DEFAULT_DISPLAY_NAME = "Project"

_ICONS = {
    ProjectType.LOAN: "DollarSign",
    ProjectType.SPLITWISE: "Users",
    ProjectType.GENERAL: "Folder",
}
DEFAULT_ICON = "Folder"

# Checked in this order; the first marker present with the wrong type fails
_URL_MARKERS = (
    ("/loan/", ProjectType.LOAN),
    ("/splitwise/", ProjectType.SPLITWISE),
    ("/general/", ProjectType.GENERAL),
)

_PROJECT_PATH = re.compile(
    r"^/dashboard/(?P<type>loan|splitwise|general)/(?P<id>[^/]+)(?:/.*)?$"
)

_TYPE_OPTIONS = (
    ProjectTypeOption(
        type=ProjectType.LOAN,
        name="Loan Tracker",
        description="Track money you've lent or borrowed with friends and family",
        icon="DollarSign",
    ),
    ProjectTypeOption(
        type=ProjectType.SPLITWISE,
        name="Expense Splitting",
        description="Split bills and expenses fairly among group members",
        icon="Users",
    ),
    ProjectTypeOption(
        type=ProjectType.GENERAL,
        name="General Project",
        description="A flexible project for any financial tracking needs",
        icon="FolderOpen",
    ),
)


def as_project_type(value: Union[ProjectType, str, None]) -> Optional[ProjectType]:
    """ProjectType for a known value, None for anything else."""
    if isinstance(value, ProjectType):
        return value
    try:
        return ProjectType(value)
    except ValueError:
        return None


def _field(project: Any, name: str, alias: str) -> Any:
    if isinstance(project, Mapping):
        return project.get(name, project.get(alias))
    return getattr(project, name, getattr(project, alias, None))


def resolve_project_url(project: Any) -> str:
    """
    Canonical dashboard URL for a project.

    Args:
        project: Any model or mapping with an id and a project type
                 (project_type or projectType)

    Returns:
        The project URL, or /dashboard when the type is not recognised
        or the project has no id
    """
    project_type = as_project_type(_field(project, "project_type", "projectType"))
    project_id = _field(project, "id", "id")
    if project_type is None or not project_id:
        return DASHBOARD_PATH
    return f"{DASHBOARD_PATH}/{project_type.value}/{project_id}"


def display_name(project_type: Union[ProjectType, str, None]) -> str:
    """Human-readable label for a project type."""
    return _DISPLAY_NAMES.get(as_project_type(project_type), DEFAULT_DISPLAY_NAME)


def type_icon(project_type: Union[ProjectType, str, None]) -> str:
    """Symbolic icon name for a project type."""
    return _ICONS.get(as_project_type(project_type), DEFAULT_ICON)


def is_type_valid_for_url_pattern(
    project_type: Union[ProjectType, str, None],
    url_pattern: str,
) -> bool:
    """
    Is this URL consistent with the project's type?

    A URL containing "/loan/" only fits a loan project, and so on.
    A URL with none of the markers fits any type.
    """
    actual = as_project_type(project_type)
    for marker, required in _URL_MARKERS:
        if marker in url_pattern and actual != required:
            return False
    return True


def parse_project_path(path: str) -> Optional[tuple[ProjectType, str]]:
    """
    Extract (project type, project id) from a dashboard project path.

    Sub-pages such as /dashboard/loan/{id}/single/{loanId} resolve to their
    project. Query strings and fragments are ignored.

    Returns:
        (ProjectType, project_id), or None if the path is not a project page
    """
    path = path.split("#", 1)[0].split("?", 1)[0]
    match = _PROJECT_PATH.match(path)
    if not match:
        return None
    return ProjectType(match.group("type")), match.group("id")


def project_type_options(include_general: bool = False) -> list[ProjectTypeOption]:
    """
    Project types offered when creating a new project.

    General projects can be opened and linked to, but are not offered for
    creation unless include_general is set.
    """
    return [
        option for option in _TYPE_OPTIONS
        if include_general or option.type != ProjectType.GENERAL
    ]
