"""Project navigation package."""

from personally.navigation.resolver import (
    DASHBOARD_PATH,
    display_name,
    is_type_valid_for_url_pattern,
    parse_project_path,
    project_type_options,
    resolve_project_url,
    type_icon,
)

__all__ = [
    "DASHBOARD_PATH",
    "display_name",
    "is_type_valid_for_url_pattern",
    "parse_project_path",
    "project_type_options",
    "resolve_project_url",
    "type_icon",
]
