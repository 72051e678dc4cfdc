"""
Access Error Classifier

Maps a failure onto the four presentation types the UI knows about:
not-found, forbidden, type-mismatch, unknown.

Typed ProjectAccessError instances are mapped by their kind. Anything else
(errors from other layers, plain exceptions, {"message": ...} payloads from
the RPC client) is matched on its message text, first match wins:

    "not found"      -> not-found
    "access"         -> forbidden
    "type mismatch"  -> type-mismatch
    otherwise        -> unknown, message echoed

The three known types replace the message with a fixed one. Only the
unknown type echoes the original message.

NOTE: "access" is a broad match. "Cannot access database" classifies as
forbidden. Callers rely on this today; see DESIGN.md before narrowing it.
"""

from collections.abc import Mapping
from typing import Any, Optional

from personally.access.errors import (
    ACCESS_DENIED_MESSAGE,
    NOT_FOUND_MESSAGE,
    AccessErrorKind,
    ProjectAccessError,
)
from personally.models.project import ClassifiedError, ErrorType


TYPE_MISMATCH_MESSAGE = "Invalid project type for this URL"
DEFAULT_ERROR_MESSAGE = "An error occurred"

NOT_FOUND = ClassifiedError(type=ErrorType.NOT_FOUND, message=NOT_FOUND_MESSAGE)
FORBIDDEN = ClassifiedError(type=ErrorType.FORBIDDEN, message=ACCESS_DENIED_MESSAGE)
TYPE_MISMATCH = ClassifiedError(type=ErrorType.TYPE_MISMATCH, message=TYPE_MISMATCH_MESSAGE)

_BY_KIND = {
    AccessErrorKind.NOT_FOUND: NOT_FOUND,
    AccessErrorKind.FORBIDDEN: FORBIDDEN,
    AccessErrorKind.TYPE_MISMATCH: TYPE_MISMATCH,
}

# Order matters
_BY_MESSAGE = (
    ("not found", NOT_FOUND),
    ("access", FORBIDDEN),
    ("type mismatch", TYPE_MISMATCH),
)


def error_message(error: Any) -> Optional[str]:
    """Pull the message out of an exception, an object, or a mapping."""
    if error is None:
        return None
    if isinstance(error, Mapping):
        message = error.get("message")
    elif hasattr(error, "message"):
        message = getattr(error, "message")
    elif isinstance(error, BaseException):
        message = str(error)
    else:
        return None
    return message if isinstance(message, str) else None


def classify(error: Any) -> ClassifiedError:
    """
    Classify a failure for presentation.

    Args:
        error: A ProjectAccessError, any exception, or an object/mapping
               with a "message"

    Returns:
        ClassifiedError with the presentation type and message
    """
    if isinstance(error, ProjectAccessError):
        return _BY_KIND[error.kind]

    message = error_message(error)
    if message:
        for needle, classified in _BY_MESSAGE:
            if needle in message:
                return classified

    return ClassifiedError(
        type=ErrorType.UNKNOWN,
        message=message or DEFAULT_ERROR_MESSAGE,
    )
