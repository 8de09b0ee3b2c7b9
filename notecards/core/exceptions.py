"""
Error taxonomy shared by the server procedures and the client binding.

Each error carries a stable ``code`` and the HTTP status it maps to, so the
API layer can render it and the client can rebuild the same exception from
the response envelope::

    {"error": {"code": "not_found", "message": "...", "details": null}}
"""

from typing import Any, Optional


class NotecardsError(Exception):
    """Base exception for content errors."""

    code: str = "internal_server_error"
    status_code: int = 500
    default_message: str = "An unexpected error occurred. Please try again later."

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    @classmethod
    def from_envelope(cls, message: Optional[str], details: Any = None) -> "NotecardsError":
        """Rebuild the exception from a decoded error envelope."""
        return cls(message, details=details)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            }
        }


class ContentValidationError(NotecardsError):
    """Raised when procedure input is malformed. ``details`` lists field errors."""

    code = "validation_error"
    status_code = 422
    default_message = "Invalid input"


class MutationForbiddenError(NotecardsError):
    """Raised when the access policy blocks a create/update/delete."""

    code = "forbidden"
    status_code = 403
    default_message = "This action is not available in public mode"


class ContentNotFoundError(NotecardsError):
    """Raised when a referenced content id does not exist."""

    code = "not_found"
    status_code = 404
    default_message = "Content item not found"

    def __init__(self, content_id: Optional[str] = None, message: Optional[str] = None):
        self.content_id = content_id
        if message is None and content_id is not None:
            message = f"Content item not found: {content_id}"
        super().__init__(message, details={"id": content_id} if content_id else None)

    @classmethod
    def from_envelope(cls, message: Optional[str], details: Any = None) -> "ContentNotFoundError":
        content_id = details.get("id") if isinstance(details, dict) else None
        return cls(content_id, message=message)


class StoreUnavailableError(NotecardsError):
    """
    Raised when persistence (or the API transport) cannot be reached.

    The message is always generic; infrastructure detail is logged where the
    failure happened and never sent to the caller.
    """

    code = "store_unavailable"
    status_code = 503
    default_message = "Content store is temporarily unavailable. Please try again later."


ERRORS_BY_CODE: dict[str, type[NotecardsError]] = {
    cls.code: cls
    for cls in (
        ContentValidationError,
        MutationForbiddenError,
        ContentNotFoundError,
        StoreUnavailableError,
    )
}


def format_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Reduce pydantic error dicts to JSON-safe ``loc``/``msg``/``type`` entries."""
    return [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in errors
    ]
