"""
Pydantic schemas for request/response validation.

Import all schemas here for easy access.
"""

from notecards.schemas.content import (
    ContentDraft,
    ContentItemResponse,
    ContentPatch,
    ErrorDetail,
    ErrorResponse,
    PublicModeFeaturesResponse,
    PublicModeResponse,
)

__all__ = [
    # Procedure inputs
    "ContentDraft",
    "ContentPatch",
    # Procedure outputs
    "ContentItemResponse",
    "PublicModeResponse",
    "PublicModeFeaturesResponse",
    # Errors
    "ErrorDetail",
    "ErrorResponse",
]
