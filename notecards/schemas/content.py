"""
Pydantic schemas for the content procedures.

These schemas define the request/response contracts of the six procedures
(listAll, getById, getByType, create, update, delete). Item responses use
camelCase on the wire (``createdAt``) and snake_case in Python.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import (
    AnyUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from notecards.models.content import ContentType

_absolute_url = TypeAdapter(AnyUrl)


def _check_url(value: str) -> str:
    """Accept only syntactically valid absolute URIs; keep the value as given."""
    try:
        _absolute_url.validate_python(value)
    except ValidationError:
        raise ValueError("url must be a valid absolute URL")
    return value


def _check_title(value: str) -> str:
    if not value.strip():
        raise ValueError("title cannot be empty")
    return value


# ========================================
# Request Schemas
# ========================================


class ContentDraft(BaseModel):
    """Input for the create procedure."""

    type: ContentType = Field(
        ...,
        description="Content category",
        examples=["youtube", "article"]
    )

    url: str = Field(
        ...,
        description="Absolute URL of the content",
        min_length=1,
        examples=["https://www.youtube.com/watch?v=dQw4w9WgXcQ"]
    )

    title: str = Field(
        ...,
        description="Display title",
        min_length=1,
        max_length=500,
    )

    note: str = Field(
        ...,
        description="Free-text note, may be empty"
    )

    thumbnail: Optional[str] = Field(None, description="Thumbnail image URL")
    author: Optional[str] = Field(None, description="Author or channel", max_length=255)
    duration: Optional[str] = Field(None, description="Duration, e.g. 12:34", max_length=50)
    location: Optional[str] = Field(None, description="Location", max_length=255)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return _check_url(v)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _check_title(v)


class ContentPatch(BaseModel):
    """
    Input for the update procedure.

    Any subset of the draft fields. Present fields follow the create rules;
    explicit nulls are rejected. ``id`` and ``createdAt`` are not patchable.
    """

    type: Optional[ContentType] = None
    url: Optional[str] = Field(None, min_length=1)
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    note: Optional[str] = None
    thumbnail: Optional[str] = None
    author: Optional[str] = Field(None, max_length=255)
    duration: Optional[str] = Field(None, max_length=50)
    location: Optional[str] = Field(None, max_length=255)

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        # Only runs for values that were actually sent; omitted fields keep their default
        if v is None:
            raise ValueError("field may be omitted but not null")
        return v

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return _check_url(v)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _check_title(v)

    def changes(self) -> dict[str, Any]:
        """Only the fields the caller sent, as plain JSON values."""
        return self.model_dump(mode="json", exclude_unset=True)


# ========================================
# Response Schemas
# ========================================


class ContentItemResponse(BaseModel):
    """A persisted content item as returned by every procedure."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(..., description="Opaque unique identifier")
    # Plain string: items with types newer than this code still serialise
    type: str = Field(..., description="Content category")
    url: str
    title: str
    note: str
    thumbnail: Optional[str] = None
    author: Optional[str] = None
    duration: Optional[str] = None
    location: Optional[str] = None
    created_at: datetime = Field(..., description="Creation time (UTC), sort key")
    updated_at: Optional[datetime] = Field(None, description="Last update time (UTC)")

    @property
    def content_type(self) -> Optional[ContentType]:
        return ContentType.parse(self.type)


class ErrorDetail(BaseModel):
    """Body of an error envelope."""

    code: str = Field(..., description="Stable error code", examples=["not_found"])
    message: str = Field(..., description="Human-readable message")
    details: Optional[Any] = Field(None, description="Field errors or extra context")


class ErrorResponse(BaseModel):
    """Error envelope returned by every failing procedure."""

    error: ErrorDetail


class PublicModeFeaturesResponse(BaseModel):
    add_content: bool
    edit_content: bool
    delete_content: bool


class PublicModeResponse(BaseModel):
    """Read-only switch, so a client can hide editing controls up front."""

    is_public: bool = Field(..., description="True when mutations are disabled")
    features: PublicModeFeaturesResponse
