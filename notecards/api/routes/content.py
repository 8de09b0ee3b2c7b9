"""
Content API endpoints.

HTTP binding of the six content procedures. Handlers stay thin: validation,
the public-mode guard and store access all live in ContentProcedures, and
errors are rendered by the application's exception handlers.
"""

from typing import List

from fastapi import APIRouter, Response, status

from notecards.api.deps import Procedures
from notecards.schemas.content import (
    ContentDraft,
    ContentItemResponse,
    ContentPatch,
    ErrorResponse,
)

router = APIRouter(prefix="/content", tags=["Content"])

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Unknown content id"}}
FORBIDDEN = {403: {"model": ErrorResponse, "description": "Disabled in public mode"}}
INVALID = {422: {"model": ErrorResponse, "description": "Invalid input"}}
UNAVAILABLE = {503: {"model": ErrorResponse, "description": "Content store unavailable"}}


@router.get(
    "",
    response_model=List[ContentItemResponse],
    summary="List all content",
    description="Every saved item, newest first.",
    responses={**UNAVAILABLE},
)
async def list_all(procedures: Procedures):
    return await procedures.list_all()


@router.get(
    "/by-type/{content_type}",
    response_model=List[ContentItemResponse],
    summary="List content of one type",
    description="Items of a recognised content type, newest first.",
    responses={**INVALID, **UNAVAILABLE},
)
async def get_by_type(content_type: str, procedures: Procedures):
    return await procedures.get_by_type(content_type)


@router.get(
    "/{content_id}",
    response_model=ContentItemResponse,
    summary="Get one content item",
    responses={**NOT_FOUND, **UNAVAILABLE},
)
async def get_by_id(content_id: str, procedures: Procedures):
    return await procedures.get_by_id(content_id)


@router.post(
    "",
    response_model=ContentItemResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save a new content item",
    description="The server assigns `id` and `createdAt`. Disabled in public mode.",
    responses={**FORBIDDEN, **INVALID, **UNAVAILABLE},
)
async def create(draft: ContentDraft, procedures: Procedures):
    return await procedures.create(draft)


@router.patch(
    "/{content_id}",
    response_model=ContentItemResponse,
    summary="Update a content item",
    description="Partial update: only the fields sent are changed. Disabled in public mode.",
    responses={**FORBIDDEN, **NOT_FOUND, **INVALID, **UNAVAILABLE},
)
async def update(content_id: str, patch: ContentPatch, procedures: Procedures):
    return await procedures.update(content_id, patch)


@router.delete(
    "/{content_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a content item",
    description="Hard delete. Unknown ids return 404. Disabled in public mode.",
    responses={**FORBIDDEN, **NOT_FOUND, **UNAVAILABLE},
)
async def delete(content_id: str, procedures: Procedures):
    await procedures.delete(content_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
