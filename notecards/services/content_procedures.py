"""
Content Procedures

The six operations exposed over the RPC boundary (listAll, getById,
getByType, create, update, delete). Each call runs in the same order:

1. validate the input (ContentValidationError, nothing touched yet)
2. for mutations, consult the access policy (MutationForbiddenError)
3. call the store (ContentNotFoundError / StoreUnavailableError)

Inputs may be schema instances or plain mappings, so the same rules apply
whether the call comes from a FastAPI route, a script or a test.
"""

from typing import Any, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from notecards.core.access import AccessPolicy, ensure_can_mutate
from notecards.core.exceptions import (
    ContentNotFoundError,
    ContentValidationError,
    format_validation_errors,
)
from notecards.core.logging import get_logger
from notecards.models.content import ContentType
from notecards.schemas.content import ContentDraft, ContentItemResponse, ContentPatch
from notecards.services.content_store import ContentStore

SchemaT = TypeVar("SchemaT", bound=BaseModel)

_content_type = TypeAdapter(ContentType)


class ContentProcedures:
    """Typed procedure set layered over a ContentStore."""

    def __init__(self, store: ContentStore, policy: AccessPolicy, logger: Any = None):
        self.store = store
        self.policy = policy
        self.logger = logger or get_logger(__name__)

    # ========================================
    # Input validation
    # ========================================

    def _invalid(self, procedure: str, details: List[dict[str, Any]]) -> ContentValidationError:
        self.logger.warning(
            "procedure_validation_failed",
            procedure=procedure,
            errors=details,
        )
        return ContentValidationError(details=details)

    def _parse(
        self,
        procedure: str,
        schema: Type[SchemaT],
        payload: Union[SchemaT, Mapping[str, Any]],
    ) -> SchemaT:
        if isinstance(payload, schema):
            return payload
        try:
            return schema.model_validate(payload)
        except ValidationError as e:
            raise self._invalid(procedure, format_validation_errors(e.errors())) from e

    def _parse_id(self, procedure: str, content_id: Any) -> str:
        if not isinstance(content_id, str) or not content_id.strip():
            raise self._invalid(
                procedure,
                [{"loc": ["id"], "msg": "id must be a non-empty string", "type": "value_error"}],
            )
        return content_id

    def _parse_type(self, procedure: str, content_type: Any) -> ContentType:
        try:
            return _content_type.validate_python(content_type)
        except ValidationError as e:
            details = format_validation_errors(e.errors())
            for detail in details:
                detail["loc"] = ["type", *detail["loc"]]
            raise self._invalid(procedure, details) from e

    @staticmethod
    def _respond(item: Any) -> ContentItemResponse:
        return ContentItemResponse.model_validate(item)

    # ========================================
    # Queries (never gated)
    # ========================================

    async def list_all(self) -> List[ContentItemResponse]:
        """Every item, newest first."""
        self.logger.info("procedure_started", procedure="listAll")

        items = await self.store.list_all()
        return [self._respond(item) for item in items]

    async def get_by_id(self, content_id: str) -> ContentItemResponse:
        """
        Fetch one item.

        Raises:
            ContentNotFoundError: No item has this id
        """
        self.logger.info("procedure_started", procedure="getById", content_id=content_id)
        content_id = self._parse_id("getById", content_id)

        item = await self.store.get(content_id)
        if item is None:
            raise ContentNotFoundError(content_id)
        return self._respond(item)

    async def get_by_type(self, content_type: Union[ContentType, str]) -> List[ContentItemResponse]:
        """Items of one recognised type, newest first."""
        self.logger.info("procedure_started", procedure="getByType", type=str(content_type))
        parsed = self._parse_type("getByType", content_type)

        items = await self.store.list_by_type(parsed.value)
        return [self._respond(item) for item in items]

    # ========================================
    # Mutations (gated by the access policy)
    # ========================================

    async def create(self, draft: Union[ContentDraft, Mapping[str, Any]]) -> ContentItemResponse:
        """Create an item; the store assigns ``id`` and ``created_at``."""
        self.logger.info("procedure_started", procedure="create")
        parsed = self._parse("create", ContentDraft, draft)
        ensure_can_mutate(self.policy, "create")

        item = await self.store.create(parsed.model_dump(mode="json"))
        return self._respond(item)

    async def update(
        self,
        content_id: str,
        patch: Union[ContentPatch, Mapping[str, Any]],
    ) -> ContentItemResponse:
        """
        Apply a partial update.

        Raises:
            ContentNotFoundError: No item has this id
        """
        self.logger.info("procedure_started", procedure="update", content_id=content_id)
        content_id = self._parse_id("update", content_id)
        parsed = self._parse("update", ContentPatch, patch)
        changes = parsed.changes()
        ensure_can_mutate(self.policy, "update")

        item = await self.store.update(content_id, changes)
        return self._respond(item)

    async def delete(self, content_id: str) -> None:
        """
        Hard-delete an item.

        Raises:
            ContentNotFoundError: No item has this id
        """
        self.logger.info("procedure_started", procedure="delete", content_id=content_id)
        content_id = self._parse_id("delete", content_id)
        ensure_can_mutate(self.policy, "delete")

        await self.store.delete(content_id)


def get_content_procedures(
    store: ContentStore,
    policy: AccessPolicy,
    logger: Optional[Any] = None,
) -> ContentProcedures:
    """Factory mirroring the other service getters."""
    return ContentProcedures(store, policy, logger=logger)
