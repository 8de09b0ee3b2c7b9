"""
Content Store

Data access for saved content items. The procedures layer only talks to the
``ContentStore`` protocol, so tests can swap in an in-memory store while the
application uses ``SQLAlchemyContentStore`` over the shared database handle.

Behaviour on a missing id:
- ``get`` returns None (the caller decides whether that is an error)
- ``update`` and ``delete`` raise ContentNotFoundError

Infrastructure failures (driver errors, refused connections, timeouts) are
logged here with full detail and re-raised as StoreUnavailableError, which
only carries a generic message.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, List, Mapping, Optional, Protocol, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notecards.core.exceptions import ContentNotFoundError, StoreUnavailableError
from notecards.core.logging import get_logger
from notecards.db.base import new_id, utcnow
from notecards.models.content import ContentItem

logger = get_logger(__name__)

T = TypeVar("T")

STORE_FAILURES = (SQLAlchemyError, OSError, asyncio.TimeoutError)


class ContentStore(Protocol):
    """Persistence contract for content items."""

    async def list_all(self) -> List[ContentItem]:
        ...

    async def get(self, content_id: str) -> Optional[ContentItem]:
        ...

    async def list_by_type(self, content_type: str) -> List[ContentItem]:
        ...

    async def create(self, fields: Mapping[str, Any]) -> ContentItem:
        ...

    async def update(self, content_id: str, changes: Mapping[str, Any]) -> ContentItem:
        ...

    async def delete(self, content_id: str) -> None:
        ...


class SQLAlchemyContentStore:
    """ContentStore backed by an async SQLAlchemy session."""

    def __init__(self, db: AsyncSession, timeout: Optional[float] = None):
        self.db = db
        self.timeout = timeout

    # ========================================
    # Helpers
    # ========================================

    async def _run(self, awaitable: Awaitable[T]) -> T:
        """Await a database round trip, bounded by the configured timeout."""
        if self.timeout is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, timeout=self.timeout)

    @asynccontextmanager
    async def _guard(self, operation: str, write: bool = False) -> AsyncIterator[None]:
        try:
            yield
        except STORE_FAILURES as e:
            logger.error(
                "content_store_error",
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            if write:
                await self._rollback(operation)
            raise StoreUnavailableError() from e

    async def _rollback(self, operation: str) -> None:
        try:
            await self.db.rollback()
        except STORE_FAILURES as e:
            logger.warning(
                "content_store_rollback_failed",
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
            )

    # ========================================
    # Queries
    # ========================================

    async def list_all(self) -> List[ContentItem]:
        """All items, newest first."""
        query = select(ContentItem).order_by(ContentItem.created_at.desc())

        async with self._guard("list_all"):
            result = await self._run(self.db.execute(query))
            return list(result.scalars().all())

    async def get(self, content_id: str) -> Optional[ContentItem]:
        async with self._guard("get"):
            return await self._run(self.db.get(ContentItem, content_id))

    async def list_by_type(self, content_type: str) -> List[ContentItem]:
        """Items of one type, newest first."""
        query = (
            select(ContentItem)
            .where(ContentItem.type == content_type)
            .order_by(ContentItem.created_at.desc())
        )

        async with self._guard("list_by_type"):
            result = await self._run(self.db.execute(query))
            return list(result.scalars().all())

    # ========================================
    # Mutations
    # ========================================

    async def create(self, fields: Mapping[str, Any]) -> ContentItem:
        """Insert a new item; the store assigns ``id`` and ``created_at``."""
        now = utcnow()
        item = ContentItem(**dict(fields))
        item.id = new_id()
        item.created_at = now
        item.updated_at = now

        async with self._guard("create", write=True):
            self.db.add(item)
            await self._run(self.db.commit())

        logger.info("content_created", content_id=item.id, type=item.type)
        return item

    async def update(self, content_id: str, changes: Mapping[str, Any]) -> ContentItem:
        """Apply a partial update in place (last write wins)."""
        async with self._guard("update", write=True):
            item = await self._run(self.db.get(ContentItem, content_id))
            if item is None:
                raise ContentNotFoundError(content_id)

            if changes:
                for field, value in changes.items():
                    setattr(item, field, value)
                item.updated_at = utcnow()
                await self._run(self.db.commit())

        logger.info("content_updated", content_id=content_id, fields=sorted(changes))
        return item

    async def delete(self, content_id: str) -> None:
        """Hard delete. Unknown ids raise ContentNotFoundError."""
        async with self._guard("delete", write=True):
            item = await self._run(self.db.get(ContentItem, content_id))
            if item is None:
                raise ContentNotFoundError(content_id)

            await self._run(self.db.delete(item))
            await self._run(self.db.commit())

        logger.info("content_deleted", content_id=content_id)
