"""
Database Dependencies for FastAPI Routes

Routes declare what they need and FastAPI provides it:

    @router.get("/content")
    async def list_content(db: DBSession):
        ...

The session comes from the ``Database`` handle stored on ``app.state`` at
startup, so every request shares one engine and connection pool.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from notecards.db.session import Database


# ================================
# Database Session Dependency
# ================================

async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session.

    The session is closed (and rolled back on error) once the route returns,
    whatever the outcome.

    Yields:
        AsyncSession: Database session for the current request
    """
    database: Database = request.app.state.database
    async for session in database.session():
        yield session


DBSession = Annotated[AsyncSession, Depends(get_db)]


__all__ = [
    "get_db",
    "DBSession",
]
