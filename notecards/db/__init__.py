"""Database utilities and session management."""

from notecards.db.base import Base, BaseModel, UTCDateTime, new_id, utcnow
from notecards.db.deps import DBSession, get_db
from notecards.db.session import Database, create_database, get_engine_config

__all__ = [
    # Base classes
    "Base",
    "BaseModel",
    "UTCDateTime",
    "new_id",
    "utcnow",
    # Session management
    "Database",
    "create_database",
    "get_engine_config",
    # Dependencies
    "get_db",
    "DBSession",
]
