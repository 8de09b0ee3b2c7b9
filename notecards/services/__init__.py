"""Business logic services."""

from notecards.services.content_procedures import ContentProcedures, get_content_procedures
from notecards.services.content_store import ContentStore, SQLAlchemyContentStore
from notecards.services.derived_view import DerivedView, build_view

__all__ = [
    "ContentProcedures",
    "get_content_procedures",
    "ContentStore",
    "SQLAlchemyContentStore",
    "DerivedView",
    "build_view",
]
