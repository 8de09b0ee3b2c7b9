"""
Database Models

This module contains all SQLAlchemy ORM models for the application.

Import models from here so they are registered with SQLAlchemy (and visible
to Alembic autogenerate):

    from notecards.models import ContentItem, ContentType
"""

from notecards.models.content import ContentItem, ContentType

__all__ = [
    "ContentItem",
    "ContentType",
]
