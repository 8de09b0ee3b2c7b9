"""
Content Models

This module contains the saved-content model for notecards.

Models Included:
----------------
1. ContentItem - One saved link (video, article, post...) with its note
2. ContentType (Enum) - Recognised content categories

Database Tables:
----------------
- content_items: Every saved item, keyed by an opaque string id

The ``type`` column is a plain string rather than a database enum. Writes
only accept ``ContentType`` members, but rows with a type this code does not
know yet (added by a newer release, or by hand) still load and render.
"""

import enum
from typing import Optional

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from notecards.db.base import BaseModel, String50, String255, String500


# ================================
# Enums
# ================================

class ContentType(str, enum.Enum):
    """
    Enum for content categories.

    Each category gets its own icon in the dashboard; anything outside this
    list falls back to a generic indicator (see ``services.derived_view``).
    """

    YOUTUBE = "youtube"
    ARTICLE = "article"
    REDDIT = "reddit"
    TWITTER = "twitter"
    SPOTIFY = "spotify"
    SOUNDCLOUD = "soundcloud"
    MOVIE = "movie"
    BOOK = "book"
    IMAGE = "image"
    VIDEO = "video"

    def __str__(self) -> str:
        """Return the string value of the enum."""
        return self.value

    @classmethod
    def parse(cls, value: object) -> Optional["ContentType"]:
        """Return the matching member, or None for unrecognised values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return None


# ================================
# ContentItem Model
# ================================

class ContentItem(BaseModel):
    """
    A saved piece of content.

    Table: content_items
    --------------------
    ``id`` and ``created_at`` come from the store when the item is created;
    ``created_at`` is the only sort key (newest first). ``note`` is required
    but may be an empty string. The remaining descriptive fields are optional.

    Example:
    --------
    ContentItem(
        type="youtube",
        url="https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        title="Never Gonna Give You Up",
        note="classic",
        author="Rick Astley",
        duration="3:33",
    )
    """

    __tablename__ = "content_items"

    type: Mapped[str] = mapped_column(
        String50,
        nullable=False,
        index=True,
        comment="Content category (youtube, article, reddit, ...)"
    )

    url: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Absolute URI of the saved content"
    )

    title: Mapped[str] = mapped_column(
        String500,
        nullable=False,
        comment="Display title"
    )

    note: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        comment="Free-text annotation, may be empty"
    )

    thumbnail: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Thumbnail image URL"
    )

    author: Mapped[Optional[str]] = mapped_column(
        String255,
        nullable=True,
        comment="Author, channel or account name"
    )

    duration: Mapped[Optional[str]] = mapped_column(
        String50,
        nullable=True,
        comment="Human-readable duration, e.g. 12:34"
    )

    location: Mapped[Optional[str]] = mapped_column(
        String255,
        nullable=True,
        comment="Where the content was found or is about"
    )

    @property
    def content_type(self) -> Optional[ContentType]:
        """The typed category, or None when the stored type is unrecognised."""
        return ContentType.parse(self.type)

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"ContentItem(id={self.id}, type={self.type}, title='{self.title}')"
