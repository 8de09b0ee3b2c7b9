"""create_content_items

Revision ID: 4b1e9c2d7a10
Revises:
Create Date: 2026-10-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '4b1e9c2d7a10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create the content_items table.

    Indexes:
    - type, for getByType
    - created_at, for the newest-first ordering every list uses
    """
    op.create_table(
        'content_items',
        sa.Column('id', sa.String(length=36), nullable=False, comment='Opaque identifier (UUID4 string)'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, comment='Timestamp when record was created (UTC)'),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, comment='Timestamp when record was last updated (UTC)'),
        sa.Column('type', sa.String(length=50), nullable=False, comment='Content category (youtube, article, ...)'),
        sa.Column('url', sa.Text(), nullable=False, comment='Absolute URL of the content'),
        sa.Column('title', sa.String(length=500), nullable=False, comment='Display title'),
        sa.Column('note', sa.Text(), nullable=False, server_default='', comment='Free-text note'),
        sa.Column('thumbnail', sa.Text(), nullable=True, comment='Thumbnail image URL'),
        sa.Column('author', sa.String(length=255), nullable=True, comment='Author or channel'),
        sa.Column('duration', sa.String(length=50), nullable=True, comment='Duration, e.g. 12:34'),
        sa.Column('location', sa.String(length=255), nullable=True, comment='Location'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_content_items')),
        comment='Saved content items shown on the dashboard'
    )
    op.create_index(op.f('ix_content_items_type'), 'content_items', ['type'], unique=False)
    op.create_index(op.f('ix_content_items_created_at'), 'content_items', ['created_at'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_content_items_created_at'), table_name='content_items')
    op.drop_index(op.f('ix_content_items_type'), table_name='content_items')
    op.drop_table('content_items')
