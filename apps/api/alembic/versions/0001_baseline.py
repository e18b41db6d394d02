"""Baseline migration - libraries, content, inbox and analytics

Revision ID: 0001_baseline
Revises: 
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_baseline'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(with_updated: bool = True) -> list[sa.Column]:
    columns = [sa.Column('created_at', sa.DateTime(timezone=True), nullable=False)]
    if with_updated:
        columns.append(sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False))
    return columns


def _library_fk(nullable: bool = False) -> sa.Column:
    return sa.Column(
        'library_id',
        sa.Uuid(),
        sa.ForeignKey('libraries.id', ondelete='CASCADE'),
        nullable=nullable,
    )


def upgrade() -> None:
    # ==========================================================================
    # Libraries
    # ==========================================================================
    op.create_table(
        'libraries',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('location', sa.String(255), nullable=False),
        sa.Column('city', sa.String(120), nullable=False),
        sa.Column('country', sa.String(120), nullable=False),
        sa.Column('library_type', sa.String(50), nullable=False),
        sa.Column('logo_url', sa.Text(), nullable=True),
        sa.Column('featured_image_url', sa.Text(), nullable=True),
        sa.Column('website', sa.Text(), nullable=True),
        sa.Column('coordinates', sa.JSON(), nullable=True),
        sa.Column('is_approved', sa.Boolean(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_featured', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index('idx_libraries_approved', 'libraries', ['is_approved'])

    # ==========================================================================
    # Content
    # ==========================================================================
    op.create_table(
        'stories',
        sa.Column('id', sa.Uuid(), primary_key=True),
        _library_fk(),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('summary', sa.Text(), nullable=False),
        sa.Column('featured_image_url', sa.Text(), nullable=True),
        sa.Column('is_published', sa.Boolean(), nullable=False),
        sa.Column('is_approved', sa.Boolean(), nullable=False),
        sa.Column('is_featured', sa.Boolean(), nullable=False),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index('idx_stories_library_created', 'stories', ['library_id', 'created_at'])
    op.create_index('idx_stories_public', 'stories', ['is_published', 'is_approved'])

    op.create_table(
        'timelines',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column(
            'story_id', sa.Uuid(), sa.ForeignKey('stories.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('timeline_points', sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_timelines_story_id', 'timelines', ['story_id'])

    op.create_table(
        'media_items',
        sa.Column('id', sa.Uuid(), primary_key=True),
        _library_fk(),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('media_type', sa.String(50), nullable=False),
        sa.Column('url', sa.Text(), nullable=False),
        sa.Column('gallery_id', sa.String(255), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('is_approved', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index('idx_media_library_created', 'media_items', ['library_id', 'created_at'])
    op.create_index('idx_media_gallery', 'media_items', ['gallery_id'])

    op.create_table(
        'events',
        sa.Column('id', sa.Uuid(), primary_key=True),
        _library_fk(),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('event_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('location', sa.String(255), nullable=False),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('is_published', sa.Boolean(), nullable=False),
        sa.Column('is_approved', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index('idx_events_library_date', 'events', ['library_id', 'event_date'])

    # ==========================================================================
    # Contact inbox
    # ==========================================================================
    op.create_table(
        'contact_messages',
        sa.Column('id', sa.Uuid(), primary_key=True),
        _library_fk(nullable=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(320), nullable=False),
        sa.Column('subject', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('response_status', sa.String(20), nullable=False),
        *_timestamps(with_updated=False),
    )
    op.create_index('idx_contact_library_created', 'contact_messages', ['library_id', 'created_at'])

    op.create_table(
        'message_responses',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column(
            'contact_message_id',
            sa.Uuid(),
            sa.ForeignKey('contact_messages.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('responded_by', sa.Uuid(), nullable=False),
        sa.Column('subject', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('email_sent', sa.Boolean(), nullable=False),
        sa.Column('email_sent_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(with_updated=False),
    )
    op.create_index('ix_message_responses_contact_message_id', 'message_responses', ['contact_message_id'])

    # ==========================================================================
    # Analytics
    # ==========================================================================
    op.create_table(
        'analytics',
        sa.Column('id', sa.Uuid(), primary_key=True),
        _library_fk(),
        sa.Column(
            'story_id', sa.Uuid(), sa.ForeignKey('stories.id', ondelete='CASCADE'), nullable=True
        ),
        sa.Column('page_type', sa.String(50), nullable=False),
        sa.Column('views', sa.Integer(), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        *_timestamps(with_updated=False),
    )
    op.create_index('idx_analytics_library_date', 'analytics', ['library_id', 'date'])


def downgrade() -> None:
    for table in (
        'analytics',
        'message_responses',
        'contact_messages',
        'events',
        'media_items',
        'timelines',
        'stories',
        'libraries',
    ):
        op.drop_table(table)
