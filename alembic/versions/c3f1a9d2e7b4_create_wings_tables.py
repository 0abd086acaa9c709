"""Create locations, reviews and votes tables

Revision ID: c3f1a9d2e7b4
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'c3f1a9d2e7b4'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('locations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('restaurant_name', sa.String(length=200), nullable=False),
        sa.Column('address', sa.String(length=300), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('latitude >= -90 AND latitude <= 90', name='ck_location_latitude_range'),
        sa.CheckConstraint('longitude >= -180 AND longitude <= 180', name='ck_location_longitude_range'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('restaurant_name', 'address', name='uq_location_name_address')
    )
    op.create_index(op.f('ix_locations_id'), 'locations', ['id'], unique=False)
    op.create_index(op.f('ix_locations_restaurant_name'), 'locations', ['restaurant_name'], unique=False)
    op.create_index(op.f('ix_locations_latitude'), 'locations', ['latitude'], unique=False)
    op.create_index(op.f('ix_locations_longitude'), 'locations', ['longitude'], unique=False)

    op.create_table('reviews',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('location_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False, comment='Opaque author id from the identity provider'),
        sa.Column('review', sa.Text(), nullable=False),
        sa.Column('rating', sa.String(length=20), nullable=False, comment='Rating summary, e.g. a letter grade'),
        sa.Column('date_visited', sa.Date(), nullable=False),
        sa.Column('website_url', sa.String(length=500), nullable=True),
        sa.Column('upvotes_count', sa.Integer(), nullable=False, server_default='0', comment='Number of up votes'),
        sa.Column('downvotes_count', sa.Integer(), nullable=False, server_default='0', comment='Number of down votes'),
        sa.Column('experience_details', sa.JSON(none_as_null=True), nullable=True),
        sa.Column('sauce_details', sa.JSON(none_as_null=True), nullable=True),
        sa.Column('ratings', sa.JSON(none_as_null=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('upvotes_count >= 0', name='ck_review_upvotes_nonnegative'),
        sa.CheckConstraint('downvotes_count >= 0', name='ck_review_downvotes_nonnegative'),
        sa.ForeignKeyConstraint(['location_id'], ['locations.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_reviews_id'), 'reviews', ['id'], unique=False)
    op.create_index(op.f('ix_reviews_location_id'), 'reviews', ['location_id'], unique=False)
    op.create_index(op.f('ix_reviews_user_id'), 'reviews', ['user_id'], unique=False)
    op.create_index(op.f('ix_reviews_date_visited'), 'reviews', ['date_visited'], unique=False)
    op.create_index(op.f('ix_reviews_created_at'), 'reviews', ['created_at'], unique=False)

    op.create_table('votes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('review_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('vote_type', sa.String(length=4), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("vote_type IN ('up', 'down')", name='ck_vote_type'),
        sa.ForeignKeyConstraint(['review_id'], ['reviews.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('review_id', 'user_id', name='uq_vote_review_user')
    )
    op.create_index(op.f('ix_votes_review_id'), 'votes', ['review_id'], unique=False)
    op.create_index(op.f('ix_votes_user_id'), 'votes', ['user_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_votes_user_id'), table_name='votes')
    op.drop_index(op.f('ix_votes_review_id'), table_name='votes')
    op.drop_table('votes')
    op.drop_index(op.f('ix_reviews_created_at'), table_name='reviews')
    op.drop_index(op.f('ix_reviews_date_visited'), table_name='reviews')
    op.drop_index(op.f('ix_reviews_user_id'), table_name='reviews')
    op.drop_index(op.f('ix_reviews_location_id'), table_name='reviews')
    op.drop_index(op.f('ix_reviews_id'), table_name='reviews')
    op.drop_table('reviews')
    op.drop_index(op.f('ix_locations_longitude'), table_name='locations')
    op.drop_index(op.f('ix_locations_latitude'), table_name='locations')
    op.drop_index(op.f('ix_locations_restaurant_name'), table_name='locations')
    op.drop_index(op.f('ix_locations_id'), table_name='locations')
    op.drop_table('locations')
