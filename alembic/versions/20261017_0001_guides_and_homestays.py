"""Create guides and homestays with their secondary and text indexes

Revision ID: 20261017_0001
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '20261017_0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

def _has_table(bind, name: str) -> bool:
    try:
        insp = inspect(bind)
        return insp.has_table(name)
    except Exception:
        return False

def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]

def upgrade() -> None:
    bind = op.get_bind()

    # Non-native enums: VARCHAR(20) plus a CHECK constraint
    availability_enum = sa.Enum('available', 'busy', 'unavailable', name='guideavailability', native_enum=False, length=20)
    property_type_enum = sa.Enum('entire', 'private', 'shared', name='propertytype', native_enum=False, length=20)
    status_enum = sa.Enum('active', 'inactive', 'pending', name='homestaystatus', native_enum=False, length=20)

    if not _has_table(bind, 'guides'):
        op.create_table('guides',
            sa.Column('id', sa.String(length=32), nullable=False),
            sa.Column('name', sa.String(length=100), nullable=False),
            sa.Column('bio', sa.Text(), nullable=False),
            sa.Column('languages', sa.JSON(), nullable=False),
            sa.Column('experience', sa.Text(), nullable=False),
            sa.Column('location_district', sa.Text(), nullable=False),
            sa.Column('location_state', sa.Text(), nullable=False),
            sa.Column('pricing_half_day', sa.Float(), nullable=False),
            sa.Column('pricing_full_day', sa.Float(), nullable=False),
            sa.Column('pricing_multi_day', sa.Float(), nullable=True),
            sa.Column('pricing_workshop', sa.Float(), nullable=True),
            sa.Column('certifications', sa.JSON(), nullable=True),
            sa.Column('availability', availability_enum, nullable=False),
            *_timestamps(),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_guides_location_district'), 'guides', ['location_district'], unique=False)
        op.create_index(op.f('ix_guides_availability'), 'guides', ['availability'], unique=False)

    if not _has_table(bind, 'guide_specializations'):
        op.create_table('guide_specializations',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('guide_id', sa.String(length=32), nullable=False),
            sa.Column('value', sa.Text(), nullable=False),
            sa.ForeignKeyConstraint(['guide_id'], ['guides.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_guide_specializations_guide_id'), 'guide_specializations', ['guide_id'], unique=False)
        op.create_index(op.f('ix_guide_specializations_value'), 'guide_specializations', ['value'], unique=False)

    if not _has_table(bind, 'guide_search_terms'):
        op.create_table('guide_search_terms',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('guide_id', sa.String(length=32), nullable=False),
            sa.Column('term', sa.String(length=64), nullable=False),
            sa.Column('frequency', sa.Integer(), nullable=False),
            sa.ForeignKeyConstraint(['guide_id'], ['guides.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_guide_search_terms_guide_id'), 'guide_search_terms', ['guide_id'], unique=False)
        op.create_index('ix_guide_search_terms_term_guide', 'guide_search_terms', ['term', 'guide_id'], unique=False)

    if not _has_table(bind, 'homestays'):
        op.create_table('homestays',
            sa.Column('id', sa.String(length=32), nullable=False),
            sa.Column('title', sa.String(length=200), nullable=False),
            sa.Column('description', sa.Text(), nullable=False),
            sa.Column('property_type', property_type_enum, nullable=False),
            sa.Column('location_address', sa.Text(), nullable=False),
            sa.Column('location_district', sa.Text(), nullable=False),
            sa.Column('location_state', sa.Text(), nullable=False),
            sa.Column('location_lat', sa.Float(), nullable=True),
            sa.Column('location_lng', sa.Float(), nullable=True),
            sa.Column('pricing_base_price', sa.Float(), nullable=False),
            sa.Column('pricing_cleaning_fee', sa.Float(), nullable=True),
            sa.Column('pricing_weekend_price', sa.Float(), nullable=True),
            sa.Column('capacity_guests', sa.Float(), nullable=False),
            sa.Column('capacity_bedrooms', sa.Float(), nullable=False),
            sa.Column('capacity_beds', sa.Float(), nullable=False),
            sa.Column('capacity_bathrooms', sa.Float(), nullable=False),
            sa.Column('amenities', sa.JSON(), nullable=False),
            sa.Column('house_rules', sa.JSON(), nullable=True),
            sa.Column('images', sa.JSON(), nullable=False),
            sa.Column('status', status_enum, nullable=False),
            *_timestamps(),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_homestays_location_district'), 'homestays', ['location_district'], unique=False)
        op.create_index(op.f('ix_homestays_pricing_base_price'), 'homestays', ['pricing_base_price'], unique=False)
        op.create_index(op.f('ix_homestays_status'), 'homestays', ['status'], unique=False)

    if not _has_table(bind, 'homestay_search_terms'):
        op.create_table('homestay_search_terms',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('homestay_id', sa.String(length=32), nullable=False),
            sa.Column('term', sa.String(length=64), nullable=False),
            sa.Column('frequency', sa.Integer(), nullable=False),
            sa.ForeignKeyConstraint(['homestay_id'], ['homestays.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_homestay_search_terms_homestay_id'), 'homestay_search_terms', ['homestay_id'], unique=False)
        op.create_index('ix_homestay_search_terms_term_homestay', 'homestay_search_terms', ['term', 'homestay_id'], unique=False)


def downgrade() -> None:
    op.drop_table('homestay_search_terms')
    op.drop_table('homestays')
    op.drop_table('guide_search_terms')
    op.drop_table('guide_specializations')
    op.drop_table('guides')
