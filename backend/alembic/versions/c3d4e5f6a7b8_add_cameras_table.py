"""add_cameras_table

Revision ID: c3d4e5f6a7b8
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates the PostGIS camera catalog.

- Enables the postgis extension (requires a superuser or a pre-installed extension)
- One GEOGRAPHY(POINT, 4326) per camera, NOT NULL
- GiST index on the geom::geometry expression for viewport queries
- B-tree index on role for the role filter
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from geoalchemy2 import Geography

# revision identifiers, used by Alembic.
revision: str = 'c3d4e5f6a7b8'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the cameras table and its spatial and role indexes."""
    op.execute("CREATE EXTENSION IF NOT EXISTS postgis")

    op.create_table(
        'cameras',
        sa.Column('id', sa.Text(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('role', sa.Text(), nullable=False),
        sa.Column('stream_url', sa.Text(), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=True),
        sa.Column('video_profile', sa.Text(), server_default='H264 Main', nullable=True),
        sa.Column('width', sa.Integer(), server_default='640', nullable=True),
        sa.Column('height', sa.Integer(), server_default='480', nullable=True),
        sa.Column('fps', sa.Integer(), server_default='15', nullable=True),
        sa.Column('audio_enabled', sa.Boolean(), server_default=sa.text('false'), nullable=True),
        sa.Column('last_status', sa.Text(), nullable=True),
        sa.Column('last_checked', sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            'geom',
            Geography(geometry_type='POINT', srid=4326, spatial_index=False),
            nullable=False
        ),
        sa.PrimaryKeyConstraint('id')
    )

    # Query pattern: cameras inside a map viewport (filters on geom::geometry)
    op.create_index(
        'idx_cameras_geom',
        'cameras',
        [sa.text('(geom::geometry(Point,4326))')],
        unique=False,
        postgresql_using='gist'
    )
    # Query pattern: cameras with a given role
    op.create_index('idx_cameras_role', 'cameras', ['role'], unique=False)


def downgrade() -> None:
    """Drop the cameras table (the postgis extension is left installed)."""
    op.drop_index('idx_cameras_role', table_name='cameras')
    op.drop_index('idx_cameras_geom', table_name='cameras')
    op.drop_table('cameras')
