"""add saved_routes table

Revision ID: 8c2d4e6f1a3b
Revises: 3e1f0c2a9b7d
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8c2d4e6f1a3b'
down_revision: Union[str, Sequence[str], None] = '3e1f0c2a9b7d'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'saved_routes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('distance_meters', sa.Float(), nullable=False),
        sa.Column('estimated_minutes', sa.Integer(), nullable=True),
        sa.Column('route_polyline', sa.String(), nullable=False),
        sa.Column('start_location', sa.String(length=255), nullable=True),
        sa.Column('is_favorite', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_saved_routes_id', 'saved_routes', ['id'])
    op.create_index('ix_saved_routes_user_id', 'saved_routes', ['user_id'])


def downgrade() -> None:
    op.drop_index('ix_saved_routes_user_id', table_name='saved_routes')
    op.drop_index('ix_saved_routes_id', table_name='saved_routes')
    op.drop_table('saved_routes')
