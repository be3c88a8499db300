"""create step_data, step_goals, walk_sessions, route_coordinates, walk_tracks

Revision ID: 3e1f0c2a9b7d
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3e1f0c2a9b7d'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'step_data',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('steps', sa.Integer(), nullable=False),
        sa.Column('distance_meters', sa.Float(), nullable=False),
        sa.Column('calories', sa.Integer(), nullable=False),
        sa.Column('active_minutes', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'date', name='uq_step_data_user_date'),
    )
    op.create_index('ix_step_data_id', 'step_data', ['id'])
    op.create_index('ix_step_data_user_id', 'step_data', ['user_id'])

    op.create_table(
        'step_goals',
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('daily_steps', sa.Integer(), nullable=False),
        sa.Column('weekly_steps', sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint('user_id'),
    )
    op.create_index('ix_step_goals_user_id', 'step_goals', ['user_id'])

    op.create_table(
        'walk_sessions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('notes', sa.String(), nullable=True),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('duration_seconds', sa.Integer(), nullable=True),
        sa.Column('distance_meters', sa.Float(), nullable=True),
        sa.Column('steps', sa.Integer(), nullable=True),
        sa.Column('average_pace_minutes_per_km', sa.Float(), nullable=True),
        sa.Column('max_elevation_meters', sa.Float(), nullable=True),
        sa.Column('elevation_gain_meters', sa.Float(), nullable=True),
        sa.Column('calories', sa.Integer(), nullable=True),
        sa.Column('mode', sa.String(length=20), server_default='JUST_WALK', nullable=False),
        sa.Column('source', sa.String(length=20), server_default='manual', nullable=False),
        sa.Column('is_saved', sa.Boolean(), nullable=False),
        sa.Column('is_public', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_walk_sessions_id', 'walk_sessions', ['id'])
    op.create_index('ix_walk_sessions_user_id', 'walk_sessions', ['user_id'])
    op.create_index('ix_walk_sessions_start_time', 'walk_sessions', ['start_time'])

    op.create_table(
        'route_coordinates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('walk_session_id', sa.Integer(), nullable=False),
        sa.Column('seq', sa.Integer(), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('elevation_meters', sa.Float(), nullable=True),
        sa.Column('accuracy_meters', sa.Float(), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['walk_session_id'], ['walk_sessions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_route_coordinates_id', 'route_coordinates', ['id'])
    op.create_index('ix_route_coordinates_walk_session_id', 'route_coordinates', ['walk_session_id'])

    op.create_table(
        'walk_tracks',
        sa.Column('walk_session_id', sa.Integer(), nullable=False),
        sa.Column('geojson', sa.JSON(), nullable=True),
        sa.Column('bounds', sa.JSON(), nullable=True),
        sa.Column('points_count', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['walk_session_id'], ['walk_sessions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('walk_session_id'),
    )


def downgrade() -> None:
    op.drop_table('walk_tracks')
    op.drop_index('ix_route_coordinates_walk_session_id', table_name='route_coordinates')
    op.drop_index('ix_route_coordinates_id', table_name='route_coordinates')
    op.drop_table('route_coordinates')
    op.drop_index('ix_walk_sessions_start_time', table_name='walk_sessions')
    op.drop_index('ix_walk_sessions_user_id', table_name='walk_sessions')
    op.drop_index('ix_walk_sessions_id', table_name='walk_sessions')
    op.drop_table('walk_sessions')
    op.drop_index('ix_step_goals_user_id', table_name='step_goals')
    op.drop_table('step_goals')
    op.drop_index('ix_step_data_user_id', table_name='step_data')
    op.drop_index('ix_step_data_id', table_name='step_data')
    op.drop_table('step_data')
