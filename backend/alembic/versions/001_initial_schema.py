"""Initial schema

Revision ID: 001
Revises: 
Create Date: 2024-01-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Workouts table (user_id is the identity provider's subject id)
    op.create_table(
        'workouts',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('workout_date', sa.Date(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_workouts_user_id', 'workouts', ['user_id'])

    # Exercises table; rows go with their workout
    op.create_table(
        'exercises',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('workout_id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('exercise_name', sa.String(255), nullable=False),
        sa.Column('sets', sa.Integer(), nullable=False),
        sa.Column('reps', sa.Integer(), nullable=False),
        sa.Column('weight', sa.Numeric(10, 2), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['workout_id'], ['workouts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_exercises_workout_id', 'exercises', ['workout_id'])
    op.create_index('ix_exercises_user_id', 'exercises', ['user_id'])


def downgrade() -> None:
    op.drop_index('ix_exercises_user_id', table_name='exercises')
    op.drop_index('ix_exercises_workout_id', table_name='exercises')
    op.drop_table('exercises')
    op.drop_index('ix_workouts_user_id', table_name='workouts')
    op.drop_table('workouts')
