"""create scores table

Revision ID: 0001_create_scores
Revises:
Create Date: 2026-10-17
"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy import inspect

revision = '0001_create_scores'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    bind = op.get_bind()
    inspector = inspect(bind)
    if 'scores' not in set(inspector.get_table_names()):
        op.create_table(
            'scores',
            sa.Column('id', sa.Integer, primary_key=True),
            sa.Column('name', sa.String(100), nullable=False),
            sa.Column('points', sa.Integer, nullable=False),
        )
        op.create_index('ix_scores_points', 'scores', ['points'])


def downgrade() -> None:
    op.drop_index('ix_scores_points', table_name='scores')
    op.drop_table('scores')
