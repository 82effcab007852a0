"""add_user_blocks

Revision ID: 8e3f0a6c41d2
Revises: 5b1c7e2a9d40
Create Date: 2026-10-19 16:47:05.113920

Production-safe migration: Only creates the user_blocks table if missing.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '8e3f0a6c41d2'
down_revision: Union[str, None] = '5b1c7e2a9d40'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade() -> None:
    if not table_exists('user_blocks'):
        op.create_table('user_blocks',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('user_id', sa.String(length=36), nullable=False),
            sa.Column('reason', sa.String(length=500), nullable=False),
            sa.Column('is_permanent', sa.Boolean(), nullable=False),
            sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
            sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
            sa.Column('is_active', sa.Boolean(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.CheckConstraint(
                '(is_permanent AND end_date IS NULL) OR (NOT is_permanent AND end_date IS NOT NULL)',
                name='check_block_end_date',
            ),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_user_blocks_user_id'), 'user_blocks', ['user_id'], unique=False)
        # One active block per user
        op.create_index(
            'uq_user_blocks_active_user', 'user_blocks', ['user_id'], unique=True,
            postgresql_where=sa.text('is_active'),
            sqlite_where=sa.text('is_active'),
        )


def downgrade() -> None:
    if table_exists('user_blocks'):
        op.drop_table('user_blocks')
