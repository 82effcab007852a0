"""booking_ledger_baseline

Revision ID: 5b1c7e2a9d40
Revises: 
Create Date: 2026-10-19 10:12:41.508331

Production-safe migration: Only creates tables that do not exist yet.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '5b1c7e2a9d40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

user_role = sa.Enum('USER', 'INTERVIEWER', 'ADMIN', name='user_role')
slot_status = sa.Enum('AVAILABLE', 'BOOKED', 'CANCELLED', name='slot_status')
interview_status = sa.Enum('SCHEDULED', 'COMPLETED', 'CANCELLED', name='interview_status')
booking_status = sa.Enum('CREATED', 'CONFIRMED', 'CANCELLED', 'COMPLETED', name='booking_status')
transaction_type = sa.Enum('EARNED', 'SPENT', 'REFUNDED', name='transaction_type')
notification_type = sa.Enum('CREATION', 'CONFIRMATION', 'CANCELLATION', 'REMINDER', name='notification_type')


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade() -> None:
    """
    Create the booking and points ledger schema.
    Tables that already exist (e.g. created by init_db) are left untouched.
    """
    if not table_exists('users'):
        op.create_table('users',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('full_name', sa.String(), nullable=False),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('password_hash', sa.String(), nullable=True),
            sa.Column('role', user_role, nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    if not table_exists('time_slots'):
        op.create_table('time_slots',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('interviewer_id', sa.String(length=36), nullable=False),
            sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
            sa.Column('end_time', sa.DateTime(timezone=True), nullable=False),
            sa.Column('specialization', sa.String(), nullable=False),
            sa.Column('status', slot_status, nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.CheckConstraint('end_time > start_time', name='check_slot_time_range'),
            sa.ForeignKeyConstraint(['interviewer_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('idx_slot_interviewer_range', 'time_slots', ['interviewer_id', 'start_time', 'end_time'], unique=False)
        op.create_index(op.f('ix_time_slots_interviewer_id'), 'time_slots', ['interviewer_id'], unique=False)
        op.create_index(op.f('ix_time_slots_start_time'), 'time_slots', ['start_time'], unique=False)
        op.create_index(op.f('ix_time_slots_specialization'), 'time_slots', ['specialization'], unique=False)
        op.create_index(op.f('ix_time_slots_status'), 'time_slots', ['status'], unique=False)

    if not table_exists('interviews'):
        op.create_table('interviews',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('title', sa.String(), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('specialization', sa.String(), nullable=False),
            sa.Column('interviewer_id', sa.String(length=36), nullable=False),
            sa.Column('participant_id', sa.String(length=36), nullable=True),
            sa.Column('scheduled_at', sa.DateTime(timezone=True), nullable=False),
            sa.Column('duration', sa.Integer(), nullable=False),
            sa.Column('video_link', sa.String(), nullable=True),
            sa.Column('status', interview_status, nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['interviewer_id'], ['users.id'], ),
            sa.ForeignKeyConstraint(['participant_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_interviews_interviewer_id'), 'interviews', ['interviewer_id'], unique=False)
        op.create_index(op.f('ix_interviews_participant_id'), 'interviews', ['participant_id'], unique=False)

    if not table_exists('bookings'):
        op.create_table('bookings',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('slot_id', sa.String(length=36), nullable=False),
            sa.Column('candidate_id', sa.String(length=36), nullable=False),
            sa.Column('points_spent', sa.Integer(), nullable=False),
            sa.Column('status', booking_status, nullable=False),
            sa.Column('interview_id', sa.String(length=36), nullable=True),
            sa.Column('cancel_reason', sa.Text(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.ForeignKeyConstraint(['slot_id'], ['time_slots.id'], ),
            sa.ForeignKeyConstraint(['candidate_id'], ['users.id'], ),
            sa.ForeignKeyConstraint(['interview_id'], ['interviews.id'], ),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('interview_id')
        )
        op.create_index(op.f('ix_bookings_slot_id'), 'bookings', ['slot_id'], unique=False)
        op.create_index(op.f('ix_bookings_candidate_id'), 'bookings', ['candidate_id'], unique=False)
        op.create_index(op.f('ix_bookings_status'), 'bookings', ['status'], unique=False)
        op.create_index(op.f('ix_bookings_created_at'), 'bookings', ['created_at'], unique=False)
        # One non-cancelled booking per slot
        op.create_index(
            'uq_bookings_active_slot', 'bookings', ['slot_id'], unique=True,
            postgresql_where=sa.text("status <> 'CANCELLED'"),
            sqlite_where=sa.text("status <> 'CANCELLED'"),
        )

    if not table_exists('points_transactions'):
        op.create_table('points_transactions',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('user_id', sa.String(length=36), nullable=False),
            sa.Column('amount', sa.Integer(), nullable=False),
            sa.Column('type', transaction_type, nullable=False),
            sa.Column('description', sa.String(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.CheckConstraint('amount > 0', name='check_points_amount_positive'),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('idx_points_user_created', 'points_transactions', ['user_id', 'created_at'], unique=False)
        op.create_index(op.f('ix_points_transactions_user_id'), 'points_transactions', ['user_id'], unique=False)

    if not table_exists('booking_notifications'):
        op.create_table('booking_notifications',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('user_id', sa.String(length=36), nullable=False),
            sa.Column('booking_id', sa.String(length=36), nullable=False),
            sa.Column('type', notification_type, nullable=False),
            sa.Column('is_read', sa.Boolean(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.ForeignKeyConstraint(['booking_id'], ['bookings.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('idx_notification_user_read', 'booking_notifications', ['user_id', 'is_read'], unique=False)
        op.create_index(op.f('ix_booking_notifications_user_id'), 'booking_notifications', ['user_id'], unique=False)
        op.create_index(op.f('ix_booking_notifications_booking_id'), 'booking_notifications', ['booking_id'], unique=False)


def downgrade() -> None:
    for table_name in (
        'booking_notifications',
        'points_transactions',
        'bookings',
        'interviews',
        'time_slots',
        'users',
    ):
        if table_exists(table_name):
            op.drop_table(table_name)

    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        for enum_type in (notification_type, transaction_type, booking_status, interview_status, slot_status, user_role):
            enum_type.drop(bind, checkfirst=True)
