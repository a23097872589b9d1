"""Create camp scheduling tables

Revision ID: a001_create_scheduling_tables
Revises:
Create Date: 2026-10-19

Creates camps, weekly schedules and their exceptions, recurrence patterns,
camp sessions, availability slots and the slot booking ledger.
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'a001_create_scheduling_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'camps',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('organization_id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_camps_organization_id', 'camps', ['organization_id'])

    op.create_table(
        'camp_schedules',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('camp_id', sa.String(), sa.ForeignKey('camps.id', ondelete='CASCADE'), nullable=False),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.CheckConstraint('day_of_week >= 0 AND day_of_week <= 6', name='check_schedule_day_of_week'),
    )
    op.create_index('ix_camp_schedules_camp_id', 'camp_schedules', ['camp_id'])

    op.create_table(
        'schedule_exceptions',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('camp_id', sa.String(), sa.ForeignKey('camps.id', ondelete='CASCADE'), nullable=False),
        sa.Column('original_schedule_id', sa.String(), sa.ForeignKey('camp_schedules.id', ondelete='SET NULL'), nullable=True),
        sa.Column('exception_date', sa.Date(), nullable=False),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        # One exception per camp and date; recording another replaces it
        sa.UniqueConstraint('camp_id', 'exception_date', name='uq_schedule_exception_camp_date'),
    )
    op.create_index('ix_schedule_exceptions_camp_id', 'schedule_exceptions', ['camp_id'])

    op.create_table(
        'recurrence_patterns',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('camp_id', sa.String(), sa.ForeignKey('camps.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('pattern_type', sa.String(20), nullable=False),
        sa.Column('repeat_type', sa.String(20), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('days_of_week', sa.JSON(), nullable=True),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('last_expanded_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_recurrence_patterns_camp_id', 'recurrence_patterns', ['camp_id'])

    op.create_table(
        'camp_sessions',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('camp_id', sa.String(), sa.ForeignKey('camps.id', ondelete='CASCADE'), nullable=False),
        sa.Column('session_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('recurrence_group_id', sa.String(), sa.ForeignKey('recurrence_patterns.id', ondelete='SET NULL'), nullable=True),
        sa.Column('rescheduled_date', sa.Date(), nullable=True),
        sa.Column('rescheduled_start_time', sa.Time(), nullable=True),
        sa.Column('rescheduled_end_time', sa.Time(), nullable=True),
        sa.Column('rescheduled_status', sa.String(20), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        # Re-expanding a pattern must not duplicate its occurrences
        sa.UniqueConstraint('recurrence_group_id', 'session_date', 'start_time', name='uq_camp_session_occurrence'),
    )
    op.create_index('ix_camp_sessions_camp_id', 'camp_sessions', ['camp_id'])
    op.create_index('ix_camp_sessions_recurrence_group_id', 'camp_sessions', ['recurrence_group_id'])

    op.create_table(
        'availability_slots',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('camp_id', sa.String(), sa.ForeignKey('camps.id', ondelete='CASCADE'), nullable=False),
        sa.Column('creator_id', sa.String(), nullable=False),
        sa.Column('slot_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='available'),
        sa.Column('max_bookings', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('current_bookings', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('buffer_before', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('buffer_after', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_recurring', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('recurrence_rule', sa.String(20), nullable=True),
        sa.Column('recurrence_end_date', sa.Date(), nullable=True),
        sa.Column('parent_slot_id', sa.String(), sa.ForeignKey('availability_slots.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('max_bookings >= 1', name='check_slot_capacity_positive'),
        sa.CheckConstraint('current_bookings >= 0', name='check_slot_bookings_positive'),
        sa.CheckConstraint('current_bookings <= max_bookings', name='check_slot_bookings_lte_capacity'),
        sa.CheckConstraint('duration_minutes > 0', name='check_slot_duration_positive'),
    )
    op.create_index('ix_availability_slots_camp_id', 'availability_slots', ['camp_id'])
    op.create_index('ix_availability_slots_parent_slot_id', 'availability_slots', ['parent_slot_id'])
    op.create_index(
        'ix_availability_slots_camp_date_start',
        'availability_slots',
        ['camp_id', 'slot_date', 'start_time'],
    )

    op.create_table(
        'slot_bookings',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('slot_id', sa.String(), sa.ForeignKey('availability_slots.id', ondelete='SET NULL'), nullable=True),
        sa.Column('registration_id', sa.String(), nullable=True),
        sa.Column('child_id', sa.String(), nullable=False),
        sa.Column('parent_id', sa.String(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='confirmed'),
        sa.Column('booking_date', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('cancel_reason', sa.Text(), nullable=True),
        sa.Column('rescheduled_from_id', sa.String(), sa.ForeignKey('slot_bookings.id', ondelete='SET NULL'), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('notification_sent', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('reminder_sent', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('feedback_sent', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_slot_bookings_slot_id', 'slot_bookings', ['slot_id'])
    op.create_index('ix_slot_bookings_child_id', 'slot_bookings', ['child_id'])
    op.create_index('ix_slot_bookings_parent_id', 'slot_bookings', ['parent_id'])
    op.create_index('ix_slot_bookings_slot_status', 'slot_bookings', ['slot_id', 'status'])

    # One confirmed booking per child per slot; cancelled rows are history
    op.create_index(
        'uq_slot_bookings_confirmed_child',
        'slot_bookings',
        ['slot_id', 'child_id'],
        unique=True,
        postgresql_where=sa.text("status = 'confirmed'"),
        sqlite_where=sa.text("status = 'confirmed'"),
    )


def downgrade() -> None:
    op.drop_index('uq_slot_bookings_confirmed_child', table_name='slot_bookings')
    op.drop_table('slot_bookings')
    op.drop_table('availability_slots')
    op.drop_table('camp_sessions')
    op.drop_table('recurrence_patterns')
    op.drop_table('schedule_exceptions')
    op.drop_table('camp_schedules')
    op.drop_table('camps')
