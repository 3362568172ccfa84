"""initial schedule tables

Revision ID: 20261017_initial_schedule
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261017_initial_schedule'
down_revision = None
branch_labels = None
depends_on = None


ACTIVITY_TYPES = (
    'checkin', 'checkout', 'enrollment', 'enrollment_cancelled', 'class_attended',
    'member_added', 'member_updated', 'membership_changed',
    'class_created', 'class_updated', 'class_deleted',
    'schedule_created', 'schedule_updated', 'schedule_deleted',
    'birthday_upcoming',
)


def upgrade() -> None:
    op.create_table(
        'gym_classes',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('duration_minutes', sa.Integer(), nullable=False, server_default='60'),
        sa.Column('max_capacity', sa.Integer(), nullable=False, server_default='20'),
        sa.Column('difficulty', sa.Enum('Beginner', 'Intermediate', 'Advanced', name='classdifficulty'), nullable=False),
        sa.Column('category', sa.Enum('Cardio', 'Strength', 'Flexibility', 'Mixed', 'Specialized', name='classcategory'), nullable=False),
        sa.Column('price', sa.Float(), nullable=False, server_default='0'),
        sa.Column('status', sa.Enum('active', 'inactive', 'full', name='classstatus'), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('duration_minutes > 0', name='check_class_duration_positive'),
        sa.CheckConstraint('max_capacity > 0', name='check_class_capacity_positive'),
        sa.CheckConstraint('price >= 0', name='check_class_price_non_negative'),
    )
    op.create_index('ix_gym_classes_id', 'gym_classes', ['id'])

    op.create_table(
        'schedule_slots',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('gym_classes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.String(5), nullable=False),
        sa.Column('end_time', sa.String(5), nullable=False),
        sa.CheckConstraint('day_of_week BETWEEN 0 AND 6', name='check_slot_day_of_week'),
        sa.CheckConstraint('start_time < end_time', name='check_slot_start_before_end'),
    )
    op.create_index('ix_schedule_slots_id', 'schedule_slots', ['id'])
    op.create_index('idx_slot_day_time', 'schedule_slots', ['day_of_week', 'start_time'])

    op.create_table(
        'members',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('first_name', sa.String(), nullable=False),
        sa.Column('last_name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('membership_type', sa.String(), nullable=True),
        sa.Column('status', sa.Enum('active', 'pending', 'inactive', name='membershipstatus'), nullable=False, server_default='active'),
        sa.Column('role', sa.Enum('admin', 'reception', 'sparta', 'instructor', 'member', name='userrole'), nullable=False, server_default='member'),
        sa.Column('last_check_in', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_members_id', 'members', ['id'])
    op.create_index('ix_members_email', 'members', ['email'], unique=True)

    op.create_table(
        'class_bookings',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('gym_classes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('member_id', sa.Integer(), sa.ForeignKey('members.id', ondelete='CASCADE'), nullable=False),
        sa.Column('booking_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.String(5), nullable=False),
        sa.Column('status', sa.Enum('confirmed', 'attended', 'cancelled', name='bookingstatus'), nullable=False, server_default='confirmed'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('attended_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_class_bookings_id', 'class_bookings', ['id'])
    op.create_index('idx_booking_occurrence', 'class_bookings', ['class_id', 'booking_date', 'start_time'])
    op.create_index(
        'uq_active_booking_per_member',
        'class_bookings',
        ['class_id', 'booking_date', 'start_time', 'member_id'],
        unique=True,
        postgresql_where=sa.text("status != 'cancelled'"),
        sqlite_where=sa.text("status != 'cancelled'"),
    )

    op.create_table(
        'check_ins',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('member_id', sa.Integer(), sa.ForeignKey('members.id', ondelete='SET NULL'), nullable=True),
        sa.Column('member_name', sa.String(), nullable=False),
        sa.Column('membership_type', sa.String(), nullable=True),
        sa.Column('check_in_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('check_out_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('gym_classes.id', ondelete='SET NULL'), nullable=True),
        sa.Column('booking_id', sa.Integer(), sa.ForeignKey('class_bookings.id', ondelete='SET NULL'), nullable=True),
    )
    op.create_index('ix_check_ins_id', 'check_ins', ['id'])
    op.create_index('ix_check_ins_member_id', 'check_ins', ['member_id'])
    op.create_index('ix_check_ins_check_in_time', 'check_ins', ['check_in_time'])

    op.create_table(
        'activity_log',
        sa.Column('id', sa.String(), primary_key=True, nullable=False),
        sa.Column('type', sa.Enum(*ACTIVITY_TYPES, name='activitytype'), nullable=False),
        sa.Column('message', sa.String(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('member_id', sa.Integer(), nullable=True),
        sa.Column('updated_by_user_id', sa.Integer(), nullable=True),
        sa.Column('updated_by_name', sa.String(), nullable=True),
        sa.Column('updated_by_role', sa.String(), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True),
    )
    op.create_index('ix_activity_log_type', 'activity_log', ['type'])
    op.create_index('ix_activity_log_timestamp', 'activity_log', ['timestamp'])
    op.create_index('ix_activity_log_member_id', 'activity_log', ['member_id'])


def downgrade() -> None:
    op.drop_table('activity_log')
    op.drop_table('check_ins')
    op.drop_index('uq_active_booking_per_member', table_name='class_bookings')
    op.drop_table('class_bookings')
    op.drop_table('members')
    op.drop_table('schedule_slots')
    op.drop_table('gym_classes')
    for enum_name in (
        'activitytype', 'bookingstatus', 'userrole', 'membershipstatus',
        'classstatus', 'classcategory', 'classdifficulty',
    ):
        op.execute(f"DROP TYPE IF EXISTS {enum_name}")
