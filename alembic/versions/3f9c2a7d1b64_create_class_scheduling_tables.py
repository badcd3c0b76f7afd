"""create_class_scheduling_tables

Revision ID: 3f9c2a7d1b64
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c2a7d1b64'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

DAY_OF_WEEK = sa.Enum(
    'monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday',
    name='day_of_week_enum',
)
SESSION_STATUS = sa.Enum(
    'scheduled', 'completed', 'cancelled', name='class_session_status_enum'
)
ENROLLMENT_STATUS = sa.Enum(
    'active', 'inactive', 'completed', 'dropped', 'waitlist',
    name='enrollment_status_enum',
)
PROFILE_ROLE = sa.Enum('admin', 'instructor', 'user', name='profile_role_enum')
ATTENDANCE_STATUS = sa.Enum(
    'present', 'absent', 'excused', 'late', name='attendance_status_enum'
)


def upgrade() -> None:
    """Upgrade schema - Add programs, classes, recurrence, sessions, enrollment and attendance."""

    op.create_table(
        'programs',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('min_age', sa.Integer(), nullable=True),
        sa.Column('max_age', sa.Integer(), nullable=True),
        sa.Column('duration_minutes', sa.Integer(), nullable=True),
        sa.Column('max_capacity', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'profiles',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('first_name', sa.String(), nullable=False),
        sa.Column('last_name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('role', PROFILE_ROLE, nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )

    op.create_table(
        'classes',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('program_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('max_capacity', sa.Integer(), nullable=True),
        sa.Column('instructor_id', sa.Uuid(), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['program_id'], ['programs.id']),
        sa.ForeignKeyConstraint(['instructor_id'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_classes_program_id', 'classes', ['program_id'])
    op.create_index('ix_classes_instructor_id', 'classes', ['instructor_id'])
    op.create_index('ix_classes_is_active', 'classes', ['is_active'])

    op.create_table(
        'class_schedules',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('class_id', sa.Uuid(), nullable=False),
        sa.Column('day_of_week', DAY_OF_WEEK, nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['class_id'], ['classes.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'class_id', 'day_of_week', 'start_time', name='uq_class_schedule_slot'
        )
    )
    op.create_index('ix_class_schedules_class_id', 'class_schedules', ['class_id'])

    op.create_table(
        'class_sessions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('class_id', sa.Uuid(), nullable=False),
        sa.Column('session_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('status', SESSION_STATUS, server_default='scheduled', nullable=False),
        sa.Column('instructor_id', sa.Uuid(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['class_id'], ['classes.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['instructor_id'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_class_sessions_class_id', 'class_sessions', ['class_id'])
    op.create_index('ix_class_sessions_session_date', 'class_sessions', ['session_date'])

    op.create_table(
        'enrollments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('student_id', sa.Uuid(), nullable=False),
        sa.Column('class_id', sa.Uuid(), nullable=False),
        sa.Column('program_id', sa.Uuid(), nullable=True),
        sa.Column('status', ENROLLMENT_STATUS, nullable=False),
        sa.Column('enrolled_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('dropped_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['class_id'], ['classes.id']),
        sa.ForeignKeyConstraint(['program_id'], ['programs.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_enrollments_student_id', 'enrollments', ['student_id'])
    op.create_index('ix_enrollments_class_id', 'enrollments', ['class_id'])
    op.create_index('ix_enrollments_status', 'enrollments', ['status'])

    op.create_table(
        'attendance',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('class_session_id', sa.Uuid(), nullable=False),
        sa.Column('class_id', sa.Uuid(), nullable=True),
        sa.Column('student_id', sa.Uuid(), nullable=False),
        sa.Column('status', ATTENDANCE_STATUS, nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['class_session_id'], ['class_sessions.id']),
        sa.ForeignKeyConstraint(['class_id'], ['classes.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_attendance_class_session_id', 'attendance', ['class_session_id'])
    op.create_index('ix_attendance_class_id', 'attendance', ['class_id'])
    op.create_index('ix_attendance_student_id', 'attendance', ['student_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('attendance')
    op.drop_table('enrollments')
    op.drop_table('class_sessions')
    op.drop_table('class_schedules')
    op.drop_table('classes')
    op.drop_table('profiles')
    op.drop_table('programs')

    bind = op.get_bind()
    for enum_type in (
        ATTENDANCE_STATUS,
        ENROLLMENT_STATUS,
        SESSION_STATUS,
        DAY_OF_WEEK,
        PROFILE_ROLE,
    ):
        enum_type.drop(bind, checkfirst=True)
