"""Initial schema: teachers, students, recurring lessons, occurrences and payments

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'teachers',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('email', sa.String(length=120), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('specialty', sa.String(length=100), nullable=True),
        sa.Column('max_students', sa.Integer(), nullable=False, server_default='10'),
        sa.Column('revenue_share_percentage', sa.Integer(), nullable=False, server_default='70'),
        *_timestamps(),
        sa.CheckConstraint('max_students BETWEEN 1 AND 20', name='ck_teachers_max_students'),
        sa.CheckConstraint('revenue_share_percentage BETWEEN 1 AND 100', name='ck_teachers_revenue_share'),
    )
    op.create_index(op.f('ix_teachers_id'), 'teachers', ['id'], unique=False)
    op.create_index(op.f('ix_teachers_email'), 'teachers', ['email'], unique=True)

    op.create_table(
        'students',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('email', sa.String(length=120), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('birth_date', sa.Date(), nullable=True),
        sa.Column('primary_instrument', sa.String(length=100), nullable=True),
        *_timestamps(),
    )
    op.create_index(op.f('ix_students_id'), 'students', ['id'], unique=False)
    op.create_index(op.f('ix_students_email'), 'students', ['email'], unique=True)

    op.create_table(
        'configured_lessons',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('teacher_id', sa.Integer(), sa.ForeignKey('teachers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('instrument', sa.String(length=100), nullable=False),
        sa.Column('shift', sa.Enum('morning', 'afternoon', 'evening', name='lesson_shift', native_enum=False), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        *_timestamps(),
    )
    op.create_index(op.f('ix_configured_lessons_id'), 'configured_lessons', ['id'], unique=False)
    op.create_index(op.f('ix_configured_lessons_teacher_id'), 'configured_lessons', ['teacher_id'], unique=False)

    op.create_table(
        'lesson_weekdays',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('lesson_id', sa.Integer(), sa.ForeignKey('configured_lessons.id', ondelete='CASCADE'), nullable=False),
        sa.Column('weekday', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('lesson_id', 'weekday', name='uq_lesson_weekday'),
        sa.CheckConstraint('weekday BETWEEN 0 AND 6', name='ck_lesson_weekday_range'),
    )
    op.create_index(op.f('ix_lesson_weekdays_id'), 'lesson_weekdays', ['id'], unique=False)
    op.create_index(op.f('ix_lesson_weekdays_lesson_id'), 'lesson_weekdays', ['lesson_id'], unique=False)

    op.create_table(
        'lesson_enrollments',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('lesson_id', sa.Integer(), sa.ForeignKey('configured_lessons.id', ondelete='CASCADE'), nullable=False),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id', ondelete='CASCADE'), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('lesson_id', 'student_id', name='uq_lesson_enrollment'),
    )
    op.create_index(op.f('ix_lesson_enrollments_id'), 'lesson_enrollments', ['id'], unique=False)
    op.create_index(op.f('ix_lesson_enrollments_lesson_id'), 'lesson_enrollments', ['lesson_id'], unique=False)
    op.create_index(op.f('ix_lesson_enrollments_student_id'), 'lesson_enrollments', ['student_id'], unique=False)

    op.create_table(
        'lesson_occurrences',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('lesson_id', sa.Integer(), sa.ForeignKey('configured_lessons.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column(
            'status',
            sa.Enum('scheduled', 'held', 'cancelled', 'rescheduled', name='occurrence_status', native_enum=False),
            nullable=False,
            server_default='scheduled'
        ),
        *_timestamps(),
        sa.UniqueConstraint('lesson_id', 'date', name='uq_occurrence_lesson_date'),
    )
    op.create_index(op.f('ix_lesson_occurrences_id'), 'lesson_occurrences', ['id'], unique=False)
    op.create_index(op.f('ix_lesson_occurrences_lesson_id'), 'lesson_occurrences', ['lesson_id'], unique=False)
    op.create_index(op.f('ix_lesson_occurrences_date'), 'lesson_occurrences', ['date'], unique=False)

    op.create_table(
        'reschedule_records',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('occurrence_id', sa.Integer(), sa.ForeignKey('lesson_occurrences.id', ondelete='CASCADE'), nullable=False),
        sa.Column('new_date', sa.Date(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index(op.f('ix_reschedule_records_id'), 'reschedule_records', ['id'], unique=False)
    op.create_index(op.f('ix_reschedule_records_occurrence_id'), 'reschedule_records', ['occurrence_id'], unique=False)

    op.create_table(
        'payments',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id', ondelete='CASCADE'), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column(
            'status',
            sa.Enum('pending', 'paid', 'cancelled', name='payment_status', native_enum=False),
            nullable=False,
            server_default='pending'
        ),
        sa.Column('payment_date', sa.Date(), nullable=True),
        sa.Column('revenue_share_amount', sa.Numeric(10, 2), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('amount > 0', name='ck_payments_amount_positive'),
    )
    op.create_index(op.f('ix_payments_id'), 'payments', ['id'], unique=False)
    op.create_index(op.f('ix_payments_student_id'), 'payments', ['student_id'], unique=False)
    op.create_index(op.f('ix_payments_due_date'), 'payments', ['due_date'], unique=False)


def downgrade() -> None:
    op.drop_table('payments')
    op.drop_table('reschedule_records')
    op.drop_table('lesson_occurrences')
    op.drop_table('lesson_enrollments')
    op.drop_table('lesson_weekdays')
    op.drop_table('configured_lessons')
    op.drop_table('students')
    op.drop_table('teachers')
