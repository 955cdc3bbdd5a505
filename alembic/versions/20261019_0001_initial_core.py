"""initial core tables

Revision ID: 20261019_0001
Revises: 
Create Date: 2026-10-19 00:01:00
"""

from alembic import op
import sqlalchemy as sa


revision = '20261019_0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'students',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('parent_name', sa.String(length=120), nullable=False),
        sa.Column('parent_phone', sa.String(length=32), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('enrolled_date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_students_name', 'students', ['name'])
    op.create_index('ix_students_enrolled_date', 'students', ['enrolled_date'])

    op.create_table(
        'attendance',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('student_id', sa.String(length=36), sa.ForeignKey('students.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(length=10), nullable=False, server_default='absent'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('student_id', 'date', name='uq_attendance_student_date'),
    )
    op.create_index('ix_attendance_student_id', 'attendance', ['student_id'])
    op.create_index('ix_attendance_date', 'attendance', ['date'])
    op.create_index('ix_attendance_date_status', 'attendance', ['date', 'status'])

    op.create_table(
        'fees',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('student_id', sa.String(length=36), sa.ForeignKey('students.id', ondelete='CASCADE'), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(length=10), nullable=False, server_default='not_paid'),
        sa.Column('paid_date', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('amount >= 0', name='ck_fees_amount_non_negative'),
        sa.CheckConstraint(
            "(status = 'paid' AND paid_date IS NOT NULL) OR (status = 'not_paid' AND paid_date IS NULL)",
            name='ck_fees_paid_date_matches_status',
        ),
    )
    op.create_index('ix_fees_student_id', 'fees', ['student_id'])
    op.create_index('ix_fees_due_date', 'fees', ['due_date'])
    op.create_index('ix_fees_status_due_date', 'fees', ['status', 'due_date'])

    op.create_table(
        'remarks',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('student_id', sa.String(length=36), sa.ForeignKey('students.id', ondelete='CASCADE'), nullable=False),
        sa.Column('remark', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_remarks_student_id', 'remarks', ['student_id'])
    op.create_index('ix_remarks_created_at', 'remarks', ['created_at'])


def downgrade() -> None:
    op.drop_table('remarks')
    op.drop_table('fees')
    op.drop_table('attendance')
    op.drop_table('students')
