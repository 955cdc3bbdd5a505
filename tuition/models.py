import uuid
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Index, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tuition.core.time_provider import default_time_provider
from tuition.db import Base


class AttendanceStatus(str, Enum):
    PRESENT = 'present'
    ABSENT = 'absent'


class FeeStatus(str, Enum):
    NOT_PAID = 'not_paid'
    PAID = 'paid'


def _new_id() -> str:
    return str(uuid.uuid4())


def _today() -> date:
    return default_time_provider.today()


def _now() -> datetime:
    return default_time_provider.naive_now()


class Student(Base):
    __tablename__ = 'students'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(120), index=True)
    parent_name: Mapped[str] = mapped_column(String(120))
    parent_phone: Mapped[str] = mapped_column(String(32))
    address: Mapped[str] = mapped_column(Text)
    enrolled_date: Mapped[date] = mapped_column(Date, default=_today, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)

    attendance: Mapped[list['AttendanceRecord']] = relationship(
        'AttendanceRecord', back_populates='student', cascade='all, delete-orphan'
    )
    fees: Mapped[list['Fee']] = relationship('Fee', back_populates='student', cascade='all, delete-orphan')
    remarks: Mapped[list['Remark']] = relationship(
        'Remark', back_populates='student', cascade='all, delete-orphan'
    )


class AttendanceRecord(Base):
    __tablename__ = 'attendance'
    __table_args__ = (
        UniqueConstraint('student_id', 'date', name='uq_attendance_student_date'),
        Index('ix_attendance_date_status', 'date', 'status'),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    student_id: Mapped[str] = mapped_column(ForeignKey('students.id', ondelete='CASCADE'), index=True)
    attendance_date: Mapped[date] = mapped_column('date', Date, index=True)
    status: Mapped[str] = mapped_column(String(10), default=AttendanceStatus.ABSENT.value)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)

    student: Mapped['Student'] = relationship('Student', back_populates='attendance')


class Fee(Base):
    __tablename__ = 'fees'
    __table_args__ = (
        Index('ix_fees_status_due_date', 'status', 'due_date'),
        CheckConstraint('amount >= 0', name='ck_fees_amount_non_negative'),
        CheckConstraint(
            "(status = 'paid' AND paid_date IS NOT NULL) OR (status = 'not_paid' AND paid_date IS NULL)",
            name='ck_fees_paid_date_matches_status',
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    student_id: Mapped[str] = mapped_column(ForeignKey('students.id', ondelete='CASCADE'), index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2, asdecimal=True))
    due_date: Mapped[date] = mapped_column(Date, index=True)
    status: Mapped[str] = mapped_column(String(10), default=FeeStatus.NOT_PAID.value)
    paid_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)

    student: Mapped['Student'] = relationship('Student', back_populates='fees')


class Remark(Base):
    __tablename__ = 'remarks'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    student_id: Mapped[str] = mapped_column(ForeignKey('students.id', ondelete='CASCADE'), index=True)
    remark: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now, index=True)

    student: Mapped['Student'] = relationship('Student', back_populates='remarks')
