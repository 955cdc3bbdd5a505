"""Read models joining child collections to their owning student.

The denormalized fields are fixed here and nowhere else:

* ``FeeView`` carries ``student_name``, ``parent_name`` and ``parent_phone``.
* ``RemarkView`` carries ``student_name``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from tuition.models import Fee, FeeStatus, Remark, Student
from tuition.store.client import StoreClient


@dataclass(frozen=True)
class StudentRow:
    id: str
    name: str
    parent_name: str
    parent_phone: str
    address: str
    enrolled_date: date

    @classmethod
    def from_model(cls, student: Student) -> 'StudentRow':
        return cls(
            id=student.id,
            name=student.name,
            parent_name=student.parent_name,
            parent_phone=student.parent_phone,
            address=student.address,
            enrolled_date=student.enrolled_date,
        )


@dataclass(frozen=True)
class FeeView:
    id: str
    student_id: str
    amount: Decimal
    due_date: date
    status: str
    paid_date: datetime | None
    student_name: str
    parent_name: str
    parent_phone: str

    @property
    def is_paid(self) -> bool:
        return self.status == FeeStatus.PAID.value


@dataclass(frozen=True)
class RemarkView:
    id: str
    student_id: str
    remark: str
    created_at: datetime
    student_name: str


def fetch_fee_views(store: StoreClient) -> list[FeeView]:
    def run(db: Session) -> list[FeeView]:
        stmt = (
            select(Fee, Student.name, Student.parent_name, Student.parent_phone)
            .join(Student, Student.id == Fee.student_id)
            .order_by(Fee.due_date.desc(), Fee.created_at.desc())
        )
        return [
            FeeView(
                id=fee.id,
                student_id=fee.student_id,
                amount=Decimal(fee.amount),
                due_date=fee.due_date,
                status=fee.status,
                paid_date=fee.paid_date,
                student_name=name,
                parent_name=parent_name,
                parent_phone=parent_phone,
            )
            for fee, name, parent_name, parent_phone in db.execute(stmt).all()
        ]

    return store.read('select:fees_with_students', run)


def fetch_remark_views(store: StoreClient) -> list[RemarkView]:
    def run(db: Session) -> list[RemarkView]:
        stmt = (
            select(Remark, Student.name)
            .join(Student, Student.id == Remark.student_id)
            .order_by(Remark.created_at.desc())
        )
        return [
            RemarkView(
                id=remark.id,
                student_id=remark.student_id,
                remark=remark.remark,
                created_at=remark.created_at,
                student_name=name,
            )
            for remark, name in db.execute(stmt).all()
        ]

    return store.read('select:remarks_with_students', run)
