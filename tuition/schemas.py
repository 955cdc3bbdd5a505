from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class StudentCreateRequest(BaseModel):
    name: str = ''
    parent_name: str = ''
    parent_phone: str = ''
    address: str = ''


class AttendanceMark(BaseModel):
    student_id: str
    status: Literal['present', 'absent']


class AttendanceSaveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    on_date: date | None = Field(default=None, alias='date')
    records: list[AttendanceMark] = Field(default_factory=list)


class FeeCreateRequest(BaseModel):
    student_id: str = ''
    amount: Decimal | str | None = None
    due_date: str = ''


class RemarkCreateRequest(BaseModel):
    student_id: str = ''
    remark: str = ''


class AIHelpRequest(BaseModel):
    question: str = ''
