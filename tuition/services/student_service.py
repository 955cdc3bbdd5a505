from __future__ import annotations

import logging

from tuition.core.errors import SyncValidationError
from tuition.core.results import OpResult
from tuition.core.time_provider import TimeProvider, default_time_provider
from tuition.models import Student
from tuition.services.view_state import ViewState, require_text
from tuition.store.client import StoreClient
from tuition.store.read_models import StudentRow


logger = logging.getLogger(__name__)

REQUIRED_MESSAGE = 'All fields are required'


class StudentRoster(ViewState):
    def __init__(self, store: StoreClient, *, time_provider: TimeProvider = default_time_provider) -> None:
        super().__init__(store, time_provider=time_provider)
        self.students: list[StudentRow] = []

    def load(self) -> OpResult:
        def run() -> OpResult:
            rows = self.store.select(Student, order_by=('-enrolled_date', '-created_at', 'name'))
            self.students = [StudentRow.from_model(student) for student in rows]
            return OpResult.success(data=self.students)

        return self._run('loading', 'students_load_failed', 'Failed to fetch students', run)

    def add(
        self,
        name: str | None,
        parent_name: str | None,
        parent_phone: str | None,
        address: str | None,
    ) -> OpResult:
        def run() -> OpResult:
            values = {
                'name': require_text(name, REQUIRED_MESSAGE),
                'parent_name': require_text(parent_name, REQUIRED_MESSAGE),
                'parent_phone': require_text(parent_phone, REQUIRED_MESSAGE),
                'address': require_text(address, REQUIRED_MESSAGE),
                'enrolled_date': self.time_provider.today(),
                'created_at': self.time_provider.naive_now(),
            }
            (student,) = self.store.insert(Student, values)
            logger.info('student_added student_id=%s enrolled_date=%s', student.id, student.enrolled_date)
            return self._confirmed('Student added successfully', student.id)

        return self._run('saving', 'student_add_failed', 'Failed to add student', run)

    def remove(self, student_id: str, *, confirmed: bool = False) -> OpResult:
        """Delete a student together with its attendance, fee and remark rows.

        Irreversible, so the caller must pass ``confirmed=True`` after asking the user.
        """

        def run() -> OpResult:
            if not confirmed:
                raise SyncValidationError('Removing a student must be confirmed')
            self.store.delete_by_id(Student, student_id)
            logger.info('student_removed student_id=%s', student_id)
            return self._confirmed('Student removed successfully', student_id)

        return self._run('saving', 'student_remove_failed', 'Failed to remove student', run)
