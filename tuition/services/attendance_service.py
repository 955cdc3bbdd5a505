from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from tuition.core.errors import SyncValidationError
from tuition.core.results import OpResult
from tuition.core.time_provider import TimeProvider, default_time_provider
from tuition.models import AttendanceRecord, AttendanceStatus, Student
from tuition.services.aggregates import AttendanceStats, attendance_stats
from tuition.services.view_state import ViewState
from tuition.store.client import StoreClient


logger = logging.getLogger(__name__)

_FLIP = {
    AttendanceStatus.PRESENT.value: AttendanceStatus.ABSENT.value,
    AttendanceStatus.ABSENT.value: AttendanceStatus.PRESENT.value,
}


@dataclass
class AttendanceEntry:
    student_id: str
    student_name: str
    status: str


def build_attendance_snapshot(students, records) -> list[AttendanceEntry]:
    """Left-join stored records onto the roster.

    A student with no stored record for the day is absent, never unknown.
    An unrecorded past date therefore reads as everyone absent.
    """
    by_student = {record.student_id: record.status for record in records}
    return [
        AttendanceEntry(
            student_id=student.id,
            student_name=student.name,
            status=by_student.get(student.id) or AttendanceStatus.ABSENT.value,
        )
        for student in students
    ]


class AttendanceSynchronizer(ViewState):
    def __init__(self, store: StoreClient, *, time_provider: TimeProvider = default_time_provider) -> None:
        super().__init__(store, time_provider=time_provider)
        self.selected_date: date = time_provider.today()
        self.entries: list[AttendanceEntry] = []
        self.stats = AttendanceStats(present=0, absent=0)

    @property
    def is_today(self) -> bool:
        return self.selected_date == self.time_provider.today()

    @property
    def is_view_only(self) -> bool:
        return not self.is_today

    def _recompute(self) -> None:
        self.stats = attendance_stats(entry.status for entry in self.entries)

    def load(self, on_date: date | None = None) -> OpResult:
        target = on_date or self.time_provider.today()

        def run() -> OpResult:
            if target > self.time_provider.today():
                raise SyncValidationError('Attendance cannot be viewed for a future date')
            students = self.store.select(Student, order_by=('name', 'id'))
            records = self.store.select(AttendanceRecord, where={'attendance_date': target})
            self.selected_date = target
            self.entries = build_attendance_snapshot(students, records)
            self._recompute()
            return OpResult.success(data=self.entries)

        return self._run('loading', 'attendance_load_failed', 'Failed to fetch data', run)

    def _entry(self, student_id: str) -> AttendanceEntry:
        for entry in self.entries:
            if entry.student_id == student_id:
                return entry
        raise SyncValidationError(f'Student is not on the attendance sheet: {student_id}')

    def _require_editable(self) -> None:
        if not self.is_today:
            raise SyncValidationError('Past attendance is view-only')

    def toggle(self, student_id: str) -> OpResult:
        def run() -> OpResult:
            self._require_editable()
            entry = self._entry(student_id)
            entry.status = _FLIP[entry.status]
            self._recompute()
            return OpResult.success(data=entry)

        return self._run(None, 'attendance_toggle_rejected', 'Failed to update attendance', run)

    def set_status(self, student_id: str, status: str) -> OpResult:
        if status not in _FLIP:
            return OpResult.invalid(f'Unknown attendance status: {status}')
        try:
            self._require_editable()
            current = self._entry(student_id).status
        except SyncValidationError as exc:
            return OpResult.invalid(str(exc))
        if current == status:
            return OpResult.success(data=self._entry(student_id))
        return self.toggle(student_id)

    def save(self) -> OpResult:
        def run() -> OpResult:
            self._require_editable()
            rows = [
                {'student_id': entry.student_id, 'attendance_date': self.selected_date, 'status': entry.status}
                for entry in self.entries
            ]
            written = self.store.upsert(
                AttendanceRecord,
                rows,
                conflict_keys=('student_id', 'attendance_date'),
                update_columns=('status',),
            )
            logger.info(
                'attendance_saved date=%s rows=%s present=%s absent=%s',
                self.selected_date,
                written,
                self.stats.present,
                self.stats.absent,
            )
            return OpResult.success('Attendance saved successfully', data=written)

        return self._run('saving', 'attendance_save_failed', 'Failed to save attendance', run)
