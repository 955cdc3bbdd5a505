from datetime import timedelta
from unittest.mock import patch

from sqlalchemy import select

from store_case import TODAY, StoreTestCase
from tuition.core.errors import StoreError
from tuition.core.results import Outcome
from tuition.models import AttendanceRecord
from tuition.services.attendance_service import AttendanceSynchronizer


class AttendanceSynchronizerTests(StoreTestCase):
    def _stored_rows(self, on_date=TODAY):
        db = self._session_factory()
        try:
            rows = db.scalars(select(AttendanceRecord).where(AttendanceRecord.attendance_date == on_date)).all()
            return {row.student_id: row.status for row in rows}
        finally:
            db.close()

    def _sync(self) -> AttendanceSynchronizer:
        return AttendanceSynchronizer(self.store, time_provider=self.clock)

    def test_scenario_toggle_and_save_three_students(self):
        students = [self.add_student(name) for name in ('Anu', 'Bala', 'Chitra')]
        sync = self._sync()

        self.assertTrue(sync.load().ok)
        self.assertEqual((sync.stats.present, sync.stats.absent), (0, 3))

        self.assertTrue(sync.toggle(students[1].id).ok)
        self.assertEqual((sync.stats.present, sync.stats.absent), (1, 2))

        result = sync.save()
        self.assertTrue(result.ok)
        self.assertEqual(result.data, 3)
        stored = self._stored_rows()
        self.assertEqual(len(stored), 3)
        self.assertEqual(stored[students[1].id], 'present')
        self.assertEqual(stored[students[0].id], 'absent')
        self.assertEqual(stored[students[2].id], 'absent')

    def test_missing_record_defaults_to_absent(self):
        anu = self.add_student('Anu')
        bala = self.add_student('Bala')
        self.store.insert(AttendanceRecord, {'student_id': anu.id, 'attendance_date': TODAY, 'status': 'present'})

        sync = self._sync()
        sync.load()

        statuses = {entry.student_id: entry.status for entry in sync.entries}
        self.assertEqual(statuses, {anu.id: 'present', bala.id: 'absent'})
        self.assertEqual([entry.student_name for entry in sync.entries], ['Anu', 'Bala'])

    def test_present_plus_absent_matches_roster_after_every_toggle(self):
        students = [self.add_student(f'Student {i}') for i in range(5)]
        sync = self._sync()
        sync.load()
        for student in students + students[:2]:
            sync.toggle(student.id)
            self.assertEqual(sync.stats.present + sync.stats.absent, len(students))
        self.assertEqual(sync.stats.present, 3)

    def test_save_twice_without_toggles_writes_same_rows(self):
        students = [self.add_student(name) for name in ('Anu', 'Bala')]
        sync = self._sync()
        sync.load()
        sync.toggle(students[0].id)

        sync.save()
        first = self._stored_rows()
        sync.save()
        second = self._stored_rows()

        self.assertEqual(first, second)
        db = self._session_factory()
        try:
            self.assertEqual(db.query(AttendanceRecord).count(), 2)
        finally:
            db.close()

    def test_save_overwrites_existing_rows_for_the_day(self):
        anu = self.add_student('Anu')
        self.store.insert(AttendanceRecord, {'student_id': anu.id, 'attendance_date': TODAY, 'status': 'present'})
        sync = self._sync()
        sync.load()
        sync.toggle(anu.id)

        self.assertTrue(sync.save().ok)
        self.assertEqual(self._stored_rows(), {anu.id: 'absent'})

    def test_past_date_is_view_only(self):
        anu = self.add_student('Anu')
        yesterday = TODAY - timedelta(days=1)
        sync = self._sync()

        self.assertTrue(sync.load(yesterday).ok)
        self.assertTrue(sync.is_view_only)

        toggle = sync.toggle(anu.id)
        self.assertEqual(toggle.outcome, Outcome.INVALID)
        self.assertEqual(sync.entries[0].status, 'absent')

        save = sync.save()
        self.assertEqual(save.outcome, Outcome.INVALID)
        self.assertEqual(self._stored_rows(yesterday), {})

    def test_future_date_is_rejected_and_snapshot_kept(self):
        self.add_student('Anu')
        sync = self._sync()
        sync.load()

        result = sync.load(TODAY + timedelta(days=1))

        self.assertEqual(result.outcome, Outcome.INVALID)
        self.assertEqual(sync.selected_date, TODAY)
        self.assertEqual(len(sync.entries), 1)

    def test_zero_students_gives_empty_snapshot_and_noop_save(self):
        sync = self._sync()
        self.assertTrue(sync.load().ok)
        self.assertEqual(sync.entries, [])
        self.assertEqual((sync.stats.present, sync.stats.absent), (0, 0))

        result = sync.save()
        self.assertTrue(result.ok)
        self.assertEqual(result.data, 0)

    def test_failed_save_reports_one_error_and_clears_saving_flag(self):
        anu = self.add_student('Anu')
        sync = self._sync()
        sync.load()
        sync.toggle(anu.id)

        with patch.object(self.store, 'upsert', side_effect=StoreError('upsert:attendance', 'disk I/O error')):
            result = sync.save()

        self.assertEqual(result.outcome, Outcome.FAILED)
        self.assertEqual(result.message, 'Failed to save attendance')
        self.assertFalse(sync.saving)
        self.assertEqual(sync.entries[0].status, 'present')
        self.assertEqual(self._stored_rows(), {})

    def test_failed_load_keeps_previous_snapshot(self):
        self.add_student('Anu')
        sync = self._sync()
        sync.load()

        with patch.object(self.store, 'select', side_effect=StoreError('select:students')):
            result = sync.load()

        self.assertEqual(result.outcome, Outcome.FAILED)
        self.assertFalse(sync.loading)
        self.assertEqual(len(sync.entries), 1)

    def test_unknown_student_toggle_is_rejected(self):
        self.add_student('Anu')
        sync = self._sync()
        sync.load()

        result = sync.toggle('missing-id')

        self.assertEqual(result.outcome, Outcome.INVALID)
        self.assertEqual(sync.stats.absent, 1)

    def test_set_status_only_flips_when_different(self):
        anu = self.add_student('Anu')
        sync = self._sync()
        sync.load()

        sync.set_status(anu.id, 'absent')
        self.assertEqual(sync.stats.present, 0)
        sync.set_status(anu.id, 'present')
        sync.set_status(anu.id, 'present')
        self.assertEqual(sync.stats.present, 1)
        self.assertEqual(sync.set_status(anu.id, 'late').outcome, Outcome.INVALID)

    def test_set_status_on_past_date_is_rejected_even_when_unchanged(self):
        anu = self.add_student('Anu')
        sync = self._sync()
        sync.load(TODAY - timedelta(days=1))

        for status in ('absent', 'present'):
            with self.subTest(status=status):
                result = sync.set_status(anu.id, status)
                self.assertEqual(result.outcome, Outcome.INVALID)
                self.assertEqual(result.message, 'Past attendance is view-only')
        self.assertEqual(sync.entries[0].status, 'absent')
