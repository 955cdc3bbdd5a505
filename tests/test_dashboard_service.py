import asyncio
from datetime import timedelta
from unittest.mock import patch

from store_case import TODAY, StoreTestCase
from tuition.core.errors import StoreError
from tuition.core.results import Outcome
from tuition.models import AttendanceRecord, Fee
from tuition.services.dashboard_service import DashboardStats, DashboardView, fetch_dashboard_stats


class DashboardTests(StoreTestCase):
    def test_counts_reflect_today_and_unpaid_fees(self):
        anu = self.add_student('Anu')
        bala = self.add_student('Bala')
        self.add_student('Chitra')
        self.store.insert(
            AttendanceRecord,
            [
                {'student_id': anu.id, 'attendance_date': TODAY, 'status': 'present'},
                {'student_id': bala.id, 'attendance_date': TODAY, 'status': 'absent'},
                {'student_id': bala.id, 'attendance_date': TODAY - timedelta(days=1), 'status': 'present'},
            ],
        )
        self.add_fee(anu, '500')
        self.add_fee(bala, '500')
        self.add_fee(bala, '300', paid=True)
        self.add_remark(anu, 'Late')

        stats = asyncio.run(fetch_dashboard_stats(self.store, time_provider=self.clock))

        self.assertEqual(stats, DashboardStats(total_students=3, present_today=1, unpaid_fees=2, total_remarks=1))

    def test_empty_store_gives_zero_counts(self):
        view = DashboardView(self.store, time_provider=self.clock)

        result = asyncio.run(view.load())

        self.assertTrue(result.ok)
        self.assertEqual(view.stats, DashboardStats())
        self.assertFalse(view.loading)

    def test_one_failed_count_fails_the_whole_load(self):
        self.add_student('Anu')
        original = self.store.count

        def count(model, **kwargs):
            if model is Fee:
                raise StoreError('count:fees', 'connection reset', transient=True)
            return original(model, **kwargs)

        view = DashboardView(self.store, time_provider=self.clock)
        with patch.object(self.store, 'count', side_effect=count):
            result = asyncio.run(view.load())

        self.assertEqual(result.outcome, Outcome.FAILED)
        self.assertEqual(result.message, 'Failed to fetch dashboard statistics')
        self.assertEqual(view.stats, DashboardStats())
        self.assertFalse(view.loading)
