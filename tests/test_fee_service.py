from datetime import date, datetime
from decimal import Decimal
from unittest.mock import patch

from store_case import NOW, StoreTestCase
from tuition.core.errors import StoreError
from tuition.core.results import Outcome
from tuition.core.time_provider import FixedTimeProvider
from tuition.models import Fee
from tuition.services.fee_service import FeeBook
from tuition.store.client import StoreClient


class FeeBookTests(StoreTestCase):
    def _book(self) -> FeeBook:
        book = FeeBook(self.store, time_provider=self.clock)
        self.assertTrue(book.load().ok)
        return book

    def test_scenario_totals_then_mark_paid(self):
        student = self.add_student('Anu')
        unpaid = self.add_fee(student, '500')
        self.add_fee(student, '300', paid=True)
        book = self._book()

        self.assertEqual(book.totals.total, Decimal('800'))
        self.assertEqual(book.totals.pending, Decimal('500'))
        self.assertEqual(book.totals.collected, Decimal('300'))

        result = book.mark_paid(unpaid.id)

        self.assertTrue(result.ok)
        self.assertTrue(result.details['refreshed'])
        self.assertEqual(book.totals.pending, Decimal('0'))
        self.assertEqual(book.totals.collected, Decimal('800'))
        self.assertEqual(book.totals.total, Decimal('800'))
        self.assertEqual((book.totals.unpaid_count, book.totals.paid_count), (0, 2))

    def test_mark_paid_stamps_paid_date(self):
        student = self.add_student('Anu')
        fee = self.add_fee(student, '750.50')
        book = self._book()
        book.mark_paid(fee.id)

        stored = self.store.get(Fee, fee.id)
        self.assertEqual(stored.status, 'paid')
        self.assertEqual(stored.paid_date, NOW)

    def test_totals_are_exact_to_the_cent(self):
        student = self.add_student('Anu')
        for amount in ('0.10', '0.20', '0.30'):
            self.add_fee(student, amount)
        self.add_fee(student, '1234.56', paid=True)
        book = self._book()

        self.assertEqual(book.totals.pending, Decimal('0.60'))
        self.assertEqual(book.totals.total, book.totals.pending + book.totals.collected)
        self.assertEqual(len(book.unpaid) + len(book.paid), len(book.fees))

    def test_mark_paid_twice_is_rejected(self):
        student = self.add_student('Anu')
        fee = self.add_fee(student, '500', paid=True)
        book = self._book()

        result = book.mark_paid(fee.id)

        self.assertEqual(result.outcome, Outcome.INVALID)
        self.assertEqual(book.totals.collected, Decimal('500'))

    def test_interleaved_mark_paid_lets_only_one_caller_win(self):
        student = self.add_student('Anu')
        fee = self.add_fee(student, '500')
        morning = FeeBook(self.store, time_provider=FixedTimeProvider(datetime(2026, 10, 19, 9, 0)))
        evening = FeeBook(StoreClient(self._session_factory), time_provider=FixedTimeProvider(datetime(2026, 10, 19, 18, 0)))
        morning.load()
        evening.load()
        real_update = self.store.update_where
        results = {}

        def update_after_other_caller(*args, **kwargs):
            results['evening'] = evening.mark_paid(fee.id)
            return real_update(*args, **kwargs)

        with patch.object(self.store, 'update_where', side_effect=update_after_other_caller):
            results['morning'] = morning.mark_paid(fee.id)

        self.assertTrue(results['evening'].ok)
        self.assertEqual(results['morning'].outcome, Outcome.INVALID)
        self.assertEqual(results['morning'].message, 'Fee is already paid')
        self.assertEqual(self.store.get(Fee, fee.id).paid_date, datetime(2026, 10, 19, 18, 0))

    def test_mark_paid_unknown_fee_is_not_found(self):
        book = self._book()
        self.assertEqual(book.mark_paid('no-such-fee').outcome, Outcome.NOT_FOUND)

    def test_add_fee_inserts_unpaid_record(self):
        student = self.add_student('Anu')
        book = self._book()

        result = book.add_fee(student.id, '1500', '2026-11-05')

        self.assertTrue(result.ok)
        self.assertEqual(len(book.unpaid), 1)
        fee = book.unpaid[0]
        self.assertEqual(fee.amount, Decimal('1500.00'))
        self.assertEqual(fee.due_date, date(2026, 11, 5))
        self.assertIsNone(fee.paid_date)
        self.assertEqual(fee.student_name, 'Anu')

    def test_add_fee_rejects_bad_input_without_store_call(self):
        student = self.add_student('Anu')
        book = self._book()
        cases = [
            ('', '100', '2026-11-05'),
            (student.id, '', '2026-11-05'),
            (student.id, '100', ''),
            (student.id, '-1', '2026-11-05'),
            (student.id, 'abc', '2026-11-05'),
            (student.id, 'NaN', '2026-11-05'),
            (student.id, '10.005', '2026-11-05'),
            (student.id, '100', 'not-a-date'),
        ]
        with patch.object(self.store, 'insert') as insert:
            for student_id, amount, due in cases:
                with self.subTest(amount=amount, due=due):
                    result = book.add_fee(student_id, amount, due)
                    self.assertEqual(result.outcome, Outcome.INVALID)
            insert.assert_not_called()
        self.assertFalse(book.saving)

    def test_add_fee_accepts_zero_amount(self):
        student = self.add_student('Anu')
        book = self._book()
        self.assertTrue(book.add_fee(student.id, 0, date(2026, 11, 1)).ok)
        self.assertEqual(book.totals.total, Decimal('0'))

    def test_add_fee_for_missing_student_is_not_found(self):
        book = self._book()
        self.assertEqual(book.add_fee('ghost', '100', '2026-11-05').outcome, Outcome.NOT_FOUND)

    def test_failed_update_leaves_snapshot_untouched(self):
        student = self.add_student('Anu')
        fee = self.add_fee(student, '500')
        book = self._book()

        with patch.object(self.store, 'update_where', side_effect=StoreError('update_where:fees')):
            result = book.mark_paid(fee.id)

        self.assertEqual(result.outcome, Outcome.FAILED)
        self.assertEqual(result.message, 'Failed to update fee status')
        self.assertEqual(book.totals.pending, Decimal('500'))
        self.assertFalse(book.saving)

    def test_reminder_for_unpaid_fee(self):
        student = self.add_student('Anu', phone='+91 (987) 654-3210', parent='Lakshmi')
        fee = self.add_fee(student, '500', due=date(2026, 11, 5))
        book = self._book()

        result = book.reminder(fee.id)

        self.assertTrue(result.ok)
        self.assertEqual(result.data.phone, '919876543210')
        self.assertTrue(result.data.url.startswith('https://wa.me/919876543210?text=Dear%20Lakshmi'))
        self.assertIn("Anu's tuition fee of ₹500 is due on 05/11/2026", result.data.message)

    def test_reminder_for_paid_fee_is_rejected(self):
        student = self.add_student('Anu')
        fee = self.add_fee(student, '500', paid=True)
        book = self._book()
        self.assertEqual(book.reminder(fee.id).outcome, Outcome.INVALID)
