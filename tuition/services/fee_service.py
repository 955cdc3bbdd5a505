from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, InvalidOperation

from tuition.core.errors import NotFoundError, SyncValidationError
from tuition.core.results import OpResult
from tuition.core.time_provider import TimeProvider, default_time_provider
from tuition.models import Fee, FeeStatus, Student
from tuition.services.aggregates import fee_totals, partition_fees
from tuition.services.reminder_service import build_fee_reminder
from tuition.services.view_state import ViewState, require_date, require_text
from tuition.store.client import StoreClient
from tuition.store.read_models import FeeView, StudentRow, fetch_fee_views


logger = logging.getLogger(__name__)

MAX_FEE_AMOUNT = Decimal('99999999.99')
_CENT = Decimal('0.01')


def parse_amount(raw: str | int | float | Decimal | None) -> Decimal:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise SyncValidationError('All fields are required')
    try:
        amount = Decimal(str(raw).strip())
    except InvalidOperation as exc:
        raise SyncValidationError(f'Amount is not a number: {raw}') from exc
    if not amount.is_finite():
        raise SyncValidationError('Amount must be a finite number')
    if amount < 0:
        raise SyncValidationError('Amount cannot be negative')
    if amount > MAX_FEE_AMOUNT:
        raise SyncValidationError('Amount is too large')
    if amount != amount.quantize(_CENT):
        raise SyncValidationError('Amount cannot have more than two decimal places')
    return amount.quantize(_CENT)


class FeeBook(ViewState):
    def __init__(self, store: StoreClient, *, time_provider: TimeProvider = default_time_provider) -> None:
        super().__init__(store, time_provider=time_provider)
        self.students: list[StudentRow] = []
        self.fees: list[FeeView] = []
        self.totals = fee_totals([])

    @property
    def unpaid(self) -> list[FeeView]:
        return partition_fees(self.fees)[0]

    @property
    def paid(self) -> list[FeeView]:
        return partition_fees(self.fees)[1]

    def load(self) -> OpResult:
        def run() -> OpResult:
            students = self.store.select(Student, order_by=('name', 'id'))
            fees = fetch_fee_views(self.store)
            self.students = [StudentRow.from_model(student) for student in students]
            self.fees = fees
            self.totals = fee_totals(fees)
            return OpResult.success(data=self.fees)

        return self._run('loading', 'fees_load_failed', 'Failed to fetch data', run)

    def add_fee(self, student_id: str | None, amount, due_date: date | str | None) -> OpResult:
        def run() -> OpResult:
            sid = require_text(student_id, 'All fields are required')
            parsed_amount = parse_amount(amount)
            parsed_due = require_date(due_date, 'All fields are required')
            if self.store.get(Student, sid) is None:
                raise NotFoundError('Student', sid)
            (fee,) = self.store.insert(
                Fee,
                {
                    'student_id': sid,
                    'amount': parsed_amount,
                    'due_date': parsed_due,
                    'status': FeeStatus.NOT_PAID.value,
                    'paid_date': None,
                },
            )
            logger.info('fee_added fee_id=%s student_id=%s amount=%s due_date=%s', fee.id, sid, parsed_amount, parsed_due)
            return self._confirmed('Fee record added successfully', fee.id)

        return self._run('saving', 'fee_add_failed', 'Failed to add fee record', run)

    def mark_paid(self, fee_id: str) -> OpResult:
        def run() -> OpResult:
            paid_date = self.time_provider.naive_now()
            changed = self.store.update_where(
                Fee,
                fee_id,
                {'status': FeeStatus.PAID.value, 'paid_date': paid_date},
                where={'status': FeeStatus.NOT_PAID.value},
            )
            if not changed:
                if self.store.get(Fee, fee_id) is None:
                    raise NotFoundError('Fee', fee_id)
                raise SyncValidationError('Fee is already paid')
            logger.info('fee_marked_paid fee_id=%s paid_date=%s', fee_id, paid_date)
            return self._confirmed('Fee marked as paid', fee_id)

        return self._run('saving', 'fee_mark_paid_failed', 'Failed to update fee status', run)

    def reminder(self, fee_id: str) -> OpResult:
        def run() -> OpResult:
            fee = next((item for item in self.fees if item.id == fee_id), None)
            if fee is None:
                raise NotFoundError('Fee', fee_id)
            if fee.is_paid:
                raise SyncValidationError('Fee is already paid')
            return OpResult.success('Reminder message prepared for parent', build_fee_reminder(fee))

        return self._run(None, 'fee_reminder_rejected', 'Failed to prepare reminder', run)
