from fastapi import APIRouter, Depends

from tuition.dependencies import ensure_ok, get_store, get_time_provider
from tuition.route_logging import EndpointNameRoute
from tuition.schemas import FeeCreateRequest
from tuition.services.fee_service import FeeBook
from tuition.services.reminder_service import format_amount
from tuition.store.client import StoreClient
from tuition.store.read_models import FeeView


router = APIRouter(prefix='/fees', tags=['Fees'], route_class=EndpointNameRoute)


def serialize_fee(fee: FeeView) -> dict:
    return {
        'id': fee.id,
        'student_id': fee.student_id,
        'student_name': fee.student_name,
        'parent_name': fee.parent_name,
        'parent_phone': fee.parent_phone,
        'amount': str(fee.amount),
        'amount_display': format_amount(fee.amount),
        'due_date': fee.due_date.isoformat(),
        'status': fee.status,
        'paid_date': fee.paid_date.isoformat() if fee.paid_date else None,
    }


def _book_payload(book: FeeBook, message: str = '') -> dict:
    totals = book.totals
    return {
        'message': message,
        'students': [{'id': student.id, 'name': student.name} for student in book.students],
        'totals': {
            'total': str(totals.total),
            'pending': str(totals.pending),
            'collected': str(totals.collected),
            'unpaid_count': totals.unpaid_count,
            'paid_count': totals.paid_count,
        },
        'unpaid': [serialize_fee(fee) for fee in book.unpaid],
        'paid': [serialize_fee(fee) for fee in book.paid],
    }


def _book(store: StoreClient = Depends(get_store), time_provider=Depends(get_time_provider)) -> FeeBook:
    return FeeBook(store, time_provider=time_provider)


@router.get('')
def fee_book(book: FeeBook = Depends(_book)):
    ensure_ok(book.load())
    return _book_payload(book)


@router.post('', status_code=201)
def add_fee(payload: FeeCreateRequest, book: FeeBook = Depends(_book)):
    result = ensure_ok(book.add_fee(payload.student_id, payload.amount, payload.due_date))
    return {**_book_payload(book, result.message), 'id': result.data}


@router.post('/{fee_id}/mark-paid')
def mark_paid(fee_id: str, book: FeeBook = Depends(_book)):
    result = ensure_ok(book.mark_paid(fee_id))
    return _book_payload(book, result.message)


@router.get('/{fee_id}/reminder')
def fee_reminder(fee_id: str, book: FeeBook = Depends(_book)):
    ensure_ok(book.load())
    result = ensure_ok(book.reminder(fee_id))
    reminder = result.data
    return {
        'message': result.message,
        'fee_id': reminder.fee_id,
        'phone': reminder.phone,
        'text': reminder.message,
        'url': reminder.url,
    }
