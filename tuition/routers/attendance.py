from datetime import date

from fastapi import APIRouter, Depends, Query

from tuition.dependencies import ensure_ok, get_store, get_time_provider
from tuition.route_logging import EndpointNameRoute
from tuition.schemas import AttendanceSaveRequest
from tuition.services.attendance_service import AttendanceSynchronizer
from tuition.store.client import StoreClient


router = APIRouter(prefix='/attendance', tags=['Attendance'], route_class=EndpointNameRoute)


def _sheet_payload(sync: AttendanceSynchronizer, message: str = '') -> dict:
    return {
        'message': message,
        'date': sync.selected_date.isoformat(),
        'is_today': sync.is_today,
        'view_only': sync.is_view_only,
        'stats': {
            'present': sync.stats.present,
            'absent': sync.stats.absent,
            'total': sync.stats.total,
        },
        'entries': [
            {'student_id': entry.student_id, 'student_name': entry.student_name, 'status': entry.status}
            for entry in sync.entries
        ],
    }


def _synchronizer(store: StoreClient = Depends(get_store), time_provider=Depends(get_time_provider)) -> AttendanceSynchronizer:
    return AttendanceSynchronizer(store, time_provider=time_provider)


@router.get('')
def attendance_sheet(
    on_date: date | None = Query(default=None, alias='date'),
    sync: AttendanceSynchronizer = Depends(_synchronizer),
):
    ensure_ok(sync.load(on_date))
    return _sheet_payload(sync)


@router.post('/save')
def save_attendance(payload: AttendanceSaveRequest, sync: AttendanceSynchronizer = Depends(_synchronizer)):
    ensure_ok(sync.load(payload.on_date))
    for mark in payload.records:
        ensure_ok(sync.set_status(mark.student_id, mark.status))
    result = ensure_ok(sync.save())
    return _sheet_payload(sync, result.message)
