from fastapi import APIRouter, Depends

from tuition.dependencies import ensure_ok, get_store, get_time_provider
from tuition.route_logging import EndpointNameRoute
from tuition.schemas import RemarkCreateRequest
from tuition.services.remarks_service import RemarksLog
from tuition.store.client import StoreClient


router = APIRouter(prefix='/remarks', tags=['Remarks'], route_class=EndpointNameRoute)


def _log_payload(log: RemarksLog, message: str = '') -> dict:
    return {
        'message': message,
        'students': [{'id': student.id, 'name': student.name} for student in log.students],
        'leaderboard': [
            {'student_id': entry.student_id, 'student_name': entry.student_name, 'remark_count': entry.remark_count}
            for entry in log.rank()
        ],
        'remarks': [
            {
                'id': remark.id,
                'student_id': remark.student_id,
                'student_name': remark.student_name,
                'remark': remark.remark,
                'created_at': remark.created_at.isoformat(),
            }
            for remark in log.list_all()
        ],
    }


def _log(store: StoreClient = Depends(get_store), time_provider=Depends(get_time_provider)) -> RemarksLog:
    return RemarksLog(store, time_provider=time_provider)


@router.get('')
def remarks(log: RemarksLog = Depends(_log)):
    ensure_ok(log.load())
    return _log_payload(log)


@router.post('', status_code=201)
def add_remark(payload: RemarkCreateRequest, log: RemarksLog = Depends(_log)):
    result = ensure_ok(log.add_remark(payload.student_id, payload.remark))
    return {**_log_payload(log, result.message), 'id': result.data}
