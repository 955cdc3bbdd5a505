from fastapi import APIRouter, Depends, Query

from tuition.dependencies import ensure_ok, get_store, get_time_provider
from tuition.route_logging import EndpointNameRoute
from tuition.schemas import StudentCreateRequest
from tuition.services.student_service import StudentRoster
from tuition.store.client import StoreClient
from tuition.store.read_models import StudentRow


router = APIRouter(prefix='/students', tags=['Students'], route_class=EndpointNameRoute)


def serialize_student(student: StudentRow) -> dict:
    return {
        'id': student.id,
        'name': student.name,
        'parent_name': student.parent_name,
        'parent_phone': student.parent_phone,
        'address': student.address,
        'enrolled_date': student.enrolled_date.isoformat(),
    }


def _roster_payload(roster: StudentRoster, message: str = '') -> dict:
    return {
        'message': message,
        'students': [serialize_student(student) for student in roster.students],
    }


def _roster(store: StoreClient = Depends(get_store), time_provider=Depends(get_time_provider)) -> StudentRoster:
    return StudentRoster(store, time_provider=time_provider)


@router.get('')
def list_students(roster: StudentRoster = Depends(_roster)):
    ensure_ok(roster.load())
    return _roster_payload(roster)


@router.post('', status_code=201)
def add_student(payload: StudentCreateRequest, roster: StudentRoster = Depends(_roster)):
    result = ensure_ok(roster.add(payload.name, payload.parent_name, payload.parent_phone, payload.address))
    return {**_roster_payload(roster, result.message), 'id': result.data}


@router.delete('/{student_id}')
def remove_student(
    student_id: str,
    confirm: bool = Query(default=False),
    roster: StudentRoster = Depends(_roster),
):
    result = ensure_ok(roster.remove(student_id, confirmed=confirm))
    return _roster_payload(roster, result.message)
