from datetime import timedelta
from pathlib import Path
import sys


# Ensure imports work when running this file directly: `python scripts/init_db.py`.
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from tuition.core.time_provider import default_time_provider
from tuition.db import Base, SessionLocal, engine
from tuition.dependencies import get_store
from tuition.models import Student
from tuition.services.attendance_service import AttendanceSynchronizer
from tuition.services.fee_service import FeeBook
from tuition.services.remarks_service import RemarksLog
from tuition.services.student_service import StudentRoster


SAMPLE_STUDENTS = [
    ('Aarav Sharma', 'Ravi Sharma', '+91 99999 90001', '12 Lake Road, Chennai'),
    ('Diya Kapoor', 'Meena Kapoor', '+91 99999 90002', '4 Temple Street, Chennai'),
    ('Ishaan Gupta', 'Anil Gupta', '+91 99999 90003', '88 Market Lane, Chennai'),
]


Base.metadata.create_all(bind=engine)

db = SessionLocal()
try:
    already_seeded = db.query(Student).first() is not None
finally:
    db.close()

if not already_seeded:
    store = get_store()
    roster = StudentRoster(store)
    for name, parent_name, parent_phone, address in SAMPLE_STUDENTS:
        result = roster.add(name, parent_name, parent_phone, address)
        if not result.ok:
            sys.exit(f'Failed to add {name}: {result.message}')

    book = FeeBook(store)
    due = default_time_provider.today() + timedelta(days=5)
    for student in roster.students:
        book.add_fee(student.id, '2500', due)

    sheet = AttendanceSynchronizer(store)
    sheet.load()
    if sheet.entries:
        sheet.toggle(sheet.entries[0].student_id)
    sheet.save()

    RemarksLog(store).add_remark(roster.students[-1].id, 'Did not complete homework')

print('DB initialized with sample data.')
