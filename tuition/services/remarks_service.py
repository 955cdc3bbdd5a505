from __future__ import annotations

import logging

from tuition.config import settings
from tuition.core.errors import NotFoundError, SyncValidationError
from tuition.core.results import OpResult
from tuition.core.time_provider import TimeProvider, default_time_provider
from tuition.models import Remark, Student
from tuition.services.aggregates import LeaderboardEntry, remark_leaderboard
from tuition.services.view_state import ViewState
from tuition.store.client import StoreClient
from tuition.store.read_models import RemarkView, StudentRow, fetch_remark_views


logger = logging.getLogger(__name__)


class RemarksLog(ViewState):
    def __init__(self, store: StoreClient, *, time_provider: TimeProvider = default_time_provider) -> None:
        super().__init__(store, time_provider=time_provider)
        self.students: list[StudentRow] = []
        self.remarks: list[RemarkView] = []

    def load(self) -> OpResult:
        def run() -> OpResult:
            students = self.store.select(Student, order_by=('name', 'id'))
            remarks = fetch_remark_views(self.store)
            self.students = [StudentRow.from_model(student) for student in students]
            self.remarks = remarks
            return OpResult.success(data=self.remarks)

        return self._run('loading', 'remarks_load_failed', 'Failed to fetch data', run)

    def list_all(self) -> list[RemarkView]:
        return list(self.remarks)

    def rank(self, limit: int | None = None) -> list[LeaderboardEntry]:
        size = settings.remark_leaderboard_size if limit is None else limit
        return remark_leaderboard(self.students, self.remarks, limit=size)

    def add_remark(self, student_id: str | None, body: str | None) -> OpResult:
        def run() -> OpResult:
            sid = (student_id or '').strip()
            text = (body or '').strip()
            if not sid or not text:
                raise SyncValidationError('Please select a student and enter a remark')
            if self.store.get(Student, sid) is None:
                raise NotFoundError('Student', sid)
            (remark,) = self.store.insert(
                Remark,
                {'student_id': sid, 'remark': text, 'created_at': self.time_provider.naive_now()},
            )
            logger.info('remark_added remark_id=%s student_id=%s', remark.id, sid)
            return self._confirmed('Remark added successfully', remark.id)

        return self._run('saving', 'remark_add_failed', 'Failed to add remark', run)
