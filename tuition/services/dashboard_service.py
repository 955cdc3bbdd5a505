from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from tuition.core.results import OpResult, result_from_error
from tuition.core.time_provider import TimeProvider, default_time_provider
from tuition.models import AttendanceRecord, AttendanceStatus, Fee, FeeStatus, Remark, Student
from tuition.services.view_state import HANDLED_ERRORS
from tuition.store.client import StoreClient


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardStats:
    total_students: int = 0
    present_today: int = 0
    unpaid_fees: int = 0
    total_remarks: int = 0


async def fetch_dashboard_stats(
    store: StoreClient,
    *,
    time_provider: TimeProvider = default_time_provider,
) -> DashboardStats:
    """Issue the four counts concurrently and fail as a whole if any one fails."""
    today = time_provider.today()
    total_students, present_today, unpaid_fees, total_remarks = await asyncio.gather(
        asyncio.to_thread(store.count, Student),
        asyncio.to_thread(
            store.count,
            AttendanceRecord,
            where={'attendance_date': today, 'status': AttendanceStatus.PRESENT.value},
        ),
        asyncio.to_thread(store.count, Fee, where={'status': FeeStatus.NOT_PAID.value}),
        asyncio.to_thread(store.count, Remark),
    )
    return DashboardStats(
        total_students=total_students,
        present_today=present_today,
        unpaid_fees=unpaid_fees,
        total_remarks=total_remarks,
    )


class DashboardView:
    def __init__(self, store: StoreClient, *, time_provider: TimeProvider = default_time_provider) -> None:
        self.store = store
        self.time_provider = time_provider
        self.loading = False
        self.stats = DashboardStats()

    async def load(self) -> OpResult:
        self.loading = True
        try:
            self.stats = await fetch_dashboard_stats(self.store, time_provider=self.time_provider)
            return OpResult.success(data=self.stats)
        except HANDLED_ERRORS as exc:
            return result_from_error(
                exc,
                failure_message='Failed to fetch dashboard statistics',
                logger=logger,
                event='dashboard_load_failed',
            )
        finally:
            self.loading = False
