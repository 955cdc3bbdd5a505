from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal

from tuition.models import AttendanceStatus, FeeStatus


@dataclass(frozen=True)
class AttendanceStats:
    present: int
    absent: int

    @property
    def total(self) -> int:
        return self.present + self.absent


@dataclass(frozen=True)
class FeeTotals:
    total: Decimal
    pending: Decimal
    collected: Decimal
    unpaid_count: int
    paid_count: int


@dataclass(frozen=True)
class LeaderboardEntry:
    student_id: str
    student_name: str
    remark_count: int


def attendance_stats(statuses: Iterable[str]) -> AttendanceStats:
    present = absent = 0
    for status in statuses:
        if status == AttendanceStatus.PRESENT.value:
            present += 1
        else:
            absent += 1
    return AttendanceStats(present=present, absent=absent)


def partition_fees(fees: Iterable) -> tuple[list, list]:
    unpaid, paid = [], []
    for fee in fees:
        (paid if fee.status == FeeStatus.PAID.value else unpaid).append(fee)
    return unpaid, paid


def fee_totals(fees: Iterable) -> FeeTotals:
    unpaid, paid = partition_fees(fees)
    pending = sum((Decimal(fee.amount) for fee in unpaid), Decimal('0'))
    collected = sum((Decimal(fee.amount) for fee in paid), Decimal('0'))
    return FeeTotals(
        total=pending + collected,
        pending=pending,
        collected=collected,
        unpaid_count=len(unpaid),
        paid_count=len(paid),
    )


def remark_leaderboard(students: Sequence, remarks: Iterable, *, limit: int = 6) -> list[LeaderboardEntry]:
    """Most-remarked students, highest count first.

    ``students`` must already be in display order (name, then id); ties keep
    that order because ``sorted`` is stable.
    """
    counts = Counter(remark.student_id for remark in remarks)
    ranked = [
        LeaderboardEntry(student_id=student.id, student_name=student.name, remark_count=counts[student.id])
        for student in students
        if counts[student.id] > 0
    ]
    ranked = sorted(ranked, key=lambda entry: entry.remark_count, reverse=True)
    return ranked[: max(0, limit)]
