"""Dashboard counters over the loaded FIRs."""

from collections import Counter
from collections.abc import Iterable

from pydantic import BaseModel

from firdesk.schemas.fir import FIRRecord, FIRStatus, Priority

ACTIVE_STATUSES = frozenset(
    {FIRStatus.APPROVED, FIRStatus.UNDER_INVESTIGATION, FIRStatus.IN_PROGRESS}
)
CLOSED_STATUSES = frozenset({FIRStatus.CLOSED, FIRStatus.REJECTED})


class DashboardStats(BaseModel):
    """Summary counters shown above the list."""

    total: int
    pending: int
    active: int
    closed: int
    emergency: int
    by_status: dict[FIRStatus, int]
    by_priority: dict[Priority, int]


def compute_stats(records: Iterable[FIRRecord]) -> DashboardStats:
    records = list(records)
    by_status = Counter(r.status for r in records)
    by_priority = Counter(r.priority for r in records)
    return DashboardStats(
        total=len(records),
        pending=by_status[FIRStatus.PENDING],
        active=sum(by_status[s] for s in ACTIVE_STATUSES),
        closed=sum(by_status[s] for s in CLOSED_STATUSES),
        emergency=by_priority[Priority.EMERGENCY],
        by_status={s: by_status[s] for s in FIRStatus},
        by_priority={p: by_priority[p] for p in Priority},
    )
