"""Pure projections of the record set and pin set for presentation."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from firdesk.schemas.fir import FIRRecord
from firdesk.services.board import BoardColumn

PINNED_GROUP_KEY = "pinned"
PINNED_GROUP_LABEL = "Pinned/Important"


@dataclass(frozen=True)
class DateGroup:
    """One section of the date-grouped list."""

    key: str
    label: str
    relative_label: str
    records: tuple[FIRRecord, ...]
    pinned: bool = False


def local_date(value: datetime) -> date:
    """Calendar date of ``value`` in local time (naive values are already local)."""
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.date()


def format_date(value: date) -> str:
    return value.strftime("%d %b %Y")


def relative_date_label(value: date, today: date) -> str:
    if value == today:
        return "Today"
    if value == today - timedelta(days=1):
        return "Yesterday"
    return format_date(value)


def _timestamp(value: datetime) -> float:
    # Naive datetimes are local; aware ones compare on the absolute instant
    return value.timestamp()


def pinned_first(records: Iterable[FIRRecord], pinned: Iterable[int]) -> list[FIRRecord]:
    """
    Pinned before unpinned, newest filing first inside each part.

    Pinned records are ordered by filing time like the rest, not by the
    order they were pinned in. Records filed at the same instant keep their
    input (loaded) order.
    """
    pinned_ids = frozenset(pinned)
    by_filed = sorted(records, key=lambda r: _timestamp(r.created_at), reverse=True)
    # Stable: keeps the filing order within each part
    return sorted(by_filed, key=lambda r: r.id not in pinned_ids)


def flat_list(records: Sequence[FIRRecord], pinned: Iterable[int]) -> list[FIRRecord]:
    """Flat list view."""
    return pinned_first(records, pinned)


def _group_order(record: FIRRecord) -> tuple[int, float]:
    # Highest priority first, earliest filed first among equals
    return (-record.priority.rank, _timestamp(record.created_at))


def date_groups(
    records: Sequence[FIRRecord],
    pinned: Iterable[int],
    today: date | None = None,
) -> list[DateGroup]:
    """
    Date-grouped list view.

    Pinned records form a leading group regardless of date. The rest are
    grouped by local filing date, groups newest first, and each group is
    ordered by priority then filing time.
    """
    today = today or date.today()
    pinned_ids = frozenset(pinned)

    pinned_records = [r for r in records if r.id in pinned_ids]
    buckets: dict[date, list[FIRRecord]] = {}
    for record in records:
        if record.id in pinned_ids:
            continue
        buckets.setdefault(local_date(record.created_at), []).append(record)

    groups: list[DateGroup] = []
    if pinned_records:
        groups.append(
            DateGroup(
                key=PINNED_GROUP_KEY,
                label=PINNED_GROUP_LABEL,
                relative_label=PINNED_GROUP_LABEL,
                records=tuple(sorted(pinned_records, key=_group_order)),
                pinned=True,
            )
        )

    newest = {
        day: max(_timestamp(r.created_at) for r in items) for day, items in buckets.items()
    }
    for day in sorted(buckets, key=lambda d: newest[d], reverse=True):
        groups.append(
            DateGroup(
                key=day.isoformat(),
                label=format_date(day),
                relative_label=relative_date_label(day, today),
                records=tuple(sorted(buckets[day], key=_group_order)),
            )
        )
    return groups


def board_columns(
    records: Sequence[FIRRecord], pinned: Iterable[int]
) -> dict[BoardColumn, list[FIRRecord]]:
    """Kanban view: every column present, REJECTED shown under CLOSED."""
    pinned_ids = frozenset(pinned)
    columns: dict[BoardColumn, list[FIRRecord]] = {column: [] for column in BoardColumn}
    for record in records:
        columns[BoardColumn.for_status(record.status)].append(record)
    return {column: pinned_first(items, pinned_ids) for column, items in columns.items()}
