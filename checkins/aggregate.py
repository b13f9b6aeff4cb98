from __future__ import annotations
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List
from .dedupe import record_name, has_check_in_date
from .utils import cell_text

BREAKDOWN_FIELDS = ("county", "grade", "gender", "home_zip_code", "school_name", "age")

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def _present(field: str, v: Any) -> bool:
    # age 0 is a value, an empty school name is not
    if field == "age":
        return v is not None
    return bool(v)


def category_counts(profiles: Dict[str, Dict[str, Any]], field: str) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for p in profiles.values():
        v = p.get(field)
        if not _present(field, v):
            continue
        k = cell_text(v)
        counts[k] = counts.get(k, 0) + 1
    return counts


def category_breakdowns(profiles: Dict[str, Dict[str, Any]]) -> Dict[str, Dict[str, int]]:
    # counts per unique student, not per visit
    return {f: category_counts(profiles, f) for f in BREAKDOWN_FIELDS}


def total_check_ins(records: List[Dict[str, Any]]) -> int:
    # every visit counts, repeat visits included
    return sum(
        1 for r in records
        if record_name(r) and r.get("checked_in") is True and has_check_in_date(r)
    )


def _check_in_days(records: Iterable[Dict[str, Any]]) -> Iterable[date]:
    # calendar date of each check-in in local time
    for r in records:
        if has_check_in_date(r):
            yield r["check_in_date"].astimezone().date()


def month_label(year: int, month: int) -> str:
    return f"{MONTH_NAMES[month - 1]} {year}"


def monthly_counts(records: List[Dict[str, Any]]) -> Dict[str, int]:
    """
    Check-ins per calendar month, oldest first, labelled like 'March 2024'.
    """
    by_month: Dict[tuple, int] = {}
    for d in _check_in_days(records):
        ym = (d.year, d.month)
        by_month[ym] = by_month.get(ym, 0) + 1
    return {month_label(y, m): n for (y, m), n in sorted(by_month.items())}


def week_start(day: date) -> datetime:
    # Sunday that opens the week, as UTC midnight
    sunday = day - timedelta(days=(day.weekday() + 1) % 7)
    return datetime(sunday.year, sunday.month, sunday.day, tzinfo=timezone.utc)


def _us_date(d: date) -> str:
    return f"{d.month}/{d.day}/{d.year}"


def week_range(start: datetime) -> str:
    first = start.date()
    last = first + timedelta(days=6)
    return f"{_us_date(first)} - {_us_date(last)}"


def weekly_counts(records: List[Dict[str, Any]]) -> Dict[str, int]:
    """
    Check-ins per Sunday-Saturday week, oldest first, labelled like
    '12/31/2023 - 1/6/2024'.
    """
    by_week: Dict[datetime, int] = {}
    for d in _check_in_days(records):
        k = week_start(d)
        by_week[k] = by_week.get(k, 0) + 1
    return {week_range(k): n for k, n in sorted(by_week.items())}
